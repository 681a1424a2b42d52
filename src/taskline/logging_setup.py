# src/taskline/logging_setup.py

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

LOG_FILE_NAME = "taskline.log"
_FILE_MAX_BYTES = 1_000_000
_FILE_BACKUPS = 3


class _ConsoleNoiseFilter(logging.Filter):
    """Console shows taskline records; everything else (py.warnings included) only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "taskline" or record.name.startswith("taskline."):
            return True
        return record.levelno >= logging.ERROR


def resolve_level(level: int | str, default: int = logging.WARNING) -> int:
    """Accept a logging level as an int or a name like "info"; unknown names give `default`."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else default


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskline",
    console_level: int | str = logging.WARNING,
    file_level: int | str = logging.DEBUG,
) -> Path | None:
    """
    Console: short lines on stderr so task tables on stdout stay readable.
    File: rotating taskline.log with timestamps and logger names.

    Returns the log file path, or None when the log directory is unusable
    (the console handler is still installed in that case).
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(resolve_level(console_level))
    ch.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    logging.captureWarnings(True)

    log_file = Path(log_dir) / LOG_FILE_NAME
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.handlers.RotatingFileHandler(
            str(log_file),
            maxBytes=_FILE_MAX_BYTES,
            backupCount=_FILE_BACKUPS,
            encoding="utf-8",
        )
    except OSError as e:
        logging.getLogger("taskline").warning("File logging disabled (%s): %s", log_file, e)
        return None

    fh.setLevel(resolve_level(file_level, logging.DEBUG))
    fh.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)-7s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(fh)
    return log_file
