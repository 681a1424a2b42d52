# src/taskline/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL in the
main thread until /exit, EOF or Ctrl+C.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..errors import StorageError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    # TaskStore uses short-lived sqlite connections per call; close() is a no-op hook.
    try:
        store = getattr(state, "task_store", None)
        if store is not None and hasattr(store, "close"):
            store.close()
    except Exception:
        logger.debug("Task store close failed.", exc_info=True)


def main() -> int:
    settings = get_settings()

    log_dir = getattr(settings, "log_dir", None) or getattr(settings, "data_dir", ".local/taskline")
    setup_logging(log_dir=log_dir, console_level=getattr(settings, "log_level", "WARNING"))

    logger.info("Starting %s...", getattr(settings, "app_name", "taskline"))

    try:
        state = create_initial_state(settings=settings)
    except StorageError as e:
        logger.error("Cannot open task storage: %s", e)
        print(f"Cannot open task storage: {e}", file=sys.stderr)
        return 1

    try:
        run_console_loop(state)
    finally:
        _shutdown(state)
        logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
