# tests/test_bootstrap.py

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import pytest

from taskline.cli.bootstrap import create_initial_state
from taskline.config import Settings
from taskline.errors import StorageError
from taskline.logging_setup import resolve_level, setup_logging
from taskline.tasks.task_models import Priority


def test_create_initial_state_wires_sqlite_store(settings) -> None:
    state = create_initial_state(settings=settings)

    task = state.tasks.add("x", Priority.LOW, "c", date(2030, 1, 1))
    assert settings.tasks_db_path.exists()
    assert state.task_store.find_by_id(task.id) == task


def test_blocked_data_dir_is_storage_error(settings, tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    settings.data_dir = blocker
    settings.tasks_db_path = blocker / "tasks.sqlite3"

    with pytest.raises(StorageError):
        create_initial_state(settings=settings)


def test_settings_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKLINE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKLINE_SEARCH_THRESHOLD", "not-a-number")
    monkeypatch.setenv("TASKLINE_SEARCH_MIN_QUERY_LENGTH", "3")
    monkeypatch.delenv("TASKLINE_TASKS_DB_PATH", raising=False)
    monkeypatch.delenv("TASKLINE_LOG_DIR", raising=False)

    s = Settings.from_env()
    assert s.data_dir == tmp_path
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.log_dir == tmp_path
    assert s.search_threshold == 0.4
    assert s.search_min_query_length == 3


def test_settings_threshold_is_clamped(monkeypatch) -> None:
    monkeypatch.setenv("TASKLINE_SEARCH_THRESHOLD", "7")
    assert Settings.from_env().search_threshold == 1.0


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path)
        logging.getLogger("taskline.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert log_file == tmp_path / "taskline.log"
        assert "hello file" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("info", logging.INFO),
        (" Debug ", logging.DEBUG),
        (logging.ERROR, logging.ERROR),
        ("loud", logging.WARNING),
    ],
)
def test_resolve_level(raw, expected: int) -> None:
    assert resolve_level(raw) == expected


def test_setup_logging_survives_unusable_log_dir(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        assert setup_logging(log_dir=blocker, console_level="error") is None
        (console,) = root.handlers
        assert console.level == logging.ERROR
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
