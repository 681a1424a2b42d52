# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskline.core.state import AppState
from taskline.tasks.task_service import TaskService
from taskline.tasks.task_store import TaskStore

from .fakes import FixedClock, InMemoryTaskRepo

TODAY = date(2025, 3, 1)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the composition root.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskline-test",
        log_level="WARNING",
        data_dir=tmp_path,
        log_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        search_threshold=0.4,
        search_min_query_length=2,
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(TODAY)


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path)


@pytest.fixture(params=["sqlite", "memory"])
def service(request: pytest.FixtureRequest, settings: SimpleNamespace, clock: FixedClock) -> TaskService:
    """
    TaskService over both backends: the contract must not depend on SQLite.
    """
    repo = TaskStore(settings.tasks_db_path) if request.param == "sqlite" else InMemoryTaskRepo()
    return TaskService(repo, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FixedClock) -> AppState:
    """
    AppState wired with a real SQLite store and a fixed clock.
    """
    store = TaskStore(settings.tasks_db_path)
    return AppState(settings=settings, task_store=store, tasks=TaskService(store, clock=clock))
