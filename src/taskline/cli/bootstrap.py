# src/taskline/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite store and the task service into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..errors import StorageError
from ..tasks.task_search import DEFAULT_MIN_QUERY_LENGTH, DEFAULT_THRESHOLD
from ..tasks.task_service import TaskService
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    for path in (settings.data_dir, settings.tasks_db_path.parent):
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"cannot create data directory {path}: {e}") from e


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(settings.tasks_db_path)
    service = TaskService(
        store,
        search_threshold=getattr(settings, "search_threshold", DEFAULT_THRESHOLD),
        search_min_query_length=getattr(
            settings, "search_min_query_length", DEFAULT_MIN_QUERY_LENGTH
        ),
    )
    logger.debug("State created db=%s", settings.tasks_db_path)
    return AppState(settings=settings, task_store=store, tasks=service)
