# src/taskline/errors.py

from __future__ import annotations


class TasklineError(Exception):
    """Base class for errors raised by taskline."""


class ValidationError(TasklineError, ValueError):
    """User input rejected at the entry point (name, category, priority, due date)."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class StorageError(TasklineError):
    """The storage backend could not complete an operation."""


class TaskNotFoundError(TasklineError, LookupError):
    """
    Raised only by TaskRepo.update() when the row disappeared.

    Every other lookup reports absence as None / False / [].
    """

    def __init__(self, task_id: str) -> None:
        super().__init__(f"task not found: {task_id}")
        self.task_id = task_id
