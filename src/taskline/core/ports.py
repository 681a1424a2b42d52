# src/taskline/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

TaskService depends on this Protocol instead of the concrete SQLite store.
This keeps the backend swappable and makes testing easier.
"""

from datetime import date
from typing import Protocol

from ..tasks.task_models import Priority, Task


class TaskRepo(Protocol):
    """
    Storage contract for tasks.

    Absence is never an error: lookups return None, delete returns False,
    filters return []. Backend failures raise StorageError.
    """

    # CRUD
    def create(self, task: Task) -> Task: ...
    def find_all(self) -> list[Task]: ...
    def find_by_id(self, task_id: str) -> Task | None: ...
    def update(self, task: Task) -> Task: ...
    def delete(self, task_id: str) -> bool: ...

    # Filters
    def find_by_priority(self, priority: Priority) -> list[Task]: ...
    def find_by_category(self, category: str) -> list[Task]: ...
    def find_by_completion(self, is_completed: bool) -> list[Task]: ...
    def find_by_due_date_range(self, start: date, end: date) -> list[Task]: ...

    # Sorting / aggregates
    def find_all_sorted_by_due_date(self, ascending: bool = True) -> list[Task]: ...
    def get_unique_categories(self) -> list[str]: ...
