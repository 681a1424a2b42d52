# src/taskline/tasks/task_service.py

from __future__ import annotations

"""
Task service.

A thin layer over a TaskRepo that:
- creates tasks and applies partial updates,
- exposes the repo's filters and due-date sort,
- maps due-date periods (today / week / month) to date ranges,
- builds fuzzy search indexes from a snapshot of all tasks.

Input validation happens before these calls (see validation.py).
"""

import calendar
import logging
from collections.abc import Callable
from datetime import date, timedelta
from enum import StrEnum

from ..core.ports import TaskRepo
from ..errors import ValidationError
from .task_models import Priority, Task, TaskPatch, apply_update, new_task
from .task_search import DEFAULT_MIN_QUERY_LENGTH, DEFAULT_THRESHOLD, TaskSearchIndex
from .validation import parse_priority

logger = logging.getLogger(__name__)


class DueDatePeriod(StrEnum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def parse(cls, raw: str) -> DueDatePeriod:
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValidationError(f"Period must be one of: {choices}") from None


def add_months(day: date, months: int) -> date:
    """Advance the month field; the day is clamped to the target month's length."""
    idx = day.month - 1 + months
    year, month = day.year + idx // 12, idx % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def due_date_range(period: DueDatePeriod | str, today: date) -> tuple[date, date]:
    """[today, end) for the given period."""
    p = period if isinstance(period, DueDatePeriod) else DueDatePeriod.parse(period)
    if p is DueDatePeriod.TODAY:
        return today, today + timedelta(days=1)
    if p is DueDatePeriod.WEEK:
        return today, today + timedelta(days=7)
    return today, add_months(today, 1)


class TaskService:
    def __init__(
        self,
        repo: TaskRepo,
        *,
        clock: Callable[[], date] = date.today,
        search_threshold: float = DEFAULT_THRESHOLD,
        search_min_query_length: int = DEFAULT_MIN_QUERY_LENGTH,
    ) -> None:
        self._repo = repo
        self._clock = clock
        self._search_threshold = search_threshold
        self._search_min_query_length = search_min_query_length

    @property
    def repo(self) -> TaskRepo:
        return self._repo

    def today(self) -> date:
        return self._clock()

    # ---- mutations ----

    def add(self, name: str, priority: Priority | str, category: str, due_date: date) -> Task:
        task = self._repo.create(new_task(name, parse_priority(priority), category, due_date))
        logger.info("Task created id=%s name=%r", task.id, task.name)
        return task

    def update(self, task_id: str, patch: TaskPatch) -> Task | None:
        """
        Apply a partial update. Returns None if the task does not exist.
        An empty patch is a no-op and returns the stored task unchanged.
        """
        existing = self._repo.find_by_id(task_id)
        if existing is None:
            return None
        if patch.is_empty():
            return existing
        return self._repo.update(apply_update(existing, patch))

    def mark_complete(self, task_id: str) -> bool:
        existing = self._repo.find_by_id(task_id)
        if existing is None:
            return False
        if existing.is_completed:
            return True
        self._repo.update(apply_update(existing, TaskPatch(is_completed=True)))
        logger.info("Task completed id=%s", task_id)
        return True

    def remove(self, task_id: str) -> bool:
        removed = self._repo.delete(task_id)
        if removed:
            logger.info("Task removed id=%s", task_id)
        return removed

    # ---- queries ----

    def get_all(self) -> list[Task]:
        return self._repo.find_all()

    def get_by_id(self, task_id: str) -> Task | None:
        return self._repo.find_by_id(task_id)

    def filter_by_priority(self, priority: Priority | str) -> list[Task]:
        return self._repo.find_by_priority(parse_priority(priority))

    def filter_by_category(self, category: str) -> list[Task]:
        return self._repo.find_by_category(category)

    def filter_by_completion(self, is_completed: bool) -> list[Task]:
        return self._repo.find_by_completion(is_completed)

    def filter_by_due_date_range(self, start: date, end: date) -> list[Task]:
        return self._repo.find_by_due_date_range(start, end)

    def filter_by_due_date_period(
        self, period: DueDatePeriod | str, *, today: date | None = None
    ) -> list[Task]:
        start, end = due_date_range(period, today or self._clock())
        return self._repo.find_by_due_date_range(start, end)

    def sort_by_due_date(self, ascending: bool = True) -> list[Task]:
        return self._repo.find_all_sorted_by_due_date(ascending)

    def get_unique_categories(self) -> list[str]:
        return self._repo.get_unique_categories()

    # ---- search ----

    def build_search_index(self) -> TaskSearchIndex:
        """Snapshot all tasks into a new index (one per search session)."""
        return TaskSearchIndex(
            self._repo.find_all(),
            threshold=self._search_threshold,
            min_query_length=self._search_min_query_length,
        )

    def search(self, term: str) -> list[Task]:
        return self.build_search_index().search(term)
