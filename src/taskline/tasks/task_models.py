# src/taskline/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import StrEnum


class Priority(StrEnum):
    """Task priority. Values are what gets stored and displayed."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, raw: str) -> Priority:
        """Case-insensitive lookup; accepts full names and l/m/h shorthands."""
        key = (raw or "").strip().lower()
        for p in cls:
            if key in (p.value.lower(), p.value[0].lower()):
                return p
        raise ValueError(f"unknown priority: {raw!r}")

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


_PRIORITY_RANK = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}


@dataclass(slots=True)
class Task:
    id: str
    name: str
    priority: Priority
    category: str
    due_date: date
    is_completed: bool = False

    # Stamped by the store (epoch seconds); values set by callers are ignored.
    created_at: float = 0.0
    updated_at: float = 0.0


@dataclass(slots=True, frozen=True)
class TaskPatch:
    """
    Partial update: None means "leave the field as it is".
    """

    name: str | None = None
    priority: Priority | None = None
    category: str | None = None
    due_date: date | None = None
    is_completed: bool | None = None

    def is_empty(self) -> bool:
        return all(
            v is None
            for v in (self.name, self.priority, self.category, self.due_date, self.is_completed)
        )


def as_date(value: date) -> date:
    """Drop the time of day from a datetime; due dates are whole days."""
    return value.date() if isinstance(value, datetime) else value


def new_id() -> str:
    return str(uuid.uuid4())


def new_task(name: str, priority: Priority, category: str, due_date: date) -> Task:
    """Build a fresh, not yet persisted task (incomplete, new id)."""
    return Task(
        id=new_id(),
        name=name,
        priority=priority,
        category=category,
        due_date=as_date(due_date),
        is_completed=False,
    )


def apply_update(existing: Task, patch: TaskPatch) -> Task:
    """
    Merge a patch into a task and return a new record.

    The original object is left untouched; id and timestamps are never merged.
    """
    changes: dict[str, object] = {}
    if patch.name is not None:
        changes["name"] = patch.name
    if patch.priority is not None:
        changes["priority"] = patch.priority
    if patch.category is not None:
        changes["category"] = patch.category
    if patch.due_date is not None:
        changes["due_date"] = as_date(patch.due_date)
    if patch.is_completed is not None:
        changes["is_completed"] = patch.is_completed
    return replace(existing, **changes)
