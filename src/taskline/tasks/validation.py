# src/taskline/tasks/validation.py

"""
Entry-point checks for user-supplied task fields.

The console (or any other caller) runs these before building a Task; the
store and the service never re-validate. Every failure raises
ValidationError with a message that can be shown to the user as-is.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from ..errors import ValidationError
from .task_models import Priority

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def validate_name(raw: str | None) -> str:
    name = (raw or "").strip()
    if not name:
        raise ValidationError("Task name cannot be empty")
    return name


def validate_category(raw: str | None) -> str:
    category = (raw or "").strip()
    if not category:
        raise ValidationError("Category cannot be empty")
    return category


def parse_priority(raw: str | None) -> Priority:
    try:
        return Priority.parse(raw or "")
    except ValueError:
        choices = ", ".join(p.value for p in Priority)
        raise ValidationError(f"Priority must be one of: {choices}") from None


def parse_due_date(raw: str | None, *, today: date | None = None) -> date:
    """Parse YYYY-MM-DD and reject dates before today."""
    text = (raw or "").strip()
    m = _DATE_RE.match(text)
    if not m:
        raise ValidationError("Please enter the date in YYYY-MM-DD format")

    year, month, day = (int(g) for g in m.groups())
    if year < 1:
        raise ValidationError("Please enter a valid date")
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    month_days = calendar.monthrange(year, month)[1]
    if not 1 <= day <= month_days:
        raise ValidationError(f"Day must be between 1 and {month_days} for the selected month")

    due = date(year, month, day)
    if due < (today or date.today()):
        raise ValidationError("Due date cannot be in the past")
    return due


@dataclass(slots=True, frozen=True)
class CategorySuggestions:
    matches: list[str]
    # True when the typed term is not an existing category (case-insensitive).
    is_new: bool


def suggest_categories(term: str | None, existing: Iterable[str]) -> CategorySuggestions:
    """Existing categories containing `term` (case-insensitive)."""
    cats = list(existing)
    needle = (term or "").strip()
    if not needle:
        return CategorySuggestions(matches=cats, is_new=False)

    key = needle.casefold()
    matches = [c for c in cats if key in c.casefold()]
    is_new = not any(c.casefold() == key for c in matches)
    return CategorySuggestions(matches=matches, is_new=is_new)
