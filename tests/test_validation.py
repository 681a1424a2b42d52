# tests/test_validation.py

from __future__ import annotations

from datetime import date

import pytest

from taskline.errors import ValidationError
from taskline.tasks.task_models import Priority
from taskline.tasks.validation import (
    parse_due_date,
    parse_priority,
    suggest_categories,
    validate_category,
    validate_name,
)

TODAY = date(2025, 3, 1)


def test_name_and_category_are_stripped_and_required() -> None:
    assert validate_name("  Buy milk ") == "Buy milk"
    assert validate_category(" Work") == "Work"

    with pytest.raises(ValidationError, match="Task name cannot be empty"):
        validate_name("   ")
    with pytest.raises(ValidationError, match="Category cannot be empty"):
        validate_category(None)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("high", Priority.HIGH), ("MEDIUM", Priority.MEDIUM), ("l", Priority.LOW), (" Low ", Priority.LOW)],
)
def test_parse_priority(raw: str, expected: Priority) -> None:
    assert parse_priority(raw) is expected


def test_parse_priority_rejects_unknown() -> None:
    with pytest.raises(ValidationError) as exc:
        parse_priority("urgent")
    assert "Low, Medium, High" in exc.value.reason


def test_parse_due_date_accepts_today_and_future() -> None:
    assert parse_due_date("2025-03-01", today=TODAY) == TODAY
    assert parse_due_date(" 2025-12-31 ", today=TODAY) == date(2025, 12, 31)


@pytest.mark.parametrize(
    ("raw", "reason"),
    [
        ("2025-3-1", "Please enter the date in YYYY-MM-DD format"),
        ("tomorrow", "Please enter the date in YYYY-MM-DD format"),
        ("2025-13-01", "Month must be between 1 and 12"),
        ("2025-04-31", "Day must be between 1 and 30 for the selected month"),
        ("2025-02-29", "Day must be between 1 and 28 for the selected month"),
        ("2025-02-28", "Due date cannot be in the past"),
    ],
)
def test_parse_due_date_rejects(raw: str, reason: str) -> None:
    with pytest.raises(ValidationError) as exc:
        parse_due_date(raw, today=TODAY)
    assert exc.value.reason == reason


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        validate_name("")


def test_suggest_categories() -> None:
    existing = ["Errands", "Home", "Work"]

    everything = suggest_categories("", existing)
    assert everything.matches == existing
    assert everything.is_new is False

    partial = suggest_categories("o", existing)
    assert partial.matches == ["Home", "Work"]
    assert partial.is_new is True

    exact = suggest_categories("work", existing)
    assert exact.matches == ["Work"]
    assert exact.is_new is False


def test_priority_order() -> None:
    assert sorted(Priority, key=lambda p: p.rank) == [Priority.LOW, Priority.MEDIUM, Priority.HIGH]
    assert Priority.from_db("bogus") is Priority.MEDIUM
