# src/taskline/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable, Sequence
from datetime import datetime

from ..core.state import AppState
from ..errors import ValidationError
from ..tasks.task_models import Priority, Task, TaskPatch
from ..tasks.task_service import DueDatePeriod
from ..tasks.validation import (
    parse_due_date,
    parse_priority,
    suggest_categories,
    validate_category,
    validate_name,
)

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

MIN_ID_PREFIX = 4
_TRUE_WORDS = ("yes", "y", "true", "1", "done", "completed")
_FALSE_WORDS = ("no", "n", "false", "0", "pending")


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Arguments are shell-quoted: /add "Buy milk" low Errands 2030-01-01
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except ValidationError as e:
            logger.debug("Command /%s rejected: %s", name, e.reason)
            return f"Invalid input: {e.reason}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting ----

def _fmt_ts(ts: float) -> str:
    if not ts:
        return "-"
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M")


def _clip(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 1] + "~"


def format_tasks(tasks: Sequence[Task]) -> str:
    header = f"{'#':>3}  {'ID':<8}  {'Name':<28}  {'Priority':<8}  {'Category':<16}  {'Due':<10}  Status"
    lines = [header, "-" * len(header)]
    for i, t in enumerate(tasks, start=1):
        status = "Completed" if t.is_completed else "Pending"
        lines.append(
            f"{i:>3}  {t.id[:8]:<8}  {_clip(t.name, 28):<28}  {t.priority.value:<8}  "
            f"{_clip(t.category, 16):<16}  {t.due_date.isoformat():<10}  {status}"
        )
    return "\n".join(lines)


def format_task_details(task: Task) -> str:
    return (
        f"Task {task.id}\n"
        f"  Name:     {task.name}\n"
        f"  Priority: {task.priority.value}\n"
        f"  Category: {task.category}\n"
        f"  Due:      {task.due_date.isoformat()}\n"
        f"  Status:   {'Completed' if task.is_completed else 'Pending'}\n"
        f"  Created:  {_fmt_ts(task.created_at)}\n"
        f"  Updated:  {_fmt_ts(task.updated_at)}"
    )


def _listing(tasks: Sequence[Task], title: str, empty: str) -> str:
    if not tasks:
        return empty
    return f"{title}\n{format_tasks(tasks)}"


def _parse_bool(raw: str) -> bool:
    key = raw.strip().lower()
    if key in _TRUE_WORDS:
        return True
    if key in _FALSE_WORDS:
        return False
    raise ValidationError("Completion must be yes/no (or done/pending)")


def resolve_task(state: AppState, ref: str) -> tuple[Task | None, str | None]:
    """
    Find a task by full id or by a unique id prefix.

    Returns (task, None) or (None, message).
    """
    ref = ref.strip()
    if not ref:
        return None, "Task id is required."

    task = state.tasks.get_by_id(ref)
    if task is not None:
        return task, None

    if len(ref) < MIN_ID_PREFIX:
        return None, f"Task not found: {ref} (use at least {MIN_ID_PREFIX} id characters)."

    matches = [t for t in state.tasks.get_all() if t.id.startswith(ref)]
    if not matches:
        return None, f"Task not found: {ref}"
    if len(matches) > 1:
        return None, f"Ambiguous id prefix {ref!r}: {len(matches)} tasks match."
    return matches[0], None


# ---- handlers ----

def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <name> <priority> <category> <YYYY-MM-DD>
    """
    if len(args) != 4:
        return 'Usage: /add "<name>" <low|medium|high> "<category>" <YYYY-MM-DD>'

    name = validate_name(args[0])
    priority = parse_priority(args[1])
    category = validate_category(args[2])
    due = parse_due_date(args[3], today=state.tasks.today())

    # Reuse the stored spelling when the category already exists.
    suggestions = suggest_categories(category, state.tasks.get_unique_categories())
    if not suggestions.is_new:
        category = next(c for c in suggestions.matches if c.casefold() == category.casefold())

    task = state.tasks.add(name, priority, category, due)
    return f"Task added: {task.id[:8]} {task.name}"


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.tasks.get_all()
    return _listing(tasks, f"All tasks ({len(tasks)}):", "No tasks found!")


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id>"
    task, err = resolve_task(state, args[0])
    if task is None:
        return err or "Task not found."
    return format_task_details(task)


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> name=... priority=... category=... due=YYYY-MM-DD done=yes|no
    """
    if len(args) < 2:
        return "Usage: /edit <id> field=value ... (fields: name, priority, category, due, done)"

    task, err = resolve_task(state, args[0])
    if task is None:
        return err or "Task not found."

    fields: dict[str, object] = {}
    for item in args[1:]:
        key, sep, value = item.partition("=")
        key = key.strip().lower()
        if not sep:
            return f"Expected field=value, got {item!r}."
        if key == "name":
            fields["name"] = validate_name(value)
        elif key == "priority":
            fields["priority"] = parse_priority(value)
        elif key == "category":
            fields["category"] = validate_category(value)
        elif key in ("due", "due_date"):
            fields["due_date"] = parse_due_date(value, today=state.tasks.today())
        elif key in ("done", "completed"):
            fields["is_completed"] = _parse_bool(value)
        else:
            return f"Unknown field: {key}. Fields: name, priority, category, due, done."

    updated = state.tasks.update(task.id, TaskPatch(**fields))  # type: ignore[arg-type]
    if updated is None:
        return f"Task not found: {task.id}"
    return f"Task updated.\n{format_task_details(updated)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task, err = resolve_task(state, args[0])
    if task is None:
        return err or "Task not found."
    if task.is_completed:
        return f"Task already completed: {task.name}"
    if not state.tasks.mark_complete(task.id):
        return f"Task not found: {task.id}"
    return f"Task marked as complete: {task.name}"


def cmd_remove(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    task, err = resolve_task(state, args[0])
    if task is None:
        return err or "Task not found."
    if state.tasks.remove(task.id):
        return f"Task removed: {task.name}"
    return "Failed to remove task."


def cmd_priority(state: AppState, args: list[str]) -> str:
    """
    /priority              -> task counts per priority, highest first
    /priority <priority>   -> tasks with that priority
    """
    if not args:
        return format_priority_summary(state.tasks.get_all())
    priority = parse_priority(args[0])
    tasks = state.tasks.filter_by_priority(priority)
    return _listing(
        tasks,
        f"Tasks with priority {priority.value}:",
        f"No tasks found with priority: {priority.value}",
    )


def format_priority_summary(tasks: Sequence[Task]) -> str:
    lines = ["Tasks by priority:"]
    for p in sorted(Priority, key=lambda p: p.rank, reverse=True):
        group = [t for t in tasks if t.priority is p]
        pending = sum(1 for t in group if not t.is_completed)
        lines.append(f"  {p.value:<8} {len(group):>3} total, {pending} pending")
    return "\n".join(lines)


def cmd_category(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /category <name>"
    category = validate_category(" ".join(args))
    tasks = state.tasks.filter_by_category(category)
    return _listing(tasks, f"Tasks in category {category}:", f"No tasks found in category: {category}")


def cmd_status(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /status <done|pending>"
    completed = _parse_bool(args[0])
    label = "completed" if completed else "pending"
    tasks = state.tasks.filter_by_completion(completed)
    return _listing(tasks, f"Showing {label} tasks:", f"No {label} tasks found")


def cmd_due(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /due <today|week|month>"
    period = DueDatePeriod.parse(args[0])
    tasks = state.tasks.filter_by_due_date_period(period)
    return _listing(tasks, f"Tasks due {period.value}:", f"No tasks found due {period.value}")


def cmd_sort(state: AppState, args: list[str]) -> str:
    order = args[0].lower() if args else "asc"
    if order not in ("asc", "desc"):
        return "Usage: /sort <asc|desc>"
    ascending = order == "asc"
    tasks = state.tasks.sort_by_due_date(ascending)
    label = "Earlier -> Later" if ascending else "Later -> Earlier"
    return _listing(tasks, f"Tasks sorted by due date ({label}):", "No tasks found!")


def cmd_categories(state: AppState, args: list[str]) -> str:
    """
    /categories          -> all categories
    /categories <term>   -> categories containing term
    """
    term = " ".join(args)
    suggestions = suggest_categories(term, state.tasks.get_unique_categories())
    lines: list[str] = []
    if suggestions.matches:
        lines.append("Categories:")
        lines.extend(f"  {c}" for c in suggestions.matches)
    else:
        lines.append("No categories found!")
    if suggestions.is_new:
        lines.append(f"  (new category: {term.strip()})")
    return "\n".join(lines)


def cmd_search(state: AppState, args: list[str]) -> str:
    term = " ".join(args)
    index = state.tasks.build_search_index()
    if not len(index):
        return "No tasks available to search!"
    return format_search_results(index.search(term), term, total=len(index))


def format_search_results(tasks: Sequence[Task], term: str, *, total: int) -> str:
    if not tasks:
        return "No matching tasks found."
    lines = [format_tasks(tasks)]
    lines.append(f"Found {len(tasks)} matching tasks out of {total} total tasks")
    if term.strip():
        lines.append("(fuzzy search: results include approximate matches)")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add", cmd_add, help_text='Add a task: /add "<name>" <priority> "<category>" <YYYY-MM-DD>.'
)
registry.register("list", cmd_list, help_text="List all tasks.", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit fields: /edit <id> name=.. priority=.. category=.. due=.. done=yes|no.",
)
registry.register("done", cmd_done, help_text="Mark a task as complete: /done <id>.")
registry.register("rm", cmd_remove, help_text="Remove a task: /rm <id>.", aliases=["remove"])
registry.register(
    "priority",
    cmd_priority,
    help_text="Filter by priority: /priority [low|medium|high] (no argument: counts).",
)
registry.register("category", cmd_category, help_text="Filter by category: /category <name>.")
registry.register("status", cmd_status, help_text="Filter by completion: /status <done|pending>.")
registry.register("due", cmd_due, help_text="Tasks due in a period: /due <today|week|month>.")
registry.register("sort", cmd_sort, help_text="Sort by due date: /sort <asc|desc>.")
registry.register(
    "categories", cmd_categories, help_text="List categories: /categories [term]."
)
registry.register(
    "search",
    cmd_search,
    help_text="Fuzzy search: /search <term> (no term: interactive search session).",
)
