# tests/test_commands.py

from __future__ import annotations

from taskline.cli.commands import CommandRegistry, registry
from taskline.connectors.console_connector import run_search_session


def _first_id(state) -> str:
    return state.tasks.get_all()[0].id


def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    seen: list[list[str]] = []

    def h(state, args):
        seen.append(args)
        return "ok"

    reg.register("a", h, "a", aliases=["alpha"])

    assert reg.handle(state, '/a x "y z"') == "ok"
    assert reg.handle(state, "/ALPHA") == "ok"
    assert seen == [["x", "y z"], []]
    assert "/a - a" in reg.build_help()


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")
    assert "Cannot parse command" in (reg.handle(state, '/add "unterminated') or "")


def test_add_list_filter_complete_flow(state) -> None:
    reply = registry.handle(state, '/add "Submit report" high Work 2025-03-10')
    assert reply is not None and reply.startswith("Task added:")

    assert "Submit report" in (registry.handle(state, "/list") or "")
    assert "Submit report" in (registry.handle(state, "/category work") or "")
    assert "Submit report" in (registry.handle(state, "/priority h") or "")

    prefix = _first_id(state)[:8]
    assert "marked as complete" in (registry.handle(state, f"/done {prefix}") or "")
    assert "already completed" in (registry.handle(state, f"/done {prefix}") or "")

    assert "Submit report" in (registry.handle(state, "/status done") or "")
    assert registry.handle(state, "/status pending") == "No pending tasks found"


def test_priority_summary_lists_highest_first(state) -> None:
    registry.handle(state, "/add a low Home 2025-03-05")
    registry.handle(state, "/add b high Work 2025-03-06")
    registry.handle(state, "/add c high Work 2025-03-07")
    registry.handle(state, f"/done {_first_id(state)}")

    lines = (registry.handle(state, "/priority") or "").splitlines()
    assert lines[0] == "Tasks by priority:"
    assert [line.split()[0] for line in lines[1:]] == ["High", "Medium", "Low"]
    assert lines[1].split()[1:3] == ["2", "total,"]
    assert lines[3].endswith("0 pending")


def test_add_reports_validation_errors(state) -> None:
    assert registry.handle(state, '/add "" high Work 2025-03-10') == (
        "Invalid input: Task name cannot be empty"
    )
    assert registry.handle(state, "/add x high Work 2020-01-01") == (
        "Invalid input: Due date cannot be in the past"
    )
    assert (registry.handle(state, "/add x urgent Work 2025-03-10") or "").startswith(
        "Invalid input: Priority must be one of"
    )
    assert (registry.handle(state, "/add x high") or "").startswith("Usage: /add")
    assert state.tasks.get_all() == []


def test_add_reuses_existing_category_spelling(state) -> None:
    registry.handle(state, "/add a low Work 2025-03-10")
    registry.handle(state, "/add b low WORK 2025-03-11")
    assert state.tasks.get_unique_categories() == ["Work"]
    assert "Work" in (registry.handle(state, "/categories wo") or "")
    assert "(new category: zzz)" in (registry.handle(state, "/categories zzz") or "")


def test_edit_and_remove(state) -> None:
    registry.handle(state, '/add "Buy milk" low Errands 2025-03-02')
    task_id = _first_id(state)

    reply = registry.handle(state, f'/edit {task_id} priority=high "name=Buy oat milk"') or ""
    assert reply.startswith("Task updated.")
    task = state.tasks.get_by_id(task_id)
    assert task is not None
    assert (task.name, task.priority.value, task.category) == ("Buy oat milk", "High", "Errands")

    assert "Unknown field" in (registry.handle(state, f"/edit {task_id} color=red") or "")
    assert "Expected field=value" in (registry.handle(state, f"/edit {task_id} high") or "")

    assert registry.handle(state, f"/rm {task_id}") == "Task removed: Buy oat milk"
    assert (registry.handle(state, f"/rm {task_id}") or "").startswith("Task not found")


def test_short_or_ambiguous_ids_are_rejected(state) -> None:
    assert "at least 4" in (registry.handle(state, "/show ab") or "")
    assert (registry.handle(state, "/show abcdef") or "").startswith("Task not found")


def test_due_sort_and_search_commands(state) -> None:
    registry.handle(state, '/add "Buy milk" low Errands 2025-03-02')
    registry.handle(state, '/add "Pay rent" high Home 2025-03-20')

    week = registry.handle(state, "/due week") or ""
    assert "Buy milk" in week and "Pay rent" not in week
    assert "No tasks found due" in (registry.handle(state, "/due today") or "")
    assert "Invalid input: Period must be one of" in (registry.handle(state, "/due year") or "")

    desc = registry.handle(state, "/sort desc") or ""
    assert desc.index("Pay rent") < desc.index("Buy milk")
    assert "Usage" in (registry.handle(state, "/sort sideways") or "")

    found = registry.handle(state, "/search mlik") or ""
    assert "Buy milk" in found and "Pay rent" not in found
    assert registry.handle(state, "/search zzzz") == "No matching tasks found."


def test_interactive_search_session(state) -> None:
    registry.handle(state, '/add "Buy milk" low Errands 2025-03-02')
    registry.handle(state, '/add "Pay rent" high Home 2025-03-20')

    queries = iter(["b", "milk"])
    out: list[str] = []

    def read(_prompt: str) -> str:
        try:
            return next(queries)
        except StopIteration:
            raise KeyboardInterrupt from None

    run_search_session(state, read=read, write=out.append)

    text = "\n".join(out)
    assert "type at least 2 characters" in text
    assert "Found 1 matching tasks out of 2 total tasks" in text


def test_interactive_search_session_without_tasks(state) -> None:
    out: list[str] = []
    run_search_session(state, read=lambda _p: "", write=out.append)
    assert out == ["No tasks available to search!"]
