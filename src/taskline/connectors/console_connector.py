# src/taskline/connectors/console_connector.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterator
from datetime import datetime

from ..cli.commands import format_search_results
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..errors import StorageError
from ..tasks.task_search import TaskSearchIndex

logger = logging.getLogger(__name__)

Reader = Callable[[str], str]
Writer = Callable[[str], None]

SEARCH_EXIT_WORDS = ("/back", "/exit", "/quit")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


@contextlib.contextmanager
def search_session(state: AppState) -> Iterator[TaskSearchIndex]:
    """
    Scope of one interactive search: snapshot + index on enter, log on exit.

    Leaving the block (normally, on Ctrl+C or on EOF) always ends the session.
    """
    index = state.tasks.build_search_index()
    logger.info("Search session started tasks=%d", len(index))
    try:
        yield index
    finally:
        logger.info("Search session finished.")


def run_search_session(state: AppState, read: Reader = input, write: Writer = print) -> None:
    """
    Line-based live search: every line is a new query against the same snapshot.
    An empty line or /back returns to the main prompt.
    """
    with search_session(state) as index:
        if not len(index):
            write("No tasks available to search!")
            return

        write("Search tasks (empty line or /back to return, Ctrl+C to abort).")
        write(format_search_results(index.tasks, "", total=len(index)))

        while True:
            try:
                term = read("search> ")
            except (EOFError, KeyboardInterrupt):
                write("")
                break

            if not term.strip() or term.strip().lower() in SEARCH_EXIT_WORDS:
                break

            if not index.is_active(term):
                write(f"Current search: {term.strip()} (type at least 2 characters to filter)")
            else:
                write(f"Current search: {term.strip()}")
            write(format_search_results(index.search(term), term, total=len(index)))


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started db=%s", getattr(state.settings, "tasks_db_path", "?"))
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            if user_input.lower() == "/search":
                run_search_session(state)
                continue
            cmd_response = command_registry.handle(state, user_input)
        except StorageError as e:
            logger.exception("Storage failure while handling %r", user_input)
            _print_ts(f"[STORAGE] {e}")
            continue
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is None:
            cmd_response = "Commands start with '/'. Use /help to list available commands."
        print(f"[{_ts_local()}] {cmd_response}\n")

    logger.info("Console connector finished.")
