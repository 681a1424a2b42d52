# src/taskline/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from collections.abc import Iterator
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any

from ..errors import StorageError, TaskNotFoundError
from .task_models import Priority, Task, as_date, new_id

logger = logging.getLogger(__name__)


def _casefold(value: Any) -> str | None:
    return value.casefold() if isinstance(value, str) else None


class TaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Ordering:
    - rowid is the insertion order and the tie-break for every sorted query

    Categories are compared case-insensitively (Unicode casefold), via a
    `casefold()` SQL function registered on every connection.

    Every sqlite3.Error is re-raised as StorageError.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("TaskStore: cannot create data dir for db=%s: %s", self._db_path, e)
            raise StorageError(f"cannot create directory for task database {self._db_path}") from e
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except StorageError:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        conn.create_function("casefold", 1, _casefold, deterministic=True)

    @contextlib.contextmanager
    def _session(self, op: str) -> Iterator[sqlite3.Connection]:
        """One short-lived connection per call; commit on success."""
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            logger.error("TaskStore %s: cannot open db=%s: %s", op, self._db_path, e)
            raise StorageError(f"{op}: cannot open task database {self._db_path}") from e

        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            with contextlib.suppress(sqlite3.Error):
                conn.rollback()
            logger.error("TaskStore %s failed: %s", op, e)
            raise StorageError(f"{op} failed: {e}") from e
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._session("ensure_schema") as conn:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    priority TEXT NOT NULL DEFAULT 'Medium',
                    category TEXT NOT NULL,
                    due_date TEXT NOT NULL,
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("priority", "TEXT NOT NULL DEFAULT 'Medium'")
            add_col("is_completed", "INTEGER NOT NULL DEFAULT 0")
            add_col("created_at", "REAL NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks(due_date)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_completed ON tasks(is_completed)")

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            name=str(row["name"] or ""),
            priority=Priority.from_db(row["priority"]),
            category=str(row["category"] or ""),
            due_date=date.fromisoformat(str(row["due_date"])[:10]),
            is_completed=bool(row["is_completed"]),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    def _select(
        self,
        op: str,
        where: str = "",
        params: tuple[Any, ...] = (),
        order: str = "rowid ASC",
    ) -> list[Task]:
        sql = "SELECT * FROM tasks"
        if where:
            sql += f" WHERE {where}"
        sql += f" ORDER BY {order}"
        with self._session(op) as conn:
            rows = conn.execute(sql, params).fetchall()
            return [self._row_to_task(r) for r in rows]

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._session("count_tasks") as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)

    def create(self, task: Task) -> Task:
        now = time.time()
        stored = replace(
            task,
            id=task.id or new_id(),
            due_date=as_date(task.due_date),
            created_at=now,
            updated_at=now,
        )

        with self._session("create") as conn:
            conn.execute(
                """
                INSERT INTO tasks(
                    id, name, priority, category, due_date,
                    is_completed, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    stored.id,
                    stored.name,
                    stored.priority.value,
                    stored.category,
                    stored.due_date.isoformat(),
                    int(stored.is_completed),
                    stored.created_at,
                    stored.updated_at,
                ),
            )

        logger.debug(
            "Task added id=%s priority=%s category=%s due=%s",
            stored.id,
            stored.priority.value,
            stored.category,
            stored.due_date,
        )
        return stored

    def find_all(self) -> list[Task]:
        return self._select("find_all")

    def find_by_id(self, task_id: str) -> Task | None:
        if not task_id:
            return None
        with self._session("find_by_id") as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
            return self._row_to_task(row) if row else None

    def update(self, task: Task) -> Task:
        """
        Overwrite the mutable fields of the row with task.id.

        created_at is kept from the row; updated_at never goes below it.
        """
        with self._session("update") as conn:
            cur = conn.execute(
                """
                UPDATE tasks
                SET name = ?,
                    priority = ?,
                    category = ?,
                    due_date = ?,
                    is_completed = ?,
                    updated_at = MAX(?, created_at)
                WHERE id = ?
                """,
                (
                    task.name,
                    task.priority.value,
                    task.category,
                    as_date(task.due_date).isoformat(),
                    int(task.is_completed),
                    time.time(),
                    task.id,
                ),
            )
            if cur.rowcount != 1:
                raise TaskNotFoundError(task.id)
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task.id,)).fetchone()

        logger.debug("Task updated id=%s", task.id)
        return self._row_to_task(row)

    def delete(self, task_id: str) -> bool:
        if not task_id:
            return False
        with self._session("delete") as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            removed = cur.rowcount > 0
        logger.debug("Task delete id=%s removed=%s", task_id, removed)
        return removed

    def find_by_priority(self, priority: Priority) -> list[Task]:
        return self._select("find_by_priority", "priority = ?", (Priority(priority).value,))

    def find_by_category(self, category: str) -> list[Task]:
        """Case-insensitive exact match."""
        return self._select("find_by_category", "casefold(category) = ?", (category.casefold(),))

    def find_by_completion(self, is_completed: bool) -> list[Task]:
        return self._select("find_by_completion", "is_completed = ?", (int(bool(is_completed)),))

    def find_by_due_date_range(self, start: date, end: date) -> list[Task]:
        """Tasks with start <= due_date < end, earliest first."""
        return self._select(
            "find_by_due_date_range",
            "due_date >= ? AND due_date < ?",
            (as_date(start).isoformat(), as_date(end).isoformat()),
            order="due_date ASC, rowid ASC",
        )

    def find_all_sorted_by_due_date(self, ascending: bool = True) -> list[Task]:
        direction = "ASC" if ascending else "DESC"
        return self._select("find_all_sorted_by_due_date", order=f"due_date {direction}, rowid ASC")

    def get_unique_categories(self) -> list[str]:
        """
        Distinct categories, first-seen spelling wins for case variants.
        Sorted alphabetically (casefold) for presentation.
        """
        with self._session("get_unique_categories") as conn:
            rows = conn.execute("SELECT category FROM tasks ORDER BY rowid ASC").fetchall()

        seen: dict[str, str] = {}
        for row in rows:
            cat = str(row["category"] or "")
            if cat:
                seen.setdefault(cat.casefold(), cat)
        return sorted(seen.values(), key=str.casefold)
