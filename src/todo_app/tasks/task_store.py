# src/todo_app/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

from .task_errors import TaskNotFoundError, TaskStoreError
from .task_models import Task, task_from_row, timestamp_to_db

logger = logging.getLogger(__name__)

_COLUMNS = "id, description, completed, created_at"


class TaskStore:
    """
    SQLite task store.

    One table, one statement per public method:
    - each call opens its own connection, commits and closes it
    - sqlite3 errors surface as TaskStoreError
    - updates and deletes by id are unconditional (zero matched rows is fine)
    """

    def __init__(self, db_path: str | Path = "todo.db") -> None:
        self._db_path = Path(db_path)
        self.ensure_schema()
        logger.info("TaskStore ready db=%s", self._db_path)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("TaskStore total=%s", self.count_tasks())

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self._db_path), timeout=30.0)

    @contextlib.contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._get_conn()
        except sqlite3.Error as exc:
            raise TaskStoreError(f"Cannot open task database {self._db_path}: {exc}") from exc
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            raise TaskStoreError(f"Task database error: {exc}") from exc
        finally:
            conn.close()

    # ---- public API ----

    def ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS todo_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    description TEXT NOT NULL,
                    completed BOOLEAN NOT NULL DEFAULT 0,
                    created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

    def count_tasks(self) -> int:
        with self._connect() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM todo_items").fetchone()
            return int(n)

    def add_task(self, description: str, *, created_at: datetime) -> int:
        if not description or not description.strip():
            raise ValueError("description is required")

        with self._connect() as conn:
            cur = conn.execute(
                "INSERT INTO todo_items (description, completed, created_at) VALUES (?, 0, ?)",
                (description, timestamp_to_db(created_at)),
            )
            rowid = cur.lastrowid

        if rowid is None:
            raise TaskStoreError("SQLite did not return lastrowid for todo_items insert")
        logger.debug("Task added id=%s created_at=%s", rowid, created_at)
        return int(rowid)

    def get_task(self, task_id: int) -> Task:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM todo_items WHERE id = ?",
                (int(task_id),),
            ).fetchone()

        if row is None:
            raise TaskNotFoundError(task_id)
        return task_from_row(row)

    def list_tasks(self) -> list[Task]:
        with self._connect() as conn:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM todo_items ORDER BY id").fetchall()
        return [task_from_row(r) for r in rows]

    def set_completed(self, task_id: int, completed: bool) -> None:
        with self._connect() as conn:
            cur = conn.execute(
                "UPDATE todo_items SET completed = ? WHERE id = ?",
                (1 if completed else 0, int(task_id)),
            )
        logger.debug("Task completed=%s id=%s rows=%s", completed, task_id, cur.rowcount)

    def delete_task(self, task_id: int) -> None:
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM todo_items WHERE id = ?", (int(task_id),))
        logger.debug("Task deleted id=%s rows=%s", task_id, cur.rowcount)

    def delete_all(self) -> int:
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM todo_items")
        logger.debug("All tasks deleted rows=%s", cur.rowcount)
        return int(cur.rowcount)

    def delete_created_before(self, before: datetime) -> int:
        """Delete every task whose created_at is an earlier instant than `before`."""
        with self._connect() as conn:
            cur = conn.execute(
                "DELETE FROM todo_items WHERE julianday(created_at) < julianday(?)",
                (timestamp_to_db(before),),
            )
        logger.debug("Tasks created before %s deleted rows=%s", before, cur.rowcount)
        return int(cur.rowcount)
