# src/taskflow/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path

from .task_models import SortOrder, Task

logger = logging.getLogger(__name__)

_ORDER_BY: dict[SortOrder, str] = {
    SortOrder.BY_NAME: "important DESC, name ASC, id ASC",
    SortOrder.BY_DATE: "important DESC, created ASC, id ASC",
}


class TaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Search is a literal substring match on `name` (no LIKE wildcards).
    It is case-sensitive unless case_sensitive=False.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3", *, case_sensitive: bool = True) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._case_sensitive = case_sensitive
        self.created_new = self._ensure_schema()
        logger.info(
            "TaskStore ready db=%s total=%s new=%s", self._db_path, self.count_tasks(), self.created_new
        )

    @property
    def db_path(self) -> Path:
        return self._db_path

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

    def _ensure_schema(self) -> bool:
        """Create/migrate the table. Returns True if the table did not exist before."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'task_table'")
            existed = cur.fetchone() is not None

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS task_table (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    important INTEGER NOT NULL DEFAULT 0,
                    completed INTEGER NOT NULL DEFAULT 0,
                    created INTEGER NOT NULL DEFAULT 0
                )
                """
            )

            cur.execute("PRAGMA table_info(task_table)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE task_table ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("important", "INTEGER NOT NULL DEFAULT 0")
            add_col("completed", "INTEGER NOT NULL DEFAULT 0")
            add_col("created", "INTEGER NOT NULL DEFAULT 0")

            conn.commit()
            return not existed
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            name=str(row["name"] or ""),
            important=bool(row["important"]),
            completed=bool(row["completed"]),
            created=int(row["created"] or 0),
            id=int(row["id"]),
        )

    # ---- queries ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM task_table")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def get_tasks(self, search_query: str, sort_order: SortOrder, hide_completed: bool) -> list[Task]:
        """
        Return every task matching the filter, fully ordered.

        A task matches if (not hide_completed OR not completed) AND search_query is a
        substring of its name. Important tasks come first, then name or creation time.
        """
        match = "instr(name, ?) > 0" if self._case_sensitive else "instr(lower(name), lower(?)) > 0"
        sql = f"""
            SELECT *
            FROM task_table
            WHERE (? = 0 OR completed = 0)
              AND (? = '' OR {match})
            ORDER BY {_ORDER_BY[sort_order]}
        """
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(sql, (int(bool(hide_completed)), search_query, search_query))
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM task_table WHERE id = ?", (int(task_id),))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    # ---- mutations ----

    def insert(self, task: Task) -> int:
        """Insert a task and return its new id. The id carried by `task` is ignored."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "INSERT INTO task_table(name, important, completed, created) VALUES (?, ?, ?, ?)",
                (task.name, int(task.important), int(task.completed), int(task.created)),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for task insert")
            logger.debug("Task inserted id=%s name=%r", rowid, task.name)
            return int(rowid)
        finally:
            conn.close()

    def update(self, task: Task) -> int:
        """Replace the full record matching task.id. Returns the number of rows changed."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                UPDATE task_table
                SET name = ?, important = ?, completed = ?, created = ?
                WHERE id = ?
                """,
                (task.name, int(task.important), int(task.completed), int(task.created), int(task.id)),
            )
            conn.commit()
            return cur.rowcount
        finally:
            conn.close()

    def delete(self, task: Task) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("DELETE FROM task_table WHERE id = ?", (int(task.id),))
            conn.commit()
            return cur.rowcount
        finally:
            conn.close()

    def delete_completed_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("DELETE FROM task_table WHERE completed = 1")
            conn.commit()
            logger.info("Deleted %s completed task(s)", cur.rowcount)
            return cur.rowcount
        finally:
            conn.close()
