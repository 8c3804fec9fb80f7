# src/todo_tracker/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from .errors import DuplicateIdentityError, NotFoundError
from .task_models import Priority, Task, toggle_completion

logger = logging.getLogger(__name__)

ChangeKind = Literal["added", "updated", "removed"]


@dataclass(frozen=True, slots=True)
class TaskChange:
    kind: ChangeKind
    task_id: str


TaskListener = Callable[[TaskChange], None]
TaskMutator = Callable[[Task], Task | None]


class TaskStore:
    """
    SQLite task store.

    Owns the task collection and its one ordered query:
      is_completed ASC, priority_rank ASC, due_at ASC, insertion order.

    Priority and completion are stored as integers so the ordering is a plain
    ORDER BY. `seq` is an AUTOINCREMENT insertion counter (never reused) and
    breaks ties.

    Thread-safety:
    - each method opens its own SQLite connection
    - callers that mutate from more than one thread must serialize (AppState.lock)
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._listeners: list[TaskListener] = []
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        self._listeners.clear()

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    due_at REAL NOT NULL,
                    priority_rank INTEGER NOT NULL DEFAULT 1,
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL
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

            add_col("description", "TEXT NOT NULL DEFAULT ''")
            add_col("priority_rank", "INTEGER NOT NULL DEFAULT 1")
            add_col("is_completed", "INTEGER NOT NULL DEFAULT 0")

            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_order "
                "ON tasks(is_completed, priority_rank, due_at, seq)"
            )

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            title=str(row["title"]),
            description=str(row["description"] or ""),
            due_at=float(row["due_at"]),
            priority=Priority.from_rank(row["priority_rank"]),
            is_completed=bool(row["is_completed"]),
            created_at=float(row["created_at"]),
        )

    def _fetch(self, conn: sqlite3.Connection, task_id: str) -> Task | None:
        cur = conn.execute("SELECT * FROM tasks WHERE id = ?", (str(task_id),))
        row = cur.fetchone()
        return self._row_to_task(row) if row else None

    def _notify(self, kind: ChangeKind, task_id: str) -> None:
        change = TaskChange(kind=kind, task_id=task_id)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Task listener failed change=%s", change)

    # ---- subscriptions ----

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        """
        Register a callback fired after every committed mutation.

        Returns an unsubscribe function. Listeners receive only the change
        kind and task id; they should re-read query_all_ordered() for state.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return unsubscribe

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def get_task(self, task_id: str) -> Task | None:
        conn = self._get_conn()
        try:
            return self._fetch(conn, task_id)
        finally:
            conn.close()

    def add(self, task: Task) -> None:
        conn = self._get_conn()
        try:
            try:
                conn.execute(
                    """
                    INSERT INTO tasks(
                        id, title, description, due_at,
                        priority_rank, is_completed, created_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        task.id,
                        task.title,
                        task.description,
                        float(task.due_at),
                        task.priority.rank,
                        int(task.is_completed),
                        float(task.created_at),
                    ),
                )
            except sqlite3.IntegrityError:
                conn.rollback()
                raise DuplicateIdentityError(task.id) from None
            conn.commit()
        finally:
            conn.close()

        logger.debug(
            "Task added id=%s priority=%s due_at=%s",
            task.id,
            task.priority.value,
            task.due_at,
        )
        self._notify("added", task.id)

    def remove(self, task_id: str) -> None:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (str(task_id),))
            if cur.rowcount != 1:
                conn.rollback()
                raise NotFoundError(task_id)
            conn.commit()
        finally:
            conn.close()

        logger.debug("Task removed id=%s", task_id)
        self._notify("removed", task_id)

    def update(self, task_id: str, mutator: TaskMutator) -> Task:
        """
        Apply `mutator` to the stored task and persist its mutable fields.

        The mutator may change the task in place and/or return a task.
        id and created_at are never written back.
        """
        conn = self._get_conn()
        try:
            task = self._fetch(conn, task_id)
            if task is None:
                raise NotFoundError(task_id)

            result = mutator(task)
            if result is not None:
                task = result

            conn.execute(
                """
                UPDATE tasks
                SET title = ?,
                    description = ?,
                    due_at = ?,
                    priority_rank = ?,
                    is_completed = ?
                WHERE id = ?
                """,
                (
                    task.title,
                    task.description,
                    float(task.due_at),
                    task.priority.rank,
                    int(task.is_completed),
                    str(task_id),
                ),
            )
            conn.commit()
            # Re-read so callers never see an id/created_at the mutator touched.
            stored = self._fetch(conn, task_id)
        finally:
            conn.close()

        if stored is None:
            raise NotFoundError(task_id)

        logger.debug("Task updated id=%s completed=%s", task_id, stored.is_completed)
        self._notify("updated", stored.id)
        return stored

    def toggle_completion(self, task_id: str) -> Task:
        return self.update(task_id, toggle_completion)

    def query_all_ordered(self) -> list[Task]:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                """
                SELECT *
                FROM tasks
                ORDER BY is_completed ASC, priority_rank ASC, due_at ASC, seq ASC
                """
            )
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()
