# src/todo_core/tasks/task_store.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sqlite3
from pathlib import Path

from ..core.live import LiveSequence, Subscription
from ..errors import InvalidInput, NotFound
from .task_models import Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task store with a live query.

    Schema: one table, created if missing. No migrations.

    Concurrency:
    - each blocking call opens its own SQLite connection and runs in a worker
      thread (asyncio.to_thread), so the event loop is never blocked
    - mutations are serialized by one FIFO asyncio.Lock; the snapshot that is
      published after a mutation is read inside the same critical section,
      so emissions follow mutation order

    Live query:
    - observe_all() yields the full list (newest id first) on subscribe and
      after every mutation that changed something
    - emissions are tuples, so one subscriber cannot alter what others see
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        self._write_lock = asyncio.Lock()
        self._live: LiveSequence[tuple[Task, ...]] = LiveSequence(self._select_all())
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def closed(self) -> bool:
        return self._live.closed

    def close(self) -> None:
        """End all live subscriptions. No persistent connections to close."""
        if self._live.closed:
            return
        self._live.close()
        logger.info("TaskStore closed db=%s", self._db_path)

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
            # AUTOINCREMENT: ids of deleted rows are never handed out again.
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    done INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(id=int(row["id"]), title=str(row["title"]), done=bool(row["done"]))

    @staticmethod
    def _require_title(title: str | None) -> str:
        if title is None or not title.strip():
            raise InvalidInput("title is required")
        return title

    def _ensure_open(self) -> None:
        if self._live.closed:
            raise RuntimeError("TaskStore is closed")

    def _select_all(self, conn: sqlite3.Connection | None = None) -> tuple[Task, ...]:
        own = conn is None
        if conn is None:
            conn = self._get_conn()
        try:
            cur = conn.execute("SELECT id, title, done FROM tasks ORDER BY id DESC")
            return tuple(self._row_to_task(r) for r in cur.fetchall())
        finally:
            if own:
                conn.close()

    # ---- blocking units of work (run in a worker thread) ----

    def _insert_sync(self, title: str) -> tuple[Task, tuple[Task, ...]]:
        conn = self._get_conn()
        try:
            cur = conn.execute("INSERT INTO tasks(title, done) VALUES (?, 0)", (title,))
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            return Task(id=int(rowid), title=title, done=False), self._select_all(conn)
        finally:
            conn.close()

    def _update_sync(self, task: Task, title: str) -> tuple[Task, ...]:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "UPDATE tasks SET title = ?, done = ? WHERE id = ?",
                (title, int(bool(task.done)), int(task.id)),
            )
            if cur.rowcount != 1:
                conn.rollback()
                raise NotFound(task.id)
            conn.commit()
            return self._select_all(conn)
        finally:
            conn.close()

    def _delete_sync(self, task_id: int) -> tuple[Task, ...] | None:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            if cur.rowcount == 0:
                return None
            return self._select_all(conn)
        finally:
            conn.close()

    def _get_sync(self, task_id: int) -> Task | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT id, title, done FROM tasks WHERE id = ?", (int(task_id),)
            ).fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    # ---- public API ----

    def observe_all(self) -> Subscription[tuple[Task, ...]]:
        """Subscribe to the full task list, newest first."""
        return self._live.subscribe()

    def snapshot(self) -> list[Task]:
        """The most recently published task list."""
        return list(self._live.value)

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    async def get(self, task_id: int) -> Task:
        task = await asyncio.to_thread(self._get_sync, task_id)
        if task is None:
            raise NotFound(task_id)
        return task

    async def create(self, title: str) -> Task:
        clean = self._require_title(title)
        self._ensure_open()
        async with self._write_lock:
            self._ensure_open()
            task, rows = await asyncio.to_thread(self._insert_sync, clean)
            self._live.publish(rows)
        logger.debug("Task added id=%s title=%r", task.id, task.title)
        return task

    async def update(self, task: Task) -> None:
        """Replace the stored row for task.id. Raises NotFound if it is gone."""
        clean = self._require_title(task.title)
        self._ensure_open()
        async with self._write_lock:
            # close() may have run while this call waited for the lock
            self._ensure_open()
            rows = await asyncio.to_thread(self._update_sync, task, clean)
            self._live.publish(rows)
        logger.debug("Task updated id=%s done=%s", task.id, task.done)

    async def delete(self, task: Task) -> None:
        """Remove the row for task.id. Deleting a missing id is a successful no-op."""
        self._ensure_open()
        async with self._write_lock:
            self._ensure_open()
            rows = await asyncio.to_thread(self._delete_sync, task.id)
            if rows is None:
                logger.debug("Task delete id=%s: already absent", task.id)
                return
            self._live.publish(rows)
        logger.debug("Task deleted id=%s", task.id)
