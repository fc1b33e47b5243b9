# src/todo_core/tasks/coordinator.py

from __future__ import annotations

"""
Task coordinator.

The only entry point the presentation layer talks to:
- turns user commands into store mutations (fire-and-forget asyncio tasks),
- derives the transient "just updated" highlight from toggle/edit outcomes,
- re-exposes the store's live task list unchanged.

Highlight is a single slot. Every toggle/edit completion takes the slot and
schedules a clear after `highlight_seconds`. Clears are tagged with the
version that scheduled them and the previous timer is cancelled, so an old
timer can never clear a newer highlight.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

from ..core.live import LiveValue, Subscription
from ..core.ports import TaskRepo
from ..errors import TaskError
from .task_models import Task

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_HIGHLIGHT_SECONDS = 2.0


class TaskCoordinator:
    def __init__(self, store: TaskRepo, *, highlight_seconds: float = DEFAULT_HIGHLIGHT_SECONDS) -> None:
        self._store = store
        self._highlight_seconds = max(0.0, float(highlight_seconds))

        self._highlight: LiveValue[int | None] = LiveValue(None)
        self._highlight_version = 0
        self._clear_handle: asyncio.TimerHandle | None = None

        self._pending: set[asyncio.Task[Any]] = set()
        self._closed = False

    # ---- observation ----

    def observe_tasks(self) -> Subscription[tuple[Task, ...]]:
        return self._store.observe_all()

    def observe_highlight(self) -> Subscription[int | None]:
        return self._highlight.subscribe()

    def snapshot(self) -> list[Task]:
        return self._store.snapshot()

    @property
    def highlighted_id(self) -> int | None:
        return self._highlight.value

    @property
    def highlight_seconds(self) -> float:
        return self._highlight_seconds

    @property
    def closed(self) -> bool:
        return self._closed

    # ---- commands ----

    def add_task(self, title: str) -> asyncio.Task[Task] | None:
        """Create a task. Blank input is ignored (returns None, no store call)."""
        if not title or not title.strip():
            logger.debug("add_task: blank title ignored")
            return None
        return self._launch(self._store.create(title), f"add_task title={title!r}")

    def toggle_task(self, task: Task) -> asyncio.Task[None]:
        updated = task.toggled()
        return self._launch(self._update_and_highlight(updated), f"toggle_task id={task.id}")

    def update_task(self, task: Task, new_title: str) -> asyncio.Task[None] | None:
        """Rename a task. Blank input is ignored, same as add_task."""
        if not new_title or not new_title.strip():
            logger.debug("update_task: blank title ignored id=%s", task.id)
            return None
        updated = task.renamed(new_title)
        return self._launch(self._update_and_highlight(updated), f"update_task id={task.id}")

    def delete_task(self, task: Task) -> asyncio.Task[None]:
        # A stale highlight for this id is left to expire on its own timer.
        return self._launch(self._store.delete(task), f"delete_task id={task.id}")

    # ---- lifecycle ----

    async def drain(self) -> None:
        """Wait until every command issued so far has finished (errors are not raised here)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self) -> None:
        """
        Finish in-flight commands, then stop highlighting.

        Timers still pending after this call are no-ops.
        """
        if self._closed:
            return
        self._closed = True
        await self.drain()
        self._cancel_clear()
        self._highlight.close()
        logger.debug("TaskCoordinator closed")

    # ---- internals ----

    def _launch(self, coro: Coroutine[Any, Any, T], label: str) -> asyncio.Task[T]:
        if self._closed:
            coro.close()
            raise RuntimeError("TaskCoordinator is closed")
        task = asyncio.get_running_loop().create_task(coro, name=label)
        self._pending.add(task)
        task.add_done_callback(self._on_command_done)
        return task

    def _on_command_done(self, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.debug("Command cancelled: %s", task.get_name())
            return
        exc = task.exception()
        if exc is None:
            return
        # The exception stays on the task for callers that await it.
        if isinstance(exc, TaskError):
            logger.warning("Command failed: %s: %s", task.get_name(), exc)
        else:
            logger.error("Command crashed: %s", task.get_name(), exc_info=exc)

    async def _update_and_highlight(self, updated: Task) -> None:
        await self._store.update(updated)
        self._set_highlight(updated.id)

    def _set_highlight(self, task_id: int) -> None:
        if self._closed:
            return
        self._cancel_clear()
        self._highlight_version += 1
        version = self._highlight_version
        self._highlight.set(task_id)
        loop = asyncio.get_running_loop()
        self._clear_handle = loop.call_later(self._highlight_seconds, self._clear_highlight, version)
        logger.debug("Highlight id=%s version=%s", task_id, version)

    def _clear_highlight(self, version: int) -> None:
        if self._closed or version != self._highlight_version:
            return
        self._clear_handle = None
        self._highlight.set(None)

    def _cancel_clear(self) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None
