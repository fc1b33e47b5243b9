# src/todo_core/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The coordinator depends on this Protocol instead of the SQLite store.
This keeps storage swappable and lets tests run against an in-memory fake.
"""

from typing import Protocol

from ..tasks.task_models import Task
from .live import Subscription


class TaskRepo(Protocol):
    # Live query
    def observe_all(self) -> Subscription[tuple[Task, ...]]: ...
    def snapshot(self) -> list[Task]: ...

    # Mutations (atomic per record)
    async def create(self, title: str) -> Task: ...
    async def update(self, task: Task) -> None: ...
    async def delete(self, task: Task) -> None: ...

