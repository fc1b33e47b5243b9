# src/todo_core/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(slots=True, frozen=True)
class Task:
    """
    One row of the tasks table.

    `id` is assigned by the store and never changes; commands produce
    modified copies via `toggled()` / `renamed()` instead of mutating.
    """

    id: int
    title: str
    done: bool = False

    def toggled(self) -> Task:
        return replace(self, done=not self.done)

    def renamed(self, title: str) -> Task:
        return replace(self, title=title)
