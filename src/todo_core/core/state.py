# src/todo_core/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.coordinator import TaskCoordinator
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in with the same fields).
    settings: object

    task_store: TaskStore
    coordinator: TaskCoordinator
