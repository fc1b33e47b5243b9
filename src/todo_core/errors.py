# src/todo_core/errors.py

from __future__ import annotations


class TaskError(Exception):
    """Base class for task-domain errors."""


class InvalidInput(TaskError, ValueError):
    """A mutation received a blank title."""


class NotFound(TaskError, LookupError):
    """No task with the requested id exists (e.g. it was deleted concurrently)."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"task id={task_id} not found")
        self.task_id = task_id
