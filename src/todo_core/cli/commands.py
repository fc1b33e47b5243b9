# src/todo_core/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import StrEnum

from ..core.state import AppState
from ..tasks.task_models import Task

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class TaskFilter(StrEnum):
    """Presentation-side view over the live task list."""

    ALL = "all"
    COMPLETED = "done"
    PENDING = "pending"

    @classmethod
    def parse(cls, raw: str | None) -> TaskFilter | None:
        if not raw:
            return cls.ALL
        key = raw.strip().lower()
        aliases = {"completed": cls.COMPLETED, "todo": cls.PENDING, "open": cls.PENDING}
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            return None

    def apply(self, tasks: Iterable[Task]) -> list[Task]:
        if self is TaskFilter.COMPLETED:
            return [t for t in tasks if t.done]
        if self is TaskFilter.PENDING:
            return [t for t in tasks if not t.done]
        return list(tasks)


def format_task(task: Task, highlighted_id: int | None = None) -> str:
    mark = "x" if task.done else " "
    line = f"[{mark}] #{task.id} {task.title}"
    if highlighted_id is not None and task.id == highlighted_id:
        line += "  (Updated!)"
    return line


def format_task_list(
    tasks: Iterable[Task],
    highlighted_id: int | None = None,
    flt: TaskFilter = TaskFilter.ALL,
) -> str:
    shown = flt.apply(tasks)
    if not shown:
        return "No tasks." if flt is TaskFilter.ALL else f"No tasks ({flt.value})."
    return "\n".join(format_task(t, highlighted_id) for t in shown)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _find_task(state: AppState, raw_id: str) -> Task | None:
    try:
        task_id = int(raw_id.lstrip("#"))
    except ValueError:
        return None
    for task in state.coordinator.snapshot():
        if task.id == task_id:
            return task
    return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    title = " ".join(args)
    if state.coordinator.add_task(title) is None:
        return "Usage: /add <title>"
    return f"Adding: {title}"


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /toggle <id>"
    task = _find_task(state, args[0])
    if task is None:
        return f"No task {args[0]}."
    state.coordinator.toggle_task(task)
    return f"Marking #{task.id} as {'pending' if task.done else 'done'}."


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit <id> <new title>"
    task = _find_task(state, args[0])
    if task is None:
        return f"No task {args[0]}."
    new_title = " ".join(args[1:])
    if state.coordinator.update_task(task, new_title) is None:
        return "Usage: /edit <id> <new title>"
    return f"Renaming #{task.id} to: {new_title}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /delete <id>"
    task = _find_task(state, args[0])
    if task is None:
        return f"No task {args[0]}."
    state.coordinator.delete_task(task)
    return f"Deleting #{task.id}."


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list          -> all tasks, newest first
    /list done     -> completed only
    /list pending  -> not completed only
    """
    flt = TaskFilter.parse(args[0] if args else None)
    if flt is None:
        return "Usage: /list [all|done|pending]"
    coordinator = state.coordinator
    return format_task_list(coordinator.snapshot(), coordinator.highlighted_id, flt)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <title>.", aliases=["a"])
registry.register("toggle", cmd_toggle, help_text="Flip done/pending: /toggle <id>.", aliases=["t"])
registry.register("edit", cmd_edit, help_text="Rename a task: /edit <id> <title>.", aliases=["e"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm", "del"])
registry.register("list", cmd_list, help_text="Show tasks: /list [all|done|pending].", aliases=["ls"])
