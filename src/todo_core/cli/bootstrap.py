# src/todo_core/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- owns the process-wide TaskStore handle (created on first access),
- wires store + coordinator into AppState.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from ..config import get_settings
from ..core.state import AppState
from ..tasks.coordinator import TaskCoordinator
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

_store_lock = threading.Lock()
_store: TaskStore | None = None


def get_task_store(db_path: str | Path) -> TaskStore:
    """
    Return the process-wide TaskStore, opening it on first call.

    Later calls return the same instance; asking for a different path while
    one is open is a programming error.
    """
    global _store
    with _store_lock:
        if _store is None or _store.closed:
            _store = TaskStore(db_path)
        elif _store.db_path != Path(db_path):
            raise RuntimeError(f"TaskStore already open at {_store.db_path}, not {db_path}")
        return _store


def reset_task_store() -> None:
    """Close and forget the process-wide TaskStore (shutdown and tests)."""
    global _store
    with _store_lock:
        if _store is not None:
            _store.close()
        _store = None


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = get_task_store(settings.tasks_db_path)
    coordinator = TaskCoordinator(store, highlight_seconds=settings.highlight_seconds)
    return AppState(settings=settings, task_store=store, coordinator=coordinator)
