# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
import pytest_asyncio

from todo_core.cli.bootstrap import reset_task_store
from todo_core.core.state import AppState
from todo_core.tasks.coordinator import TaskCoordinator
from todo_core.tasks.task_store import TaskStore

# Short highlight window so timer tests stay fast.
HIGHLIGHT_SECONDS = 0.1


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        console_enabled=False,
        highlight_seconds=HIGHLIGHT_SECONDS,
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    s = TaskStore(settings.tasks_db_path)
    yield s
    s.close()


@pytest_asyncio.fixture()
async def coordinator(store: TaskStore) -> TaskCoordinator:
    """Coordinator over a real SQLite store."""
    c = TaskCoordinator(store, highlight_seconds=HIGHLIGHT_SECONDS)
    yield c
    await c.aclose()


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, coordinator: TaskCoordinator) -> AppState:
    return AppState(settings=settings, task_store=store, coordinator=coordinator)


@pytest.fixture(autouse=True)
def _reset_process_store():
    yield
    reset_task_store()
