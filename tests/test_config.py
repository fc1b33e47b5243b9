# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from todo_core.config import Settings

_VARS = (
    "TODO_APP_NAME",
    "TODO_LOG_LEVEL",
    "TODO_CONSOLE_ENABLED",
    "TODO_HIGHLIGHT_SECONDS",
    "TODO_DATA_DIR",
    "TODO_TASKS_DB_PATH",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()
    assert s.app_name == "todo"
    assert s.log_level == "INFO"
    assert s.console_enabled is True
    assert s.highlight_seconds == 2.0
    assert s.data_dir == Path(".local/todo")
    assert s.tasks_db_path == Path(".local/todo/tasks.sqlite3")


def test_env_overrides(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("TODO_LOG_LEVEL", "debug")
    clean_env.setenv("TODO_CONSOLE_ENABLED", "off")
    clean_env.setenv("TODO_HIGHLIGHT_SECONDS", "0.5")
    clean_env.setenv("TODO_DATA_DIR", str(tmp_path))

    s = Settings.from_env()
    assert s.log_level == "DEBUG"
    assert s.console_enabled is False
    assert s.highlight_seconds == 0.5
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"


def test_bad_numbers_fall_back(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("TODO_HIGHLIGHT_SECONDS", "soon")
    assert Settings.from_env().highlight_seconds == 2.0

    clean_env.setenv("TODO_HIGHLIGHT_SECONDS", "-3")
    assert Settings.from_env().highlight_seconds == 0.0
