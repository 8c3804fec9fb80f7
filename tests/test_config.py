# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from todo_tracker.config import Settings

_VARS = (
    "TODO_APP_NAME",
    "TODO_LOG_LEVEL",
    "TODO_DATA_DIR",
    "TODO_TASKS_DB_PATH",
    "TODO_LOG_DIR",
    "TODO_CONFIRM_DELETE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "todo"
    assert s.log_level == "INFO"
    assert s.data_dir == Path(".local/todo")
    assert s.tasks_db_path == Path(".local/todo/tasks.sqlite3")
    assert s.log_dir == s.data_dir
    assert s.confirm_delete is True


def test_paths_follow_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_DATA_DIR", str(tmp_path))
    s = Settings.from_env()
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.log_dir == tmp_path


def test_explicit_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_TASKS_DB_PATH", str(tmp_path / "x.db"))
    monkeypatch.setenv("TODO_LOG_LEVEL", "debug")
    monkeypatch.setenv("TODO_CONFIRM_DELETE", "off")
    s = Settings.from_env()
    assert s.tasks_db_path == tmp_path / "x.db"
    assert s.log_level == "DEBUG"
    assert s.confirm_delete is False


def test_bootstrap_wires_one_store(settings) -> None:
    from todo_tracker.cli.bootstrap import create_initial_state

    state = create_initial_state(settings=settings)
    assert state.task_store.db_path == settings.tasks_db_path
    assert settings.tasks_db_path.exists()
