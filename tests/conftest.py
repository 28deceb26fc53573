# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from scheduler_db.core.state import AppState
from scheduler_db.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="scheduler-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        db_path=tmp_path / "scheduler.db",
        list_limit=20,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.db_path, limit=settings.list_limit)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    """
    AppState wired with a real SQLite TaskStore in tmp_path.

    NOTE: the store's correctness is part of what the command tests exercise.
    """
    return AppState(settings=settings, task_store=store)
