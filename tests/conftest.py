# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.core.state import AppState
from taskflow.cli.bootstrap import create_initial_state
from taskflow.tasks.seed import seed_sample_tasks
from taskflow.tasks.task_dao import TaskDao
from taskflow.tasks.task_models import Task
from taskflow.tasks.task_store import TaskStore

from .fakes import FakePreferences, FakeTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and AppState.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskflow-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        preferences_path=tmp_path / "preferences.json",
        saved_state_path=tmp_path / "saved_state.json",
        seed_sample_tasks=False,
        search_case_sensitive=True,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path)


@pytest.fixture()
def seeded_store(store: TaskStore) -> TaskStore:
    seed_sample_tasks(store)
    return store


@pytest.fixture()
def dao(store: TaskStore) -> TaskDao:
    return TaskDao(store)


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """AppState wired with real SQLite/JSON storage under tmp_path."""
    return create_initial_state(settings=settings)


@pytest.fixture()
def repo() -> FakeTaskRepo:
    return FakeTaskRepo(
        [
            Task("Wash the dishes", created=1000),
            Task("Buy groceries", important=True, created=2000),
            Task("Prepare food", completed=True, created=3000),
            Task("Call mom", created=4000),
        ]
    )


@pytest.fixture()
def prefs() -> FakePreferences:
    return FakePreferences()
