# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete storage into AppState (tasks DB, preferences, application scope),
- seeds a freshly created database with sample tasks (optional),
- restores/persists per-screen saved state.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.saved_state import load_saved_state, save_saved_state
from ..core.scope import Scope
from ..core.state import AppState
from ..preferences.preferences_store import PreferencesManager
from ..tasks.seed import seed_sample_tasks
from ..tasks.task_dao import TaskDao
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.preferences_path.parent.mkdir(parents=True, exist_ok=True)
    settings.saved_state_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    task_store = TaskStore(settings.tasks_db_path, case_sensitive=settings.search_case_sensitive)
    if task_store.created_new and settings.seed_sample_tasks:
        seed_sample_tasks(task_store)

    return AppState(
        settings=settings,
        task_store=task_store,
        task_dao=TaskDao(task_store),
        preferences=PreferencesManager(settings.preferences_path),
        application_scope=Scope("application"),
    )


def restore_saved_state(state: AppState) -> None:
    state.saved_state = load_saved_state(state.settings.saved_state_path)


def persist_saved_state(state: AppState) -> None:
    save_saved_state(state.settings.saved_state_path, state.saved_state)
