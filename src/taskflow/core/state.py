# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..preferences.preferences_store import PreferencesManager
from ..tasks.task_dao import TaskDao
from ..tasks.task_store import TaskStore
from .saved_state import SavedStateHandle
from .scope import Scope


@dataclass
class AppState:
    # Settings object (real Settings or a test namespace with the same attributes).
    settings: Any

    task_store: TaskStore
    task_dao: TaskDao
    preferences: PreferencesManager

    # Jobs that must outlive any single screen.
    application_scope: Scope

    # Per-screen interruption-safe state, persisted by the host on exit.
    saved_state: dict[str, SavedStateHandle] = field(default_factory=dict)
