# src/taskflow/core/saved_state.py

"""
Interruption-safe, screen-scoped key/value state.

A SavedStateHandle holds plain JSON-serializable values. The host shell persists
snapshots with save_saved_state() and restores them with load_saved_state(), so
a screen recreated after an interruption sees exactly what it had written.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .flow import MutableStateFlow

logger = logging.getLogger(__name__)


class SavedStateHandle:
    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})
        self._flows: dict[str, MutableStateFlow[Any]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        flow = self._flows.get(key)
        if flow is not None:
            flow.value = value

    def get_state_flow(self, key: str, initial: Any) -> MutableStateFlow[Any]:
        """
        Observable view of one key. Seeded from the stored value (or `initial`,
        which is then stored); later set() calls on the key update it.
        """
        flow = self._flows.get(key)
        if flow is None:
            if key not in self._values:
                self._values[key] = initial
            flow = MutableStateFlow(self._values[key])
            self._flows[key] = flow
        return flow

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)


def load_saved_state(path: str | Path) -> dict[str, SavedStateHandle]:
    """Load per-screen saved state from JSON (best-effort)."""
    path = Path(path)
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text("utf-8"))
        if not isinstance(data, dict):
            return {}
        out = {
            str(screen): SavedStateHandle(values)
            for screen, values in data.items()
            if isinstance(values, dict)
        }
        logger.info("Loaded saved state: %d screen(s) from %s", len(out), path)
        return out
    except (OSError, ValueError):
        logger.exception("Failed to load saved state from %s", path)
        return {}


def save_saved_state(path: str | Path, states: Mapping[str, SavedStateHandle]) -> None:
    """Persist per-screen saved state as JSON (atomic replace, best-effort)."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {screen: handle.snapshot() for screen, handle in states.items()}
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, path)
        with contextlib.suppress(OSError):
            os.chmod(path, 0o600)
        logger.info("Saved state: %d screen(s) to %s", len(payload), path)
    except (OSError, TypeError, ValueError):
        logger.exception("Failed to save state to %s", path)
