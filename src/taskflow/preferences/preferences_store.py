# src/taskflow/preferences/preferences_store.py

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any

from ..core.flow import MutableStateFlow
from ..errors import StorageError
from ..tasks.task_models import FilterPreferences, SortOrder

logger = logging.getLogger(__name__)

KEY_SORT_ORDER = "sort_order"
KEY_HIDE_COMPLETED = "hide_completed"


class PreferencesManager:
    """
    Persisted sort order / hide-completed toggle backed by a small JSON file.

    - The file is read once at construction; an unreadable file means defaults.
    - Each update rewrites one key and keeps whatever else is stored.
    - preferences_flow changes only after the write reached disk.
    """

    def __init__(self, path: str | Path = "preferences.json") -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()
        self._flow: MutableStateFlow[FilterPreferences] = MutableStateFlow(
            self._to_preferences(self._read())
        )
        logger.info("PreferencesManager ready path=%s prefs=%s", self._path, self._flow.value)

    @property
    def preferences_flow(self) -> MutableStateFlow[FilterPreferences]:
        return self._flow

    @property
    def current(self) -> FilterPreferences:
        return self._flow.value

    # ---- file helpers ----

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.exception("Error reading preferences from %s; using defaults", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_key(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)

    @staticmethod
    def _to_preferences(data: dict[str, Any]) -> FilterPreferences:
        return FilterPreferences(
            sort_order=SortOrder.from_stored(data.get(KEY_SORT_ORDER)),
            hide_completed=bool(data.get(KEY_HIDE_COMPLETED, False)),
        )

    async def _update(self, key: str, value: Any) -> None:
        async with self._lock:
            try:
                await asyncio.to_thread(self._write_key, key, value)
            except OSError as exc:
                raise StorageError(f"writing preference {key!r} failed: {exc}") from exc

    # ---- public API ----

    async def update_sort_order(self, sort_order: SortOrder) -> None:
        await self._update(KEY_SORT_ORDER, sort_order.value)
        self._flow.update(lambda p: replace(p, sort_order=sort_order))
        logger.debug("Sort order -> %s", sort_order.value)

    async def update_hide_completed(self, hide_completed: bool) -> None:
        await self._update(KEY_HIDE_COMPLETED, bool(hide_completed))
        self._flow.update(lambda p: replace(p, hide_completed=bool(hide_completed)))
        logger.debug("Hide completed -> %s", hide_completed)
