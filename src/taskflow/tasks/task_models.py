# src/taskflow/tasks/task_models.py

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


def _now_ms() -> int:
    return int(time.time() * 1000)


class SortOrder(StrEnum):
    """Secondary ordering of the task list (important tasks always come first)."""

    BY_NAME = "BY_NAME"
    BY_DATE = "BY_DATE"

    @classmethod
    def from_stored(cls, raw: str | None) -> SortOrder:
        if not raw:
            return cls.BY_DATE
        try:
            return cls(raw)
        except ValueError:
            return cls.BY_DATE


@dataclass(frozen=True, slots=True)
class FilterPreferences:
    sort_order: SortOrder = SortOrder.BY_DATE
    hide_completed: bool = False


@dataclass(frozen=True, slots=True)
class Task:
    """
    One to-do item.

    `id` is 0 until the task has been inserted; storage assigns the real value.
    `created` is milliseconds since the epoch and never changes after creation.
    Instances are immutable: use dataclasses.replace() to derive an edited copy.
    """

    name: str
    important: bool = False
    completed: bool = False
    created: int = field(default_factory=_now_ms)
    id: int = 0

    @property
    def created_date_formatted(self) -> str:
        return datetime.fromtimestamp(self.created / 1000).strftime("%b %d, %Y %H:%M:%S")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        created = data.get("created")
        task_id = data.get("id")
        return cls(
            name=str(data.get("name", "")),
            important=bool(data.get("important", False)),
            completed=bool(data.get("completed", False)),
            created=_now_ms() if created is None else int(created),
            id=0 if task_id is None else int(task_id),
        )
