# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the view models.

The view models depend on Protocols instead of concrete implementations.
This keeps storage swappable and makes testing easier.
"""

from collections.abc import AsyncIterable
from typing import Protocol

from ..tasks.task_models import FilterPreferences, SortOrder, Task


class TaskRepo(Protocol):
    """Live task queries plus one-shot asynchronous writes."""

    def watch_tasks(
            self,
            search_query: str,
            sort_order: SortOrder,
            hide_completed: bool,
    ) -> AsyncIterable[list[Task]]: ...

    async def insert(self, task: Task) -> int: ...
    async def update(self, task: Task) -> None: ...
    async def delete(self, task: Task) -> None: ...
    async def delete_completed_tasks(self) -> None: ...


class PreferencesRepo(Protocol):
    @property
    def preferences_flow(self) -> AsyncIterable[FilterPreferences]: ...

    async def update_sort_order(self, sort_order: SortOrder) -> None: ...
    async def update_hide_completed(self, hide_completed: bool) -> None: ...
