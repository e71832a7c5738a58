# src/taskflow/tasks/task_dao.py

from __future__ import annotations

"""
Async facade over TaskStore.

Writes run on a worker thread so they never block the event loop. Every
committed write bumps an invalidation counter; watch_tasks() re-runs its query
whenever the counter moves, so every active watcher gets a fresh snapshot
without re-subscribing.
"""

import asyncio
import logging
import sqlite3
from collections.abc import AsyncIterator, Callable
from typing import TypeVar

from ..core.flow import MutableStateFlow
from ..errors import StorageError
from .task_models import SortOrder, Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TaskDao:
    def __init__(self, store: TaskStore) -> None:
        self._store = store
        self._invalidations: MutableStateFlow[int] = MutableStateFlow(0)

    @property
    def store(self) -> TaskStore:
        return self._store

    async def _run(self, op: str, fn: Callable[..., T], *args: object) -> T:
        try:
            return await asyncio.to_thread(fn, *args)
        except sqlite3.Error as exc:
            raise StorageError(f"{op} failed: {exc}") from exc

    def _invalidate(self) -> None:
        self._invalidations.update(lambda n: n + 1)

    async def watch_tasks(
        self,
        search_query: str,
        sort_order: SortOrder,
        hide_completed: bool,
    ) -> AsyncIterator[list[Task]]:
        """
        Live, ordered task list for one filter combination.

        Yields the current snapshot first, then a new one after every write that
        changes it. Runs until the consumer stops iterating.
        """
        last: list[Task] | None = None
        async for version in self._invalidations:
            tasks = await self._run(
                "get_tasks", self._store.get_tasks, search_query, sort_order, hide_completed
            )
            if tasks == last:
                continue
            last = tasks
            logger.debug(
                "watch_tasks v%s query=%r sort=%s hide=%s -> %d task(s)",
                version,
                search_query,
                sort_order.value,
                hide_completed,
                len(tasks),
            )
            yield tasks

    async def insert(self, task: Task) -> int:
        task_id = await self._run("insert", self._store.insert, task)
        self._invalidate()
        return task_id

    async def update(self, task: Task) -> None:
        await self._run("update", self._store.update, task)
        self._invalidate()

    async def delete(self, task: Task) -> None:
        await self._run("delete", self._store.delete, task)
        self._invalidate()

    async def delete_completed_tasks(self) -> None:
        await self._run("delete_completed_tasks", self._store.delete_completed_tasks)
        self._invalidate()
