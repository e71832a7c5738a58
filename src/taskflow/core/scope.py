# src/taskflow/core/scope.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Scope:
    """
    Owner of fire-and-forget jobs.

    launch() schedules a coroutine on the running loop and returns the asyncio.Task,
    so a caller may await it to observe the result or the failure. Failures nobody
    awaits are still logged here. cancel() stops every job still running.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._jobs: set[asyncio.Task[Any]] = set()
        self._cancelled = False

    def launch(self, coro: Coroutine[Any, Any, T]) -> asyncio.Task[T]:
        if self._cancelled:
            coro.close()
            raise RuntimeError(f"scope {self.name!r} is cancelled")
        task = asyncio.get_running_loop().create_task(coro)
        self._jobs.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._jobs.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("[%s] job %s failed", self.name, task.get_name(), exc_info=exc)

    async def join(self) -> None:
        """Wait until every job launched so far has finished."""
        while self._jobs:
            await asyncio.gather(*list(self._jobs), return_exceptions=True)

    def cancel(self) -> None:
        self._cancelled = True
        for task in list(self._jobs):
            task.cancel()
