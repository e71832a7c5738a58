# src/taskflow/core/flow.py

"""
Small asyncio reactive toolkit used by the view models.

- MutableStateFlow: observable value, replays the latest value to every new collector.
- EventChannel: one-shot events, single collector, never replayed.
- combine(): latest-value tuple over several async iterables.
- flat_map_latest(): re-subscribe on every upstream value, dropping superseded results.

Everything here runs on one event loop; no locking is needed between awaits.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterable, AsyncIterator, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")
E = TypeVar("E")


class MutableStateFlow(Generic[T]):
    """
    Holds one current value.

    Iterating yields the current value immediately, then each later distinct value.
    Slow collectors are conflated: they only see the most recent value.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._version = 0
        self._changed = asyncio.Event()

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value == self._value:
            return
        self._value = new_value
        self._version += 1
        # Wake everyone waiting on the old event; later waiters get a fresh one.
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    def update(self, fn: Callable[[T], T]) -> T:
        self.value = fn(self._value)
        return self._value

    async def __aiter__(self) -> AsyncIterator[T]:
        seen = self._version
        last = self._value
        yield last
        while True:
            if seen == self._version:
                await self._changed.wait()
                continue
            seen = self._version
            # A->B->A between wakeups leaves nothing new for this collector.
            if self._value == last:
                continue
            last = self._value
            yield last


class EventChannel(Generic[E]):
    """
    Unbounded FIFO of one-shot events.

    Each event is received exactly once. Only one collector may iterate the
    channel at a time; events sent while nobody collects wait in the buffer.
    """

    def __init__(self, name: str = "events") -> None:
        self._name = name
        self._queue: asyncio.Queue[E] = asyncio.Queue()
        self._collecting = False

    def send(self, event: E) -> None:
        logger.debug("[%s] send %r", self._name, event)
        self._queue.put_nowait(event)

    def try_receive(self) -> E | None:
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    def pending(self) -> int:
        return self._queue.qsize()

    async def __aiter__(self) -> AsyncIterator[E]:
        if self._collecting:
            raise RuntimeError(f"{self._name}: channel already has an active collector")
        self._collecting = True
        try:
            while True:
                yield await self._queue.get()
        finally:
            self._collecting = False


@dataclass(slots=True, frozen=True)
class _Failure:
    error: BaseException


_DONE = object()
_UNSET = object()


async def _cancel_all(tasks: list[asyncio.Task[Any]]) -> None:
    for t in tasks:
        t.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def combine(*flows: AsyncIterable[Any]) -> AsyncIterator[tuple[Any, ...]]:
    """
    Emit a tuple of the latest value of every flow.

    Nothing is emitted until each flow produced at least one value. Updates that
    pile up before the consumer asks for the next tuple are merged into one.
    """
    queue: asyncio.Queue[tuple[int, Any]] = asyncio.Queue()

    async def pump(index: int, flow: AsyncIterable[Any]) -> None:
        try:
            async for item in flow:
                await queue.put((index, item))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            await queue.put((index, _Failure(exc)))
            return
        await queue.put((index, _DONE))

    pumps = [asyncio.create_task(pump(i, f)) for i, f in enumerate(flows)]
    latest: list[Any] = [_UNSET] * len(flows)
    remaining = len(flows)

    try:
        while remaining:
            batch = [await queue.get()]
            while not queue.empty():
                batch.append(queue.get_nowait())

            for index, item in batch:
                if item is _DONE:
                    remaining -= 1
                elif isinstance(item, _Failure):
                    raise item.error
                else:
                    latest[index] = item

            if _UNSET not in latest and any(item is not _DONE for _, item in batch):
                yield tuple(latest)
    finally:
        await _cancel_all(pumps)


async def flat_map_latest(
    upstream: AsyncIterable[T],
    transform: Callable[[T], AsyncIterable[R]],
) -> AsyncIterator[R]:
    """
    For every upstream value, subscribe to transform(value) and forward its items.

    A new upstream value cancels the previous inner subscription before the next
    one starts. Each subscription carries a generation number; anything tagged
    with an older generation is dropped, so a superseded result is never yielded.
    """
    out: asyncio.Queue[tuple[int | None, Any]] = asyncio.Queue()
    generation = 0
    inner: asyncio.Task[None] | None = None

    async def run_inner(gen: int, flow: AsyncIterable[R]) -> None:
        try:
            async for item in flow:
                await out.put((gen, item))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            await out.put((gen, _Failure(exc)))
            return
        await out.put((gen, _DONE))

    async def run_upstream() -> None:
        nonlocal generation, inner
        try:
            async for value in upstream:
                if inner is not None:
                    inner.cancel()
                generation += 1
                inner = asyncio.create_task(run_inner(generation, transform(value)))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            await out.put((None, _Failure(exc)))
            return
        await out.put((None, _DONE))

    up = asyncio.create_task(run_upstream())
    upstream_done = False
    done_generation = 0

    try:
        while True:
            if upstream_done and done_generation == generation:
                return
            gen, item = await out.get()

            if gen is None:
                if isinstance(item, _Failure):
                    raise item.error
                upstream_done = True
                continue

            if gen != generation:
                logger.debug("Dropping result of superseded generation %s (latest=%s)", gen, generation)
                continue

            if item is _DONE:
                done_generation = gen
                continue
            if isinstance(item, _Failure):
                raise item.error

            yield item
    finally:
        pending = [up] + ([inner] if inner is not None else [])
        await _cancel_all(pending)
