# tests/test_task_dao.py

from __future__ import annotations

import asyncio
import sqlite3
from dataclasses import replace

import pytest

from taskflow.errors import StorageError
from taskflow.tasks.task_dao import TaskDao
from taskflow.tasks.task_models import SortOrder, Task


async def _next(agen):
    return await asyncio.wait_for(anext(agen), timeout=2.0)


@pytest.mark.asyncio
async def test_watch_delivers_initial_snapshot_then_updates(dao: TaskDao) -> None:
    watcher = dao.watch_tasks("", SortOrder.BY_DATE, False)
    try:
        assert await _next(watcher) == []

        task_id = await dao.insert(Task("Buy milk", created=100))
        assert [t.id for t in await _next(watcher)] == [task_id]

        await dao.update(Task("Buy milk", completed=True, created=100, id=task_id))
        assert (await _next(watcher))[0].completed is True

        await dao.delete_completed_tasks()
        assert await _next(watcher) == []
    finally:
        await watcher.aclose()


@pytest.mark.asyncio
async def test_watch_skips_writes_that_do_not_change_the_result(dao: TaskDao) -> None:
    watcher = dao.watch_tasks("", SortOrder.BY_DATE, True)
    try:
        assert await _next(watcher) == []

        # Completed and hidden: the visible list stays empty.
        await dao.insert(Task("hidden", completed=True))
        visible_id = await dao.insert(Task("visible"))

        assert [t.id for t in await _next(watcher)] == [visible_id]
    finally:
        await watcher.aclose()


@pytest.mark.asyncio
async def test_all_active_watchers_see_the_same_write(dao: TaskDao) -> None:
    by_name = dao.watch_tasks("", SortOrder.BY_NAME, False)
    searching = dao.watch_tasks("Call", SortOrder.BY_DATE, False)
    try:
        assert await _next(by_name) == []
        assert await _next(searching) == []

        await dao.insert(Task("Call mom"))

        assert [t.name for t in await _next(by_name)] == ["Call mom"]
        assert [t.name for t in await _next(searching)] == ["Call mom"]
    finally:
        await by_name.aclose()
        await searching.aclose()


@pytest.mark.asyncio
async def test_delete_then_reinsert_restores_task_with_new_id(dao: TaskDao) -> None:
    await dao.insert(Task("filler", created=1))
    task_id = await dao.insert(Task("X", important=True, created=50))
    original = dao.store.get_task(task_id)
    assert original is not None

    await dao.delete(original)
    new_id = await dao.insert(original)

    restored = dao.store.get_task(new_id)
    assert new_id != task_id
    assert restored == replace(original, id=new_id)


@pytest.mark.asyncio
async def test_driver_errors_surface_as_storage_error(dao: TaskDao, monkeypatch) -> None:
    def broken(task):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(dao.store, "update", broken)

    with pytest.raises(StorageError):
        await dao.update(Task("x", id=1))
