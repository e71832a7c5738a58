# tests/test_tasks_view_model.py

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import replace

import pytest
import pytest_asyncio

from taskflow.core.saved_state import SavedStateHandle
from taskflow.errors import StorageError
from taskflow.tasks.task_models import SortOrder, Task
from taskflow.ui.results import ADD_TASK_RESULT_OK, EDIT_TASK_RESULT_OK
from taskflow.ui.tasks_view_model import (
    NavigateToAddTaskScreen,
    NavigateToDeleteAllCompletedScreen,
    NavigateToEditTaskScreen,
    ShowTaskSavedConfirmationMessage,
    ShowUndoDeleteTaskMessage,
    TasksViewModel,
)

from .fakes import FakePreferences, FakeTaskRepo, eventually


def _names(tasks: list[Task] | None) -> list[str]:
    return [t.name for t in tasks or []]


@pytest_asyncio.fixture()
async def vm(repo: FakeTaskRepo, prefs: FakePreferences):
    view_model = TasksViewModel(repo, prefs, SavedStateHandle())
    yield view_model
    view_model.clear()
    await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_list_state_follows_storage(vm: TasksViewModel, repo: FakeTaskRepo) -> None:
    vm.start()
    await eventually(lambda: vm.tasks.value is not None)

    assert _names(vm.tasks.value) == ["Buy groceries", "Wash the dishes", "Prepare food", "Call mom"]

    await repo.insert(Task("Repair my bike", created=9000))
    await eventually(lambda: "Repair my bike" in _names(vm.tasks.value))


@pytest.mark.asyncio
async def test_preferences_change_requeries(vm: TasksViewModel, repo: FakeTaskRepo, prefs) -> None:
    vm.start()
    await eventually(lambda: vm.tasks.value is not None)

    await vm.on_hide_completed_click(True)
    await eventually(lambda: "Prepare food" not in _names(vm.tasks.value))

    await vm.on_sort_order_selected(SortOrder.BY_NAME)
    await eventually(
        lambda: _names(vm.tasks.value) == ["Buy groceries", "Call mom", "Wash the dishes"]
    )
    assert prefs.updates == [("hide_completed", True), ("sort_order", SortOrder.BY_NAME)]
    assert repo.watch_calls[-1] == ("", SortOrder.BY_NAME, True)


@pytest.mark.asyncio
async def test_rapid_search_changes_deliver_only_the_latest_query() -> None:
    repo = FakeTaskRepo([Task("a task"), Task("ab task"), Task("abc task"), Task("zzz")])
    vm = TasksViewModel(repo, FakePreferences(), SavedStateHandle())
    seen: list[list[str]] = []

    async def record() -> None:
        async for tasks in vm.tasks:
            if tasks is not None:
                seen.append(_names(tasks))

    recorder = asyncio.create_task(record())
    vm.start()
    try:
        await eventually(lambda: vm.tasks.value is not None)

        vm.on_search_query_changed("a")
        vm.on_search_query_changed("ab")
        vm.on_search_query_changed("abc")

        await eventually(lambda: _names(vm.tasks.value) == ["abc task"])
        await asyncio.sleep(0.05)

        assert seen[-1] == ["abc task"]
        assert seen.count(["abc task"]) == 1
        assert repo.watch_calls[-1][0] == "abc"
        assert repo.max_active_watchers == 1
    finally:
        vm.clear()
        recorder.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await recorder


def test_search_query_lives_in_saved_state(repo: FakeTaskRepo, prefs: FakePreferences) -> None:
    state = SavedStateHandle({"searchQuery": "Call"})
    vm = TasksViewModel(repo, prefs, state)

    assert vm.search_query.value == "Call"
    vm.on_search_query_changed(" mom ")
    assert state.get("searchQuery") == " mom "


@pytest.mark.asyncio
async def test_toggle_complete_replaces_only_completed(vm: TasksViewModel, repo: FakeTaskRepo) -> None:
    task = repo.tasks[1]

    await vm.on_task_checked_changed(task, True)

    assert repo.calls_named("update") == [replace(task, completed=True)]
    assert vm.tasks_event.try_receive() is None


@pytest.mark.asyncio
async def test_toggle_failure_is_not_turned_into_an_event(vm: TasksViewModel, repo: FakeTaskRepo) -> None:
    repo.fail_writes = True

    with pytest.raises(StorageError):
        await vm.on_task_checked_changed(repo.tasks[1], True)

    assert vm.tasks_event.try_receive() is None


@pytest.mark.asyncio
async def test_swipe_deletes_then_offers_undo(vm: TasksViewModel, repo: FakeTaskRepo) -> None:
    task = repo.tasks[4]

    await vm.on_task_swiped(task)

    assert repo.calls_named("delete") == [task]
    assert 4 not in repo.tasks
    assert vm.tasks_event.try_receive() == ShowUndoDeleteTaskMessage(task)
    assert vm.pending_undo == task


@pytest.mark.asyncio
async def test_undo_reinserts_snapshot_with_new_id(vm: TasksViewModel, repo: FakeTaskRepo) -> None:
    task = repo.tasks[4]
    await vm.on_task_swiped(task)

    new_id = await vm.on_undo_delete_click(task)

    assert repo.calls_named("insert") == [task]
    assert new_id != task.id
    assert repo.tasks[new_id] == replace(task, id=new_id)
    assert vm.pending_undo is None


@pytest.mark.asyncio
async def test_undo_defaults_to_last_swiped_task(vm: TasksViewModel, repo: FakeTaskRepo) -> None:
    first, second = repo.tasks[1], repo.tasks[2]
    await vm.on_task_swiped(first)
    await vm.on_task_swiped(second)

    await vm.on_undo_delete_click()

    assert repo.calls_named("insert") == [second]
    assert vm.on_undo_delete_click() is None


@pytest.mark.asyncio
async def test_failed_delete_offers_no_undo(vm: TasksViewModel, repo: FakeTaskRepo) -> None:
    repo.fail_writes = True

    with pytest.raises(StorageError):
        await vm.on_task_swiped(repo.tasks[1])

    assert vm.tasks_event.try_receive() is None
    assert vm.pending_undo is None


@pytest.mark.asyncio
async def test_navigation_events(vm: TasksViewModel, repo: FakeTaskRepo) -> None:
    task = repo.tasks[2]

    vm.on_task_selected(task)
    vm.on_add_new_task_click()
    vm.on_delete_all_completed_click()

    assert vm.tasks_event.try_receive() == NavigateToEditTaskScreen(task)
    assert vm.tasks_event.try_receive() == NavigateToAddTaskScreen()
    assert vm.tasks_event.try_receive() == NavigateToDeleteAllCompletedScreen()
    assert vm.tasks_event.try_receive() is None


@pytest.mark.asyncio
async def test_form_results_map_to_confirmation_messages(vm: TasksViewModel) -> None:
    vm.on_add_edit_result(ADD_TASK_RESULT_OK)
    vm.on_add_edit_result(EDIT_TASK_RESULT_OK)
    vm.on_add_edit_result(0)
    vm.on_add_edit_result(99)

    assert vm.tasks_event.try_receive() == ShowTaskSavedConfirmationMessage("Task added")
    assert vm.tasks_event.try_receive() == ShowTaskSavedConfirmationMessage("Task updated")
    assert vm.tasks_event.try_receive() is None
