# src/taskflow/ui/tasks_view_model.py

"""
Task list screen state machine.

The list itself is a state flow (latest value replayed to every observer) fed by
combining the search query with the filter preferences and re-subscribing the
task query whenever either changes. Everything that should happen exactly once
(navigation, snackbars, undo offers) goes through a separate event channel.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass, replace
from typing import Any

from ..core.flow import EventChannel, MutableStateFlow, combine, flat_map_latest
from ..core.ports import PreferencesRepo, TaskRepo
from ..core.saved_state import SavedStateHandle
from ..tasks.task_models import FilterPreferences, SortOrder, Task
from .results import ADD_TASK_RESULT_OK, EDIT_TASK_RESULT_OK
from .view_model import ViewModel

logger = logging.getLogger(__name__)

KEY_SEARCH_QUERY = "searchQuery"


@dataclass(frozen=True, slots=True)
class NavigateToAddTaskScreen:
    pass


@dataclass(frozen=True, slots=True)
class NavigateToEditTaskScreen:
    task: Task


@dataclass(frozen=True, slots=True)
class ShowUndoDeleteTaskMessage:
    task: Task


@dataclass(frozen=True, slots=True)
class ShowTaskSavedConfirmationMessage:
    msg: str


@dataclass(frozen=True, slots=True)
class NavigateToDeleteAllCompletedScreen:
    pass


TasksEvent = (
    NavigateToAddTaskScreen
    | NavigateToEditTaskScreen
    | ShowUndoDeleteTaskMessage
    | ShowTaskSavedConfirmationMessage
    | NavigateToDeleteAllCompletedScreen
)


class TasksViewModel(ViewModel):
    def __init__(
        self,
        task_repo: TaskRepo,
        preferences: PreferencesRepo,
        state: SavedStateHandle,
    ) -> None:
        super().__init__()
        self._task_repo = task_repo
        self._preferences = preferences
        self._state = state

        # Survives screen recreation through the saved state handle.
        self.search_query: MutableStateFlow[str] = state.get_state_flow(KEY_SEARCH_QUERY, "")
        self.preferences_flow: AsyncIterable[FilterPreferences] = preferences.preferences_flow

        # None until the first query result arrives.
        self.tasks: MutableStateFlow[list[Task] | None] = MutableStateFlow(None)

        # Most recently swiped-away task, until undone or replaced by the next delete.
        self.pending_undo: Task | None = None

        self._tasks_event_channel: EventChannel[TasksEvent] = EventChannel("tasks")
        self._collector: asyncio.Task[None] | None = None

    @property
    def tasks_event(self) -> EventChannel[TasksEvent]:
        return self._tasks_event_channel

    # ---- list state ----

    def tasks_flow(self) -> AsyncIterator[list[Task]]:
        return flat_map_latest(combine(self.search_query, self.preferences_flow), self._watch)

    def _watch(self, params: tuple[Any, ...]) -> AsyncIterable[list[Task]]:
        query, prefs = params
        logger.debug("Querying tasks query=%r prefs=%s", query, prefs)
        return self._task_repo.watch_tasks(query, prefs.sort_order, prefs.hide_completed)

    async def _collect_tasks(self) -> None:
        async for tasks in self.tasks_flow():
            self.tasks.value = tasks

    def start(self) -> asyncio.Task[None]:
        """Begin feeding `tasks` from storage. Idempotent while the collector runs."""
        if self._collector is None or self._collector.done():
            self._collector = self.view_model_scope.launch(self._collect_tasks())
        return self._collector

    # ---- user intents ----

    def on_search_query_changed(self, text: str) -> None:
        self._state.set(KEY_SEARCH_QUERY, text)

    def on_sort_order_selected(self, sort_order: SortOrder) -> asyncio.Task[None]:
        return self.view_model_scope.launch(self._preferences.update_sort_order(sort_order))

    def on_hide_completed_click(self, hide_completed: bool) -> asyncio.Task[None]:
        return self.view_model_scope.launch(self._preferences.update_hide_completed(hide_completed))

    def on_task_selected(self, task: Task) -> None:
        self._tasks_event_channel.send(NavigateToEditTaskScreen(task))

    def on_task_checked_changed(self, task: Task, is_checked: bool) -> asyncio.Task[None]:
        return self.view_model_scope.launch(self._task_repo.update(replace(task, completed=is_checked)))

    def on_task_swiped(self, task: Task) -> asyncio.Task[None]:
        return self.view_model_scope.launch(self._delete_task(task))

    async def _delete_task(self, task: Task) -> None:
        await self._task_repo.delete(task)
        self.pending_undo = task
        self._tasks_event_channel.send(ShowUndoDeleteTaskMessage(task))

    def on_undo_delete_click(self, task: Task | None = None) -> asyncio.Task[int] | None:
        """
        Re-insert a deleted task (defaults to the last swiped one).

        Storage assigns a fresh id, so the restored task is equal to the
        deleted one in every field except `id`.
        """
        if task is None:
            task = self.pending_undo
        if task is None:
            logger.debug("Undo requested with nothing to restore")
            return None
        if task == self.pending_undo:
            self.pending_undo = None
        return self.view_model_scope.launch(self._task_repo.insert(task))

    def on_add_new_task_click(self) -> None:
        self._tasks_event_channel.send(NavigateToAddTaskScreen())

    def on_add_edit_result(self, result: int) -> None:
        if result == ADD_TASK_RESULT_OK:
            self._show_task_saved_confirmation_message("Task added")
        elif result == EDIT_TASK_RESULT_OK:
            self._show_task_saved_confirmation_message("Task updated")

    def _show_task_saved_confirmation_message(self, text: str) -> None:
        self._tasks_event_channel.send(ShowTaskSavedConfirmationMessage(text))

    def on_delete_all_completed_click(self) -> None:
        self._tasks_event_channel.send(NavigateToDeleteAllCompletedScreen())
