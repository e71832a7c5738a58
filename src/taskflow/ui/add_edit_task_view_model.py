# src/taskflow/ui/add_edit_task_view_model.py

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import TypeVar

from ..core.flow import EventChannel
from ..core.ports import TaskRepo
from ..core.saved_state import SavedStateHandle
from ..errors import InvalidInputError
from ..tasks.task_models import Task
from .results import ADD_TASK_RESULT_OK, EDIT_TASK_RESULT_OK
from .view_model import ViewModel

logger = logging.getLogger(__name__)

T = TypeVar("T")

KEY_TASK = "task"
KEY_TASK_NAME = "taskName"
KEY_TASK_IMPORTANCE = "taskImportance"


@dataclass(frozen=True, slots=True)
class ShowInvalidInputMessage:
    msg: str


@dataclass(frozen=True, slots=True)
class NavigateBackWithResult:
    result: int


AddEditTaskEvent = ShowInvalidInputMessage | NavigateBackWithResult


def validate_task_name(name: str) -> None:
    if not name or name.isspace():
        raise InvalidInputError("Name cannot be empty")


class AddEditTaskViewModel(ViewModel):
    """
    Draft state of the add/edit form.

    The edited task (if any) arrives in the saved state under "task". Field edits
    are written back to the saved state on every change, so a recreated form
    shows the draft instead of the original values.
    """

    def __init__(self, task_repo: TaskRepo, state: SavedStateHandle) -> None:
        super().__init__()
        self._task_repo = task_repo
        self._state = state

        raw_task = state.get(KEY_TASK)
        self.task: Task | None = Task.from_dict(raw_task) if raw_task else None

        self._task_name: str = self._restore(KEY_TASK_NAME, self.task.name if self.task else "")
        self._task_importance: bool = self._restore(
            KEY_TASK_IMPORTANCE, self.task.important if self.task else False
        )

        self._add_edit_task_event_channel: EventChannel[AddEditTaskEvent] = EventChannel("add-edit")

    def _restore(self, key: str, fallback: T) -> T:
        value = self._state.get(key)
        return fallback if value is None else value

    @classmethod
    def state_for(cls, task: Task | None) -> SavedStateHandle:
        """Navigation arguments for opening the form (edit mode when task is given)."""
        return SavedStateHandle({KEY_TASK: task.to_dict()} if task is not None else {})

    @property
    def add_edit_task_event(self) -> EventChannel[AddEditTaskEvent]:
        return self._add_edit_task_event_channel

    @property
    def task_name(self) -> str:
        return self._task_name

    @task_name.setter
    def task_name(self, value: str) -> None:
        self._task_name = value
        self._state.set(KEY_TASK_NAME, value)

    @property
    def task_importance(self) -> bool:
        return self._task_importance

    @task_importance.setter
    def task_importance(self, value: bool) -> None:
        self._task_importance = value
        self._state.set(KEY_TASK_IMPORTANCE, value)

    def on_save_click(self) -> asyncio.Task[None] | None:
        try:
            validate_task_name(self.task_name)
        except InvalidInputError as exc:
            self._show_invalid_input_message(str(exc))
            return None

        if self.task is not None:
            updated_task = replace(self.task, name=self.task_name, important=self.task_importance)
            return self.view_model_scope.launch(self._update_task(updated_task))

        new_task = Task(name=self.task_name, important=self.task_importance)
        return self.view_model_scope.launch(self._create_task(new_task))

    async def _create_task(self, task: Task) -> None:
        task_id = await self._task_repo.insert(task)
        logger.info("Task created id=%s", task_id)
        self._add_edit_task_event_channel.send(NavigateBackWithResult(ADD_TASK_RESULT_OK))

    async def _update_task(self, task: Task) -> None:
        await self._task_repo.update(task)
        logger.info("Task updated id=%s", task.id)
        self._add_edit_task_event_channel.send(NavigateBackWithResult(EDIT_TASK_RESULT_OK))

    def _show_invalid_input_message(self, text: str) -> None:
        self._add_edit_task_event_channel.send(ShowInvalidInputMessage(text))
