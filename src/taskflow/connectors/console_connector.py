# src/taskflow/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import assert_never

from ..cli.commands import registry as command_registry
from ..core.saved_state import SavedStateHandle
from ..core.scope import Scope
from ..core.state import AppState
from ..tasks.task_models import Task
from ..ui.add_edit_task_view_model import (
    AddEditTaskEvent,
    AddEditTaskViewModel,
    NavigateBackWithResult,
    ShowInvalidInputMessage,
)
from ..ui.delete_all_completed_view_model import DeleteAllCompletedViewModel
from ..ui.tasks_view_model import (
    NavigateToAddTaskScreen,
    NavigateToDeleteAllCompletedScreen,
    NavigateToEditTaskScreen,
    ShowTaskSavedConfirmationMessage,
    ShowUndoDeleteTaskMessage,
    TasksEvent,
    TasksViewModel,
)

logger = logging.getLogger(__name__)

SCREEN_TASKS = "tasks"
SCREEN_ADD_EDIT = "add_edit"


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def format_task(index: int, task: Task) -> str:
    box = "[x]" if task.completed else "[ ]"
    star = " !" if task.important else ""
    return f"{index:>3}. {box} {task.name}{star}  ({task.created_date_formatted})"


class ConsoleShell:
    """
    Host for the view models: renders the list, routes navigation events,
    and registers every open screen's saved state in AppState.
    """

    def __init__(self, state: AppState, emit: Callable[[str], None] = _print_ts) -> None:
        self.state = state
        self.emit = emit
        self.scope = Scope("console")

        tasks_state = state.saved_state.setdefault(SCREEN_TASKS, SavedStateHandle())
        self.tasks_vm = TasksViewModel(state.task_dao, state.preferences, tasks_state)
        self.last_tasks: list[Task] = []

        self.form: AddEditTaskViewModel | None = None
        self._form_collector: asyncio.Task[None] | None = None
        self.confirm_delete: DeleteAllCompletedViewModel | None = None

    # ---- lifecycle ----

    def start(self) -> None:
        self.tasks_vm.start()
        self.scope.launch(self._render_tasks())
        self.scope.launch(self._collect_tasks_events())

        # A form that was open when the previous session ended comes back with its draft.
        restored = self.state.saved_state.get(SCREEN_ADD_EDIT)
        if restored is not None:
            self._open_form_with(restored)
            self.emit("Restored unsaved form. /save or /cancel.")

    def close(self) -> None:
        self.tasks_vm.clear()
        if self.form is not None:
            self.form.clear()
        self.scope.cancel()

    # ---- list ----

    def task_at(self, position: int) -> Task | None:
        if 1 <= position <= len(self.last_tasks):
            return self.last_tasks[position - 1]
        return None

    def render_tasks(self) -> str:
        if not self.last_tasks:
            return "No tasks."
        return "\n".join(format_task(i, t) for i, t in enumerate(self.last_tasks, start=1))

    async def _render_tasks(self) -> None:
        async for tasks in self.tasks_vm.tasks:
            if tasks is None:
                continue
            self.last_tasks = tasks
            self.emit("Tasks:\n" + self.render_tasks())

    # ---- events ----

    async def _collect_tasks_events(self) -> None:
        async for event in self.tasks_vm.tasks_event:
            try:
                self.handle_tasks_event(event)
            except Exception:
                logger.exception("Tasks event handler crashed event=%r", event)

    def handle_tasks_event(self, event: TasksEvent) -> None:
        match event:
            case NavigateToAddTaskScreen():
                self.open_form(None)
            case NavigateToEditTaskScreen(task=task):
                self.open_form(task)
            case ShowUndoDeleteTaskMessage(task=task):
                self.emit(f"Task deleted: {task.name!r}. /undo to restore.")
            case ShowTaskSavedConfirmationMessage(msg=msg):
                self.emit(msg)
            case NavigateToDeleteAllCompletedScreen():
                self.confirm_delete = DeleteAllCompletedViewModel(
                    self.state.task_dao, self.state.application_scope
                )
                self.emit("Delete all completed tasks? /yes to confirm, /cancel to keep them.")
            case _:
                assert_never(event)

    async def _collect_form_events(self, form: AddEditTaskViewModel) -> None:
        async for event in form.add_edit_task_event:
            try:
                self.handle_form_event(event)
            except Exception:
                logger.exception("Form event handler crashed event=%r", event)
            if self.form is not form:
                return

    def handle_form_event(self, event: AddEditTaskEvent) -> None:
        match event:
            case ShowInvalidInputMessage(msg=msg):
                self.emit(msg)
            case NavigateBackWithResult(result=result):
                self.close_form()
                self.tasks_vm.on_add_edit_result(result)
            case _:
                assert_never(event)

    # ---- navigation ----

    def open_form(self, task: Task | None) -> None:
        self._open_form_with(AddEditTaskViewModel.state_for(task))
        mode = f"Editing {task.name!r}" if task is not None else "New task"
        self.emit(f"{mode}. /name TEXT, /important on|off, /save, /cancel.")

    def _open_form_with(self, form_state: SavedStateHandle) -> None:
        if self.form is not None:
            self.close_form()
        self.state.saved_state[SCREEN_ADD_EDIT] = form_state
        self.form = AddEditTaskViewModel(self.state.task_dao, form_state)
        self._form_collector = self.scope.launch(self._collect_form_events(self.form))

    def close_form(self) -> None:
        if self.form is None:
            return
        self.form.clear()
        self.form = None
        self.state.saved_state.pop(SCREEN_ADD_EDIT, None)
        collector, self._form_collector = self._form_collector, None
        if collector is not None and collector is not asyncio.current_task():
            collector.cancel()

    def close_confirmation(self) -> None:
        if self.confirm_delete is not None:
            self.confirm_delete.clear()
            self.confirm_delete = None


async def run_console_loop(state: AppState, *, read_line: Callable[[str], str] = input) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.")

    shell = ConsoleShell(state)
    shell.start()

    try:
        while True:
            try:
                user_input = (await asyncio.to_thread(read_line, "> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                reply = command_registry.handle(shell, user_input)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is None:
                reply = "Commands start with '/'. Use /help to list them."
            if reply:
                shell.emit(reply)

            # Let launched jobs and event collectors run before the next prompt.
            await asyncio.sleep(0.05)
    finally:
        shell.close()
        await state.application_scope.join()
        logger.info("Console connector finished.")
