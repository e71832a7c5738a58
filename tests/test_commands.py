# tests/test_commands.py

from __future__ import annotations

import pytest

from taskflow.cli.commands import CommandRegistry, registry
from taskflow.connectors.console_connector import ConsoleShell
from taskflow.core.state import AppState
from taskflow.tasks.task_models import Task

from .fakes import eventually


def test_command_registry_routes_and_passes_raw_arguments() -> None:
    reg = CommandRegistry()
    seen: list[str] = []

    def handler(shell, arg_text):
        seen.append(arg_text)
        return "ok"

    reg.register("a", handler, "a", aliases=["alias"])

    assert reg.handle(None, "/a  two  spaces ") == "ok"
    assert reg.handle(None, "/ALIAS") == "ok"
    assert seen == [" two  spaces ", ""]


def test_command_registry_unknown_and_non_command() -> None:
    reg = CommandRegistry()
    assert reg.handle(None, "hello") is None
    assert "Unknown command" in (reg.handle(None, "/nope") or "")
    assert "Empty command" in (reg.handle(None, "/") or "")


@pytest.mark.asyncio
async def test_console_add_task_flow(state: AppState) -> None:
    out: list[str] = []
    shell = ConsoleShell(state, emit=out.append)
    shell.start()
    try:
        await eventually(lambda: "Tasks:\nNo tasks." in out)

        registry.handle(shell, "/new")
        await eventually(lambda: shell.form is not None)
        assert "add_edit" in state.saved_state

        registry.handle(shell, "/save")
        await eventually(lambda: "Name cannot be empty" in out)

        registry.handle(shell, "/name Buy milk")
        registry.handle(shell, "/important on")
        registry.handle(shell, "/save")
        await eventually(lambda: "Task added" in out)

        assert shell.form is None
        assert "add_edit" not in state.saved_state
        await eventually(lambda: [t.name for t in shell.last_tasks] == ["Buy milk"])
        assert shell.last_tasks[0].important is True
    finally:
        shell.close()


@pytest.mark.asyncio
async def test_console_delete_undo_and_clear_completed(state: AppState) -> None:
    await state.task_dao.insert(Task("keep", created=1))
    await state.task_dao.insert(Task("finished", completed=True, created=2))

    out: list[str] = []
    shell = ConsoleShell(state, emit=out.append)
    shell.start()
    try:
        await eventually(lambda: len(shell.last_tasks) == 2)

        registry.handle(shell, "/del 1")
        await eventually(lambda: any("Task deleted: 'keep'" in m for m in out))
        await eventually(lambda: [t.name for t in shell.last_tasks] == ["finished"])

        registry.handle(shell, "/undo")
        await eventually(lambda: sorted(t.name for t in shell.last_tasks) == ["finished", "keep"])

        registry.handle(shell, "/clear")
        await eventually(lambda: shell.confirm_delete is not None)
        registry.handle(shell, "/yes")
        await state.application_scope.join()

        await eventually(lambda: [t.name for t in shell.last_tasks] == ["keep"])
        assert shell.confirm_delete is None
        assert registry.handle(shell, "/del 5") == "No task #5 in the current list."
    finally:
        shell.close()
