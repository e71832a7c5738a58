# src/taskflow/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..tasks.task_models import SortOrder, Task

if TYPE_CHECKING:
    from ..connectors.console_connector import ConsoleShell

CommandHandler = Callable[["ConsoleShell", str], str | None]

logger = logging.getLogger(__name__)

_ON = ("on", "1", "true", "yes")
_OFF = ("off", "0", "false", "no")


class CommandRegistry:
    """Simple slash-command registry used by the console shell (/help, /new, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, shell: ConsoleShell, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string, "" for nothing to print, or None if not a command.

        The argument text after the first space is passed verbatim (search
        queries keep their inner and trailing whitespace).
        """
        if not line.startswith("/"):
            return None

        name, _, arg_text = line[1:].partition(" ")
        name = name.lower()
        if not name:
            return "Empty command. Use /help to list available commands."

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(shell, arg_text)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_index(shell: ConsoleShell, arg_text: str) -> Task | str:
    """Resolve a 1-based list position to a task, or return an error reply."""
    raw = arg_text.strip()
    if not raw.isdigit():
        return "Give the task number shown by /list."
    task = shell.task_at(int(raw))
    if task is None:
        return f"No task #{raw} in the current list."
    return task


def _parse_flag(arg_text: str) -> bool | None:
    arg = arg_text.strip().lower()
    if arg in _ON:
        return True
    if arg in _OFF:
        return False
    return None


def cmd_help(shell: ConsoleShell, arg_text: str) -> str:
    return registry.build_help()


def cmd_list(shell: ConsoleShell, arg_text: str) -> str:
    return shell.render_tasks()


def cmd_search(shell: ConsoleShell, arg_text: str) -> str:
    shell.tasks_vm.on_search_query_changed(arg_text)
    return f"Searching for {arg_text!r}." if arg_text else "Search cleared."


def cmd_sort(shell: ConsoleShell, arg_text: str) -> str:
    """
    /sort name  -> alphabetical
    /sort date  -> creation time
    """
    arg = arg_text.strip().lower()
    orders = {"name": SortOrder.BY_NAME, "date": SortOrder.BY_DATE}
    if arg not in orders:
        return "Usage: /sort name | /sort date."
    shell.tasks_vm.on_sort_order_selected(orders[arg])
    return ""


def cmd_hide(shell: ConsoleShell, arg_text: str) -> str:
    flag = _parse_flag(arg_text)
    if flag is None:
        return "Usage: /hide on | /hide off."
    shell.tasks_vm.on_hide_completed_click(flag)
    return ""


def cmd_new(shell: ConsoleShell, arg_text: str) -> str:
    shell.tasks_vm.on_add_new_task_click()
    return ""


def cmd_edit(shell: ConsoleShell, arg_text: str) -> str:
    task = _parse_index(shell, arg_text)
    if isinstance(task, str):
        return task
    shell.tasks_vm.on_task_selected(task)
    return ""


def cmd_name(shell: ConsoleShell, arg_text: str) -> str:
    if shell.form is None:
        return "No form open. Use /new or /edit N first."
    shell.form.task_name = arg_text
    return f"Name: {arg_text!r}"


def cmd_important(shell: ConsoleShell, arg_text: str) -> str:
    if shell.form is None:
        return "No form open. Use /new or /edit N first."
    flag = _parse_flag(arg_text)
    if flag is None:
        return "Usage: /important on | /important off."
    shell.form.task_importance = flag
    return f"Important: {'yes' if flag else 'no'}"


def cmd_save(shell: ConsoleShell, arg_text: str) -> str:
    if shell.form is None:
        return "No form open. Use /new or /edit N first."
    shell.form.on_save_click()
    return ""


def cmd_cancel(shell: ConsoleShell, arg_text: str) -> str:
    if shell.confirm_delete is not None:
        shell.close_confirmation()
        return "Kept completed tasks."
    if shell.form is not None:
        shell.close_form()
        return "Form discarded."
    return "Nothing to cancel."


def _set_completed(shell: ConsoleShell, arg_text: str, completed: bool) -> str:
    task = _parse_index(shell, arg_text)
    if isinstance(task, str):
        return task
    shell.tasks_vm.on_task_checked_changed(task, completed)
    return ""


def cmd_done(shell: ConsoleShell, arg_text: str) -> str:
    return _set_completed(shell, arg_text, True)


def cmd_undone(shell: ConsoleShell, arg_text: str) -> str:
    return _set_completed(shell, arg_text, False)


def cmd_del(shell: ConsoleShell, arg_text: str) -> str:
    task = _parse_index(shell, arg_text)
    if isinstance(task, str):
        return task
    shell.tasks_vm.on_task_swiped(task)
    return ""


def cmd_undo(shell: ConsoleShell, arg_text: str) -> str:
    if shell.tasks_vm.on_undo_delete_click() is None:
        return "Nothing to undo."
    return ""


def cmd_clear(shell: ConsoleShell, arg_text: str) -> str:
    shell.tasks_vm.on_delete_all_completed_click()
    return ""


def cmd_yes(shell: ConsoleShell, arg_text: str) -> str:
    if shell.confirm_delete is None:
        return "Nothing to confirm."
    shell.confirm_delete.on_confirm_click()
    shell.close_confirmation()
    return ""


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the current task list.", aliases=["ls"])
registry.register("search", cmd_search, help_text="Filter by name: /search TEXT (empty clears).")
registry.register("sort", cmd_sort, help_text="Sort order: /sort name | /sort date.")
registry.register("hide", cmd_hide, help_text="Hide completed tasks: /hide on | /hide off.")
registry.register("new", cmd_new, help_text="Open the form for a new task.", aliases=["add"])
registry.register("edit", cmd_edit, help_text="Open the form for task N: /edit N.")
registry.register("name", cmd_name, help_text="Form: set the task name.")
registry.register("important", cmd_important, help_text="Form: /important on | /important off.")
registry.register("save", cmd_save, help_text="Form: save the task.")
registry.register("cancel", cmd_cancel, help_text="Close the open form or confirmation.")
registry.register("done", cmd_done, help_text="Mark task N completed.")
registry.register("undone", cmd_undone, help_text="Mark task N not completed.")
registry.register("del", cmd_del, help_text="Delete task N (undo with /undo).", aliases=["rm"])
registry.register("undo", cmd_undo, help_text="Restore the last deleted task.")
registry.register("clear", cmd_clear, help_text="Delete all completed tasks (asks first).")
registry.register("yes", cmd_yes, help_text="Confirm deleting all completed tasks.")
