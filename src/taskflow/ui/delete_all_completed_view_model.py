# src/taskflow/ui/delete_all_completed_view_model.py

from __future__ import annotations

import asyncio

from ..core.ports import TaskRepo
from ..core.scope import Scope
from .view_model import ViewModel


class DeleteAllCompletedViewModel(ViewModel):
    def __init__(self, task_repo: TaskRepo, application_scope: Scope) -> None:
        super().__init__()
        self._task_repo = task_repo
        self._application_scope = application_scope

    def on_confirm_click(self) -> asyncio.Task[None]:
        # Application scope: the dialog closes right away, the delete must still finish.
        return self._application_scope.launch(self._task_repo.delete_completed_tasks())
