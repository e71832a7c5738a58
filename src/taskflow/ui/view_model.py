# src/taskflow/ui/view_model.py

from __future__ import annotations

from ..core.scope import Scope


class ViewModel:
    """Base for screen state machines: owns a Scope that clear() cancels."""

    def __init__(self) -> None:
        self.view_model_scope = Scope(type(self).__name__)

    def clear(self) -> None:
        self.view_model_scope.cancel()
