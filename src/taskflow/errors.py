# src/taskflow/errors.py

from __future__ import annotations


class TaskflowError(Exception):
    """Base class for errors raised by taskflow."""


class InvalidInputError(TaskflowError, ValueError):
    """User input rejected before any storage call (e.g. a blank task name)."""


class StorageError(TaskflowError):
    """A read or write against tasks/preferences storage failed."""
