# src/taskflow/tasks/seed.py

from __future__ import annotations

import logging

from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)


def sample_tasks() -> list[Task]:
    return [
        Task("Wash the dishes"),
        Task("Do the laundry"),
        Task("Buy groceries", important=True),
        Task("Prepare food", completed=True),
        Task("Call mom"),
        Task("Visit grandma", completed=True),
        Task("Repair my bike"),
        Task("Call Elon Musk"),
    ]


def seed_sample_tasks(store: TaskStore) -> int:
    """Populate a freshly created database. Returns the number of tasks inserted."""
    tasks = sample_tasks()
    for task in tasks:
        store.insert(task)
    logger.info("Seeded %d sample task(s) into %s", len(tasks), store.db_path)
    return len(tasks)
