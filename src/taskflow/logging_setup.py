# src/taskflow/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Modules that log every re-query and every event; too chatty for the prompt.
_QUERY_LOGGERS = ("taskflow.tasks.task_dao", "taskflow.core.flow")


class _ConsoleFilter(logging.Filter):
    """Keep the interactive prompt readable: query chatter only at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(_QUERY_LOGGERS):
            return record.levelno >= logging.WARNING
        if record.name.startswith("taskflow."):
            return True
        # asyncio and captured py.warnings
        return record.levelno >= logging.WARNING


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskflow",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Console output on stderr (filtered) plus a full taskflow.log in `log_dir`.

    Call once from main(), before the first task is loaded.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleFilter())
    root.addHandler(console)

    log_file = logging.FileHandler(str(log_dir / "taskflow.log"), encoding="utf-8")
    log_file.setLevel(file_level)
    log_file.setFormatter(fmt)
    root.addHandler(log_file)

    logging.captureWarnings(True)
