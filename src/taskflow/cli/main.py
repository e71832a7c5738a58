# src/taskflow/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, restores saved screen state, runs the
console shell and persists saved state on the way out.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, persist_saved_state, restore_saved_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    restore_saved_state(state)

    try:
        asyncio.run(run_console_loop(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    finally:
        persist_saved_state(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
