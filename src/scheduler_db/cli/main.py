# src/scheduler_db/cli/main.py

"""
CLI entrypoint.

Initializes logging, opens the task store, then runs the console REPL.
A store that cannot be opened is fatal here: the process exits with status 1.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.task_errors import StorageError

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/scheduler")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "scheduler"))

    try:
        state = create_initial_state(settings=settings)
    except StorageError as exc:
        logger.critical("Task store failed to initialize db=%s: %s", settings.db_path, exc)
        raise SystemExit(1) from exc

    try:
        run_console_loop(state)
    finally:
        state.task_store.close()
        logger.info("Bye.")


if __name__ == "__main__":
    main()
