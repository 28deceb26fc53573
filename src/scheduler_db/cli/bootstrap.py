# src/scheduler_db/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- opens the TaskStore for the configured database file,
- wires it into AppState.

Opening the store may raise StorageError; deciding whether that is fatal is
left to the entrypoint.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    limit = int(getattr(settings, "list_limit", 20))
    logger.debug("Opening task store db=%s limit=%s", settings.db_path, limit)

    return AppState(
        settings=settings,
        task_store=TaskStore(settings.db_path, limit=limit),
    )
