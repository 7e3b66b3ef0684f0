# src/todo_app/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root": it ensures local directories exist
and wires the SQLite TaskStore into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_errors import TaskStoreError
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    try:
        settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise TaskStoreError(f"Cannot create directory for {settings.db_path}: {exc}") from exc


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Opening the store creates the schema if it is missing.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)
    logger.debug("Opening task store at %s", settings.db_path)

    return AppState(
        settings=settings,
        task_store=TaskStore(settings.db_path),
    )
