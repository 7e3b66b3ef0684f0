# src/todo_app/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .ports import TaskRepo


@dataclass(slots=True)
class AppState:
    # Settings (or a compatible namespace in tests).
    settings: Any
    task_store: TaskRepo
