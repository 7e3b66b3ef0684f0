# src/todo_app/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the dispatcher.

Command handlers depend on this Protocol instead of the concrete SQLite store,
so tests can hand them a fake.
"""

from datetime import datetime
from typing import Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    def add_task(self, description: str, *, created_at: datetime) -> int: ...
    def get_task(self, task_id: int) -> Task: ...
    def list_tasks(self) -> list[Task]: ...
    def set_completed(self, task_id: int, completed: bool) -> None: ...
    def delete_task(self, task_id: int) -> None: ...
    def delete_all(self) -> int: ...
    def delete_created_before(self, before: datetime) -> int: ...
    def close(self) -> None: ...
