# src/todo_app/tasks/task_errors.py

from __future__ import annotations


class TaskStoreError(Exception):
    """Opening, creating or querying the task database failed."""


class TaskNotFoundError(TaskStoreError, LookupError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task with id {task_id} not found")
        self.task_id = task_id
