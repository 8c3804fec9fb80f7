# src/todo_tracker/tasks/errors.py

from __future__ import annotations


class TaskError(Exception):
    """Base class for task model / store rejections."""


class ValidationError(TaskError, ValueError):
    """Task creation received invalid input (e.g. a blank title)."""


class NotFoundError(TaskError, LookupError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"task not found: {task_id}")
        self.task_id = task_id


class DuplicateIdentityError(TaskError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"task already exists: {task_id}")
        self.task_id = task_id
