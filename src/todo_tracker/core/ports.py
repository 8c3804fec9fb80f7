# src/todo_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the presentation layer.

Commands and connectors depend on this Protocol instead of the SQLite store,
so an in-memory fake can stand in for it in tests.
"""

from collections.abc import Callable
from typing import Any, Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    # Mutations
    def add(self, task: Task) -> None: ...
    def remove(self, task_id: str) -> None: ...
    def update(self, task_id: str, mutator: Callable[[Task], Task | None]) -> Task: ...
    def toggle_completion(self, task_id: str) -> Task: ...

    # Reads
    def get_task(self, task_id: str) -> Task | None: ...
    def count_tasks(self) -> int: ...
    def query_all_ordered(self) -> list[Task]: ...

    # Change notification (notify-on-write, pull-on-read)
    def subscribe(self, listener: Callable[[Any], None]) -> Callable[[], None]: ...

    def close(self) -> None: ...
