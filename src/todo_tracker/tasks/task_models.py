# src/todo_tracker/tasks/task_models.py

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from enum import StrEnum

from .errors import ValidationError


class Priority(StrEnum):
    """
    Task priority.

    Notes:
    - rank is the persisted sort key (LOW=0, MEDIUM=1, HIGH=2).
    - label is what the presentation shows.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @classmethod
    def from_label(cls, raw: str) -> Priority:
        key = (raw or "").strip().lower()
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"unknown priority: {raw!r} (expected low, medium or high)") from None

    @classmethod
    def from_rank(cls, rank: int | None) -> Priority:
        for p, r in _RANKS.items():
            if r == rank:
                return p
        return cls.MEDIUM


_RANKS: dict[Priority, int] = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
}


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str
    due_at: float
    priority: Priority
    is_completed: bool
    created_at: float

    def is_overdue(self, now_ts: float | None = None) -> bool:
        if self.is_completed:
            return False
        if now_ts is None:
            now_ts = time.time()
        return self.due_at < now_ts


def new_task_id() -> str:
    return uuid.uuid4().hex


def create_task(
    title: str,
    description: str = "",
    due_at: float | None = None,
    priority: Priority = Priority.MEDIUM,
    *,
    now_ts: float | None = None,
) -> Task:
    """
    Build a new, not yet persisted Task.

    Title and description are trimmed; a blank title raises ValidationError.
    due_at defaults to "now", same as created_at.
    """
    clean_title = (title or "").strip()
    if not clean_title:
        raise ValidationError("title is required")

    if now_ts is None:
        now_ts = time.time()

    return Task(
        id=new_task_id(),
        title=clean_title,
        description=(description or "").strip(),
        due_at=float(now_ts if due_at is None else due_at),
        priority=priority,
        is_completed=False,
        created_at=float(now_ts),
    )


def toggle_completion(task: Task) -> Task:
    task.is_completed = not task.is_completed
    return task
