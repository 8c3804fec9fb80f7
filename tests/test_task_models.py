# tests/test_task_models.py

from __future__ import annotations

import pytest

from todo_tracker.tasks.errors import ValidationError
from todo_tracker.tasks.task_models import Priority, create_task, toggle_completion


def test_priority_ranks_and_labels() -> None:
    assert [p.rank for p in Priority] == [0, 1, 2]
    assert [p.label for p in Priority] == ["Low", "Medium", "High"]
    assert Priority.HIGH.rank > Priority.MEDIUM.rank > Priority.LOW.rank


def test_priority_lookups() -> None:
    assert Priority.from_label("High") is Priority.HIGH
    assert Priority.from_label(" low ") is Priority.LOW
    assert Priority.from_rank(1) is Priority.MEDIUM
    assert Priority.from_rank(2) is Priority.HIGH

    with pytest.raises(ValueError):
        Priority.from_label("urgent")


def test_create_task_defaults() -> None:
    task = create_task("  Buy milk  ", now_ts=1000.0)

    assert task.title == "Buy milk"
    assert task.description == ""
    assert task.priority is Priority.MEDIUM
    assert task.is_completed is False
    assert task.created_at == 1000.0
    assert task.due_at == 1000.0
    assert task.id


def test_create_task_assigns_fresh_ids() -> None:
    a = create_task("a")
    b = create_task("a")
    assert a.id != b.id


def test_create_task_allows_past_due_and_trims_description() -> None:
    task = create_task("x", "  notes \n", due_at=5.0, priority=Priority.HIGH, now_ts=1000.0)
    assert task.due_at == 5.0
    assert task.description == "notes"
    assert task.priority is Priority.HIGH


@pytest.mark.parametrize("title", ["", "   ", "\n\t"])
def test_create_task_rejects_blank_title(title: str) -> None:
    with pytest.raises(ValidationError):
        create_task(title)


def test_toggle_completion_is_an_involution() -> None:
    task = create_task("x", now_ts=1000.0)
    before = (task.title, task.description, task.due_at, task.priority, task.created_at)

    toggle_completion(task)
    assert task.is_completed is True
    toggle_completion(task)
    assert task.is_completed is False

    assert (task.title, task.description, task.due_at, task.priority, task.created_at) == before


def test_is_overdue_only_for_open_tasks() -> None:
    task = create_task("x", due_at=100.0, now_ts=50.0)
    assert not task.is_overdue(now_ts=99.0)
    assert task.is_overdue(now_ts=101.0)

    toggle_completion(task)
    assert not task.is_overdue(now_ts=101.0)
