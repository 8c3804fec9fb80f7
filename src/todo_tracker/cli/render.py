# src/todo_tracker/cli/render.py

"""Plain-text rendering of the ordered task list for the console."""

from __future__ import annotations

import textwrap
import time
from collections.abc import Sequence
from datetime import datetime

from ..tasks.task_models import Task

EMPTY_STATE = "No tasks yet.\nUse /add <title> to add your first task."
DESCRIPTION_WIDTH = 60
DESCRIPTION_MAX_LINES = 2


def format_due(ts: float) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M")


def format_task_row(n: int, task: Task, *, now_ts: float | None = None) -> list[str]:
    if now_ts is None:
        now_ts = time.time()

    box = "[x]" if task.is_completed else "[ ]"
    lines = [f"{n:>3}. {box} {task.title}  ({task.priority.label})"]

    indent = " " * 9
    if task.description:
        lines.extend(
            textwrap.wrap(
                task.description,
                width=DESCRIPTION_WIDTH,
                initial_indent=indent,
                subsequent_indent=indent,
                max_lines=DESCRIPTION_MAX_LINES,
                placeholder=" ...",
            )
        )

    due = f"{indent}due {format_due(task.due_at)}"
    if task.is_overdue(now_ts):
        due += "  OVERDUE"
    lines.append(due)
    return lines


def render_task_list(tasks: Sequence[Task], *, now_ts: float | None = None) -> str:
    if not tasks:
        return EMPTY_STATE

    if now_ts is None:
        now_ts = time.time()

    out: list[str] = []
    for n, task in enumerate(tasks, start=1):
        out.extend(format_task_row(n, task, now_ts=now_ts))
    return "\n".join(out)
