# src/todo_tracker/cli/commands.py

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import datetime

from ..core.state import AppState
from ..tasks.errors import NotFoundError, TaskError
from ..tasks.task_models import Priority, create_task
from .render import render_task_list

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

FIELD_SEP = re.compile(r"(?<!\\)\|")

DUE_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M", "%Y-%m-%d")


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._raw: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        *,
        raw: bool = False,
    ) -> None:
        """
        raw=True handlers get the untouched text after the command name as a
        single argument (empty list when there is none) instead of split words.
        """
        aliases = aliases or []
        names = [name.lower()] + [a.lower() for a in aliases]
        self._help[names[0]] = help_text
        for key in names:
            self._handlers[key] = handler
            if raw:
                self._raw.add(key)

    def handle(
        self,
        state: AppState,
        line: str,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        TaskError / ValueError raised by a handler are user-facing rejections
        and come back as the reply text; anything else propagates.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""
        if name in self._raw:
            args = [rest] if rest.strip() else []
        else:
            args = rest.split()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except (TaskError, ValueError) as e:
            logger.info("Command /%s rejected: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def parse_due(raw: str) -> float:
    """
    Parse a local due date.

    "YYYY-MM-DD" alone means the end of that day (23:59), so a task due today
    is not shown as overdue straight away.
    """
    text = raw.strip()
    for fmt in DUE_FORMATS:
        try:
            dt = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if fmt == "%Y-%m-%d":
            dt = dt.replace(hour=23, minute=59)
        return dt.timestamp()
    raise ValueError(f"bad due date: {raw!r} (use YYYY-MM-DD or YYYY-MM-DD HH:MM)")


def refresh_visible(state: AppState) -> str:
    """Pull the ordered list, remember its row -> id mapping and render it."""
    tasks = state.task_store.query_all_ordered()
    state.visible_ids = [t.id for t in tasks]
    return render_task_list(tasks)


def _resolve_row(state: AppState, args: list[str]) -> str:
    if not args:
        raise ValueError("row number is required (see /list)")
    try:
        n = int(args[0])
    except ValueError:
        raise ValueError(f"not a row number: {args[0]!r}") from None

    if not state.visible_ids:
        refresh_visible(state)

    if n < 1 or n > len(state.visible_ids):
        raise ValueError(f"no task #{n} in the list")
    return state.visible_ids[n - 1]


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return refresh_visible(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> [| description [| due [| priority]]]

    Inner whitespace is kept as typed; use \\| for a literal pipe.
    """
    text = args[0] if args else ""
    fields = [f.strip().replace("\\|", "|") for f in FIELD_SEP.split(text)]
    if len(fields) > 4:
        raise ValueError("too many fields (title | description | due | priority)")
    fields += [""] * (4 - len(fields))
    title, description, due_raw, priority_raw = fields

    due_at = parse_due(due_raw) if due_raw else None
    priority = Priority.from_label(priority_raw) if priority_raw else Priority.MEDIUM

    task = create_task(title, description, due_at, priority)
    state.task_store.add(task)
    return f'Added "{task.title}" ({task.priority.label}).'


def cmd_toggle(state: AppState, args: list[str]) -> str:
    task_id = _resolve_row(state, args)
    task = state.task_store.toggle_completion(task_id)
    mark = "completed" if task.is_completed else "reopened"
    return f'Task "{task.title}" {mark}.'


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = _resolve_row(state, args)
    task = state.task_store.get_task(task_id)
    if task is None:
        raise NotFoundError(task_id)

    if not getattr(state.settings, "confirm_delete", True):
        state.task_store.remove(task_id)
        return f'Task "{task.title}" deleted.'

    state.pending_delete_id = task_id
    return (
        f'Delete "{task.title}"? This action cannot be undone.\n'
        "Type /confirm to delete or /cancel to keep it."
    )


def cmd_confirm(state: AppState, args: list[str]) -> str:
    task_id = state.pending_delete_id
    if task_id is None:
        return "Nothing to confirm."

    state.pending_delete_id = None
    task = state.task_store.get_task(task_id)
    state.task_store.remove(task_id)
    title = task.title if task is not None else task_id
    return f'Task "{title}" deleted.'


def cmd_cancel(state: AppState, args: list[str]) -> str:
    if state.pending_delete_id is None:
        return "Nothing to cancel."
    state.pending_delete_id = None
    return "Delete cancelled."


def cmd_status(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.query_all_ordered()
    done = sum(1 for t in tasks if t.is_completed)
    db_path = getattr(state.settings, "tasks_db_path", "?")
    return (
        "Status:\n"
        f"  Open: {len(tasks) - done}\n"
        f"  Completed: {done}\n"
        f"  Database: {db_path}"
    )


registry.register("help", cmd_help, "show this help")
registry.register("list", cmd_list, "show all tasks (open first)", aliases=["ls"])
registry.register(
    "add",
    cmd_add,
    "add a task: /add title | description | YYYY-MM-DD [HH:MM] | low/medium/high",
    raw=True,
)
registry.register("done", cmd_toggle, "toggle completion of task #n", aliases=["toggle"])
registry.register("delete", cmd_delete, "delete task #n (asks for confirmation)", aliases=["rm"])
registry.register("confirm", cmd_confirm, "confirm the pending delete")
registry.register("cancel", cmd_cancel, "cancel the pending delete")
registry.register("status", cmd_status, "show task counts and database path")
