# src/todo_tracker/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from .ports import TaskRepo


@dataclass
class AppState:
    # Settings-like object (config.Settings in the app, SimpleNamespace in tests).
    settings: Any

    task_store: TaskRepo

    # Single-writer boundary around store mutations.
    lock: threading.RLock = field(default_factory=threading.RLock)

    # Task ids in the order of the last rendered list (row n -> visible_ids[n-1]).
    visible_ids: list[str] = field(default_factory=list)

    # Task staged for deletion, waiting for /confirm or /cancel.
    pending_delete_id: str | None = None
