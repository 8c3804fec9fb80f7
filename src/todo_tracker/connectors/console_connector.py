# src/todo_tracker/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import refresh_visible
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def run_console_loop(
    state: AppState,
    *,
    read: InputFn = input,
    write: OutputFn = print,
) -> None:
    """
    Interactive task list.

    The store notifies on every committed mutation; the loop only marks the
    view dirty and re-reads the ordered list once the command has finished.
    """
    logger.info("Console connector started db=%s", getattr(state.task_store, "db_path", "?"))
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "todo"))

    dirty = False

    def on_change(_change) -> None:
        nonlocal dirty
        dirty = True

    unsubscribe = state.task_store.subscribe(on_change)

    write(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")
    with state.lock:
        write(refresh_visible(state))

    try:
        while True:
            try:
                user_input = read("\n> ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                write("")
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not user_input.startswith("/"):
                # Bare text is a shortcut for /add.
                user_input = "/add " + user_input

            try:
                with state.lock:
                    cmd_response = command_registry.handle(state, user_input)
                    refresh = dirty
                    dirty = False
                    listing = refresh_visible(state) if refresh else None
            except Exception:
                logger.exception("Command handler crashed.")
                write("Internal error while handling a command.")
                continue

            if cmd_response is not None:
                write(cmd_response)
            if listing is not None:
                write("")
                write(listing)
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
