# src/simple_todo/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from .console_view import mark_new, prompt_for, render_task_list

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit", "/q")


def handle_line(state: AppState, line: str, emit: Callable[[str], None] = print) -> bool:
    """
    Process one input line. Returns False when the user asked to quit.

    Slash commands go to the registry; any other text is the "commit" action:
    saved into the task being edited, or added as a new task.
    """
    text = line.strip()

    if text.lower() in EXIT_COMMANDS:
        logger.info("Console exit command received.")
        return False

    if text.startswith("/"):
        try:
            reply = command_registry.handle(state, text, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."
        if reply:
            emit(reply)
        return True

    if not text:
        return True

    store = state.store
    was_editing = store.editing_id is not None
    before = {t.id for t in store.tasks}

    store.submit(line)

    if not was_editing:
        for task in store.tasks:
            if task.id not in before:
                mark_new(state, task.id)
    return True


def run_console_loop(state: AppState, *, read: Callable[[str], str] = input, emit: Callable[[str], None] = print) -> None:
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "simple-todo"))
    logger.info("Console connector started (tasks=%d).", len(state.store))
    emit(f"{app_name}: type a task to add it. Use /help for commands, /exit to quit.\n")

    while True:
        emit(render_task_list(state))
        try:
            line = read(prompt_for(state))
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            emit("")
            break

        if not handle_line(state, line, emit):
            break

    logger.info("Console connector finished.")
