# src/simple_todo/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..connectors.console_view import render_task_list
from ..core.state import AppState

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /done, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("Anything else you type is added as a task (or saved, while editing).")
        return "\n".join(lines)


registry = CommandRegistry()


def _resolve(state: AppState, args: list[str], usage: str) -> tuple[str | None, str]:
    """Turn "/cmd N" into a task id. Returns (task_id, error_message)."""
    if len(args) != 1:
        return None, usage
    try:
        pos = int(args[0].lstrip("#"))
    except ValueError:
        return None, usage
    task_id = state.id_at(pos)
    if task_id is None:
        return None, f"No task #{pos}."
    return task_id, ""


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_task_list(state, consume=False)


def cmd_done(state: AppState, args: list[str]) -> str:
    task_id, err = _resolve(state, args, "Usage: /done N")
    if task_id is None:
        return err
    state.store.toggle_complete(task_id)
    task = state.store.get(task_id)
    if task is not None and task.completed:
        return f'Completed "{task.text}" at {task.completed_at}.'
    return f'Reopened "{task.text if task else task_id}".'


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id, err = _resolve(state, args, "Usage: /del N")
    if task_id is None:
        return err
    task = state.store.get(task_id)
    state.store.delete(task_id)
    return f'Deleted "{task.text if task else task_id}".'


def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /edit N   -> load task N into the input buffer
    next plain line replaces its text; /cancel leaves it unchanged
    """
    task_id, err = _resolve(state, args, "Usage: /edit N")
    if task_id is None:
        return err

    previous = state.store.editing_id
    if previous is not None and previous != task_id and emit is not None:
        emit(f"Dropped unsaved edit of #{state.position_of(previous)}.")

    state.store.start_edit(task_id)
    return f'Editing #{args[0].lstrip("#")}: "{state.store.buffer}". Type the new text, or /cancel.'


def cmd_cancel(state: AppState, args: list[str]) -> str:
    if state.store.editing_id is None:
        return "Nothing to cancel."
    state.store.cancel_edit()
    return "Edit cancelled."


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    tasks = state.store.tasks
    done = sum(1 for t in tasks if t.completed)
    mode = "editing" if state.store.editing_id else "composing"
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({done} done)\n"
        f"  Mode: {mode}\n"
        f"  Storage: {getattr(settings, 'storage_backend', '?')} "
        f"(key={getattr(settings, 'storage_key', 'tasks')}, "
        f"async={'ON' if getattr(settings, 'persist_async', False) else 'OFF'})"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("done", cmd_done, help_text="Toggle completion: /done N.", aliases=["toggle", "x"])
registry.register("del", cmd_delete, help_text="Delete a task: /del N.", aliases=["delete", "rm"])
registry.register("edit", cmd_edit, help_text="Edit a task in place: /edit N.", aliases=["e"])
registry.register("cancel", cmd_cancel, help_text="Leave edit mode without saving.")
registry.register("status", cmd_status, help_text="Show counts, mode and storage settings.")
