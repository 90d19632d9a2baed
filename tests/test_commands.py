# tests/test_commands.py

from __future__ import annotations

import json

from simple_todo.cli.commands import CommandRegistry, registry
from simple_todo.tasks.task_models import Editing


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    notes: list[str] = []
    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_help_lists_commands_and_aliases_work(state) -> None:
    text = registry.handle(state, "/help") or ""
    for name in ("/done", "/del", "/edit", "/cancel", "/list", "/status"):
        assert name in text
    assert registry.handle(state, "/?") == text


def test_done_toggles_by_position(state, blob_store) -> None:
    state.store.add("a")
    state.store.add("b")

    reply = registry.handle(state, "/done 2") or ""
    assert reply.startswith('Completed "b" at 2024-05-01 09:30:00')
    assert [t.completed for t in state.store.tasks] == [False, True]

    reply = registry.handle(state, "/done #2") or ""
    assert reply == 'Reopened "b".'
    assert json.loads(blob_store.data["tasks"])[1]["completedAt"] is None


def test_position_errors(state) -> None:
    state.store.add("a")
    assert registry.handle(state, "/done") == "Usage: /done N"
    assert registry.handle(state, "/del two") == "Usage: /del N"
    assert registry.handle(state, "/edit 5") == "No task #5."
    assert len(state.store) == 1


def test_delete_by_position(state) -> None:
    for text in ("a", "b", "c"):
        state.store.add(text)
    assert registry.handle(state, "/rm 2") == 'Deleted "b".'
    assert [t.text for t in state.store.tasks] == ["a", "c"]


def test_edit_and_cancel(state) -> None:
    state.store.add("Buy milk")
    tid = state.store.tasks[0].id

    reply = registry.handle(state, "/edit 1") or ""
    assert 'Editing #1: "Buy milk"' in reply
    assert state.store.mode == Editing(tid)

    assert registry.handle(state, "/cancel") == "Edit cancelled."
    assert state.store.editing_id is None
    assert registry.handle(state, "/cancel") == "Nothing to cancel."


def test_switching_edit_target_is_reported(state) -> None:
    state.store.add("a")
    state.store.add("b")
    notes: list[str] = []

    registry.handle(state, "/edit 1", emit=notes.append)
    registry.handle(state, "/edit 2", emit=notes.append)

    assert notes == ["Dropped unsaved edit of #1."]
    assert state.store.buffer == "b"


def test_status(state) -> None:
    state.store.add("a")
    state.store.toggle_complete(state.store.tasks[0].id)
    text = registry.handle(state, "/status") or ""
    assert "Tasks: 1 (1 done)" in text
    assert "Mode: composing" in text
    assert "Storage: memory" in text
