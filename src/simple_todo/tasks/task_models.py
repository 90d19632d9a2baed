# src/simple_todo/tasks/task_models.py

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeAlias


@dataclass(slots=True)
class Task:
    id: str
    text: str
    completed: bool = False
    completed_at: str | None = None

    def to_record(self) -> dict[str, Any]:
        """Persisted shape: exactly id/text/completed/completedAt."""
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "completedAt": self.completed_at,
        }

    @classmethod
    def from_record(cls, raw: Any) -> Task | None:
        """
        Build a Task from a decoded JSON object.

        Returns None for entries that cannot be a task (not a dict, missing id
        or blank text). Any other keys are ignored.
        """
        if not isinstance(raw, dict):
            return None

        tid = raw.get("id")
        if isinstance(tid, bool) or not isinstance(tid, (str, int)):
            return None
        tid = str(tid).strip()
        if not tid:
            return None

        text = raw.get("text")
        if not isinstance(text, str) or not text.strip():
            return None

        # Only a real JSON true counts; "false", 1, "yes" and friends do not.
        completed = raw.get("completed") is True
        completed_at = raw.get("completedAt")
        if not completed or not isinstance(completed_at, str) or not completed_at:
            completed_at = None

        return cls(id=tid, text=text.strip(), completed=completed, completed_at=completed_at)


@dataclass(frozen=True, slots=True)
class Composing:
    """The input buffer feeds add()."""


@dataclass(frozen=True, slots=True)
class Editing:
    """The input buffer feeds commit_edit() for task_id."""

    task_id: str


InputMode: TypeAlias = Composing | Editing

COMPOSING = Composing()


MAX_NUMERIC_ID_DIGITS = 18


def numeric_id(task_id: str) -> int | None:
    """
    Integer value of a plain ASCII-digit id, or None.

    Ids such as "²" or very long digit strings are valid task ids but are not
    used for id bumping.
    """
    if not (task_id.isascii() and task_id.isdigit()) or len(task_id) > MAX_NUMERIC_ID_DIGITS:
        return None
    return int(task_id)


def new_task_id(existing: Iterable[str], last_issued: int = 0, *, now_ms: int | None = None) -> str:
    """
    Creation-time id (epoch milliseconds as a string).

    Bumped past `last_issued` and past any existing numeric id so ids stay unique
    when several tasks are created within the same millisecond.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000

    taken = set(existing)
    candidate = max(int(now_ms), int(last_issued) + 1)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)
