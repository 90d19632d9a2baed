# src/simple_todo/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_persistence import TaskPersistence
from ..tasks.task_store import TaskListStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    store: TaskListStore
    persistence: TaskPersistence | None = None

    # UI-owned side table: task id -> remaining renders to show it as new.
    # Presentation only; never part of Task or the stored blob.
    highlights: dict[str, int] = field(default_factory=dict)

    def position_of(self, task_id: str) -> int | None:
        """1-based position of a task in the current list."""
        for i, task in enumerate(self.store.tasks, start=1):
            if task.id == task_id:
                return i
        return None

    def id_at(self, position: int) -> str | None:
        tasks = self.store.tasks
        if 1 <= position <= len(tasks):
            return tasks[position - 1].id
        return None
