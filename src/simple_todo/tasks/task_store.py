# src/simple_todo/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from datetime import datetime

from ..core.ports import Clock, TaskSink
from .task_models import COMPOSING, Editing, InputMode, Task, new_task_id, numeric_id

logger = logging.getLogger(__name__)

DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _local_now() -> datetime:
    return datetime.now().astimezone()


class TaskListStore:
    """
    In-memory ordered task list plus the shared input buffer.

    The buffer is used both for composing a new task and for editing an
    existing one; which of the two it feeds is given by `mode`:
    - Composing       -> submit() goes to add()
    - Editing(id)     -> submit() goes to commit_edit()

    Every operation is synchronous and silently ignores bad input (blank text,
    unknown ids). After each change the full list is handed to the sink; sink
    failures are logged and never reach the caller.
    """

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        *,
        sink: TaskSink | None = None,
        clock: Clock | None = None,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
    ) -> None:
        self._tasks: list[Task] = []
        seen: set[str] = set()
        for task in tasks:
            if task.id in seen:
                logger.warning("Dropping duplicate task id=%s", task.id)
                continue
            seen.add(task.id)
            self._tasks.append(task)

        self._sink = sink
        self._clock: Clock = clock or _local_now
        self._timestamp_format = timestamp_format

        self._mode: InputMode = COMPOSING
        self._buffer = ""
        self._version = 0
        self._last_issued_id = max(
            (n for n in (numeric_id(t.id) for t in self._tasks) if n is not None),
            default=0,
        )

        logger.debug("TaskListStore ready total=%d", len(self._tasks))

    # ---- read side ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def mode(self) -> InputMode:
        return self._mode

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def version(self) -> int:
        return self._version

    @property
    def editing_id(self) -> str | None:
        return self._mode.task_id if isinstance(self._mode, Editing) else None

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._tasks))

    def get(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def set_buffer(self, text: str) -> None:
        """Presentation-side typing into the shared input field."""
        self._buffer = text

    # ---- mutations ----

    def add(self, text: str) -> tuple[Task, ...]:
        if isinstance(self._mode, Editing):
            logger.warning(
                "add() refused while editing task id=%s; commit or cancel the edit first",
                self._mode.task_id,
            )
            return self.tasks

        clean = (text or "").strip()
        if not clean:
            logger.debug("add() ignored: empty text")
            return self.tasks

        task_id = new_task_id((t.id for t in self._tasks), self._last_issued_id)
        self._last_issued_id = int(task_id)

        task = Task(id=task_id, text=clean)
        self._tasks.append(task)
        self._buffer = ""
        logger.debug("Task added id=%s", task_id)

        self._changed()
        return self.tasks

    def toggle_complete(self, task_id: str) -> tuple[Task, ...]:
        task = self.get(task_id)
        if task is None:
            logger.debug("toggle_complete() ignored: unknown id=%s", task_id)
            return self.tasks

        if task.completed:
            task.completed = False
            task.completed_at = None
        else:
            task.completed = True
            task.completed_at = self._clock().strftime(self._timestamp_format)

        logger.debug("Task toggled id=%s completed=%s", task_id, task.completed)
        self._changed()
        return self.tasks

    def delete(self, task_id: str) -> tuple[Task, ...]:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        if len(self._tasks) == before:
            logger.debug("delete() ignored: unknown id=%s", task_id)
            return self.tasks

        if self.editing_id == task_id:
            # The cursor must never point at a task that is gone.
            self._mode = COMPOSING
            self._buffer = ""

        logger.debug("Task deleted id=%s", task_id)
        self._changed()
        return self.tasks

    def start_edit(self, task_id: str) -> InputMode:
        task = self.get(task_id)
        if task is None:
            logger.debug("start_edit() ignored: unknown id=%s", task_id)
            return self._mode

        self._mode = Editing(task_id)
        self._buffer = task.text
        return self._mode

    def commit_edit(self) -> tuple[Task, ...]:
        task_id = self.editing_id
        if task_id is None:
            logger.debug("commit_edit() ignored: not editing")
            return self.tasks

        clean = self._buffer.strip()
        if not clean:
            logger.debug("commit_edit() ignored: empty text")
            return self.tasks

        task = self.get(task_id)
        if task is None:
            # Unreachable while delete() keeps the cursor valid.
            self._mode = COMPOSING
            self._buffer = ""
            return self.tasks

        task.text = clean
        self._buffer = ""
        self._mode = COMPOSING

        logger.debug("Task edited id=%s", task_id)
        self._changed()
        return self.tasks

    def cancel_edit(self) -> InputMode:
        if isinstance(self._mode, Editing):
            self._mode = COMPOSING
            self._buffer = ""
        return self._mode

    def submit(self, text: str | None = None) -> tuple[Task, ...]:
        """Single "commit" user action: edit when editing, otherwise add."""
        if text is not None:
            self._buffer = text
        if isinstance(self._mode, Editing):
            return self.commit_edit()
        return self.add(self._buffer)

    # ---- persistence hook ----

    def _changed(self) -> None:
        self._version += 1
        if self._sink is None:
            return
        try:
            self._sink.persist(self.tasks, version=self._version)
        except Exception:
            logger.exception("Persisting tasks failed (version=%s); keeping in-memory state.", self._version)
