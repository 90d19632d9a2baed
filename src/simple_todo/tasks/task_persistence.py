# src/simple_todo/tasks/task_persistence.py

from __future__ import annotations

"""
Task list persistence over an opaque blob store.

- hydrate(): read the "tasks" blob at startup; anything unreadable means "empty list".
- persist(): serialize the full list and overwrite the blob on every change.

Writes may go through a PersistWriter (background thread) so the caller never
waits on storage. Failures are logged and discarded in both directions.
"""

import json
import logging
import queue
import threading
from collections.abc import Sequence
from typing import Any

from ..core.ports import BlobStore
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_KEY = "tasks"


def encode_tasks(tasks: Sequence[Task]) -> str:
    return json.dumps([t.to_record() for t in tasks], ensure_ascii=False)


def decode_tasks(raw: str) -> list[Task]:
    """
    Decode a stored payload. Raises ValueError if it is not a JSON array.

    Entries that are not valid tasks are skipped; duplicate ids keep the first one.
    """
    data: Any = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")

    out: list[Task] = []
    seen: set[str] = set()
    for item in data:
        task = Task.from_record(item)
        if task is None:
            logger.debug("Skipping invalid stored task entry: %r", item)
            continue
        if task.id in seen:
            logger.debug("Skipping duplicate stored task id=%s", task.id)
            continue
        seen.add(task.id)
        out.append(task)
    return out


class PersistWriter:
    """
    Fire-and-forget blob writer.

    Design goals:
    - Does not block the caller: writes happen in a worker thread.
    - Last write wins: every payload carries a version; stale versions are skipped.
    - Never raises into the caller; failures are logged and the worker keeps going.
    """

    def __init__(self, blob_store: BlobStore, *, name: str = "persist-writer") -> None:
        self._blob_store = blob_store
        self._queue: "queue.Queue[tuple[int, str, str] | None]" = queue.Queue()
        self._written_version = -1
        self._stop_requested = False

        self._worker = threading.Thread(target=self._run, name=name, daemon=True)
        self._worker.start()
        logger.debug("PersistWriter started.")

    @property
    def written_version(self) -> int:
        return self._written_version

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is None:
                    logger.debug("PersistWriter received stop signal.")
                    return

                version, key, payload = item
                if version <= self._written_version:
                    logger.debug("Skipping stale write version=%s (written=%s)", version, self._written_version)
                    continue

                try:
                    self._blob_store.set(key, payload)
                    self._written_version = version
                except Exception:
                    logger.exception("Background write failed key=%s version=%s", key, version)
            finally:
                self._queue.task_done()

    def submit(self, version: int, key: str, payload: str) -> None:
        """Queue a write (no-op after shutdown)."""
        if self._stop_requested:
            logger.warning("PersistWriter is stopped; dropping write version=%s", version)
            return
        self._queue.put((version, key, payload))

    def wait_all(self) -> None:
        """Block until all queued writes are processed."""
        self._queue.join()

    def shutdown(self, timeout: float = 5.0) -> None:
        """Drain pending writes, then stop the worker."""
        if self._stop_requested:
            return
        self._stop_requested = True

        logger.debug("Stopping PersistWriter...")
        self._queue.put(None)
        self._queue.join()
        self._worker.join(timeout=timeout)
        logger.debug("PersistWriter stopped.")


class TaskPersistence:
    """TaskSink implementation bound to one blob key."""

    def __init__(
        self,
        blob_store: BlobStore,
        *,
        key: str = DEFAULT_KEY,
        writer: PersistWriter | None = None,
    ) -> None:
        self._blob_store = blob_store
        self._key = key
        self._writer = writer
        self._last_version = 0

    @property
    def key(self) -> str:
        return self._key

    def hydrate(self) -> list[Task]:
        try:
            raw = self._blob_store.get(self._key)
        except Exception:
            logger.exception("Failed to read stored tasks key=%s; starting empty.", self._key)
            return []

        if raw is None:
            logger.info("No stored tasks under key=%s; starting empty.", self._key)
            return []

        try:
            tasks = decode_tasks(raw)
        except Exception as e:
            logger.warning("Stored tasks under key=%s are unreadable (%s); starting empty.", self._key, e)
            return []

        logger.info("Loaded %d tasks from key=%s", len(tasks), self._key)
        return tasks

    def persist(self, tasks: Sequence[Task], *, version: int = 0) -> None:
        try:
            payload = encode_tasks(tasks)
        except Exception:
            logger.exception("Failed to encode %d tasks; write discarded.", len(tasks))
            return

        # Versions only move forward, also for callers that do not pass one.
        version = max(int(version), self._last_version + 1)
        self._last_version = version

        if self._writer is not None:
            self._writer.submit(version, self._key, payload)
            return

        try:
            self._blob_store.set(self._key, payload)
        except Exception:
            logger.exception("Failed to write tasks key=%s version=%s; write discarded.", self._key, version)

    def close(self) -> None:
        if self._writer is not None:
            self._writer.shutdown()
