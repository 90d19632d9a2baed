# tests/fakes.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta


class FakeClock:
    """Deterministic clock: every call returns the next minute."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 9, 30, 0)
        self.calls = 0

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        self.calls += 1
        return current


@dataclass(slots=True)
class RecordingBlobStore:
    """
    In-memory BlobStore that records writes and can be told to fail.
    """

    data: dict[str, str] = field(default_factory=dict)
    writes: list[tuple[str, str]] = field(default_factory=list)
    fail_get: bool = False
    fail_set: bool = False
    set_gate: threading.Event | None = None

    def get(self, key: str) -> str | None:
        if self.fail_get:
            raise OSError("blob store unavailable")
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.set_gate is not None:
            self.set_gate.wait(timeout=5.0)
        if self.fail_set:
            raise OSError("disk full")
        self.data[key] = value
        self.writes.append((key, value))


class RecordingSink:
    """TaskSink that keeps a snapshot of every list it receives."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[int, list[tuple[str, str, bool, str | None]]]] = []

    def persist(self, tasks, *, version: int = 0) -> None:
        self.calls.append((version, [(t.id, t.text, t.completed, t.completed_at) for t in tasks]))
        if self.fail:
            raise RuntimeError("sink exploded")
