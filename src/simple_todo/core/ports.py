# src/simple_todo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps storage backends swappable and makes testing easier.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from ..tasks.task_models import Task


class BlobStore(Protocol):
    """Opaque string key-value store. get() returns None for a missing key."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...


class TaskSink(Protocol):
    """Receives the full task list after every change (fire-and-forget)."""

    def persist(self, tasks: Sequence[Task], *, version: int = 0) -> None: ...


class Clock(Protocol):
    def __call__(self) -> datetime: ...
