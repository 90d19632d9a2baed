# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from simple_todo.core.state import AppState
from simple_todo.tasks.task_persistence import TaskPersistence
from simple_todo.tasks.task_store import TaskListStore

from .fakes import FakeClock, RecordingBlobStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="simple-todo-test",
        log_level="DEBUG",
        console_enabled=True,
        highlight_renders=2,
        storage_backend="memory",
        storage_key="tasks",
        persist_async=False,
        timestamp_format="%Y-%m-%d %H:%M:%S",
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "tasks.sqlite3",
        blob_dir=tmp_path / "data" / "blobs",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def blob_store() -> RecordingBlobStore:
    return RecordingBlobStore()


@pytest.fixture()
def state(settings: SimpleNamespace, blob_store: RecordingBlobStore, clock: FakeClock) -> AppState:
    """
    AppState wired with a recording blob store and inline (synchronous) writes,
    so every store change is visible in blob_store right away.
    """
    persistence = TaskPersistence(blob_store, key=settings.storage_key)
    store = TaskListStore(
        persistence.hydrate(),
        sink=persistence,
        clock=clock,
        timestamp_format=settings.timestamp_format,
    )
    return AppState(settings=settings, store=store, persistence=persistence)
