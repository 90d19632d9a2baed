# src/simple_todo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the blob store backend,
- hydrates the task list and wires the store to its persistence.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import BlobStore
from ..core.state import AppState
from ..storage.blob_store import FileBlobStore, MemoryBlobStore, SqliteBlobStore
from ..tasks.task_persistence import PersistWriter, TaskPersistence
from ..tasks.task_store import TaskListStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if settings.storage_backend == "sqlite":
        settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    elif settings.storage_backend == "file":
        settings.blob_dir.mkdir(parents=True, exist_ok=True)


def create_blob_store(settings) -> BlobStore:
    backend = str(getattr(settings, "storage_backend", "sqlite")).lower()
    if backend == "memory":
        logger.info("Using in-memory blob store (nothing survives a restart).")
        return MemoryBlobStore()
    if backend == "file":
        return FileBlobStore(settings.blob_dir)
    if backend != "sqlite":
        logger.warning("Unknown storage backend %r; falling back to sqlite.", backend)
    return SqliteBlobStore(settings.db_path)


def create_initial_state(*, settings=None, blob_store: BlobStore | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and the blob store injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if blob_store is None:
        blob_store = create_blob_store(settings)

    writer = PersistWriter(blob_store) if getattr(settings, "persist_async", True) else None
    persistence = TaskPersistence(
        blob_store,
        key=getattr(settings, "storage_key", "tasks"),
        writer=writer,
    )

    store = TaskListStore(
        persistence.hydrate(),
        sink=persistence,
        timestamp_format=getattr(settings, "timestamp_format", "%Y-%m-%d %H:%M:%S"),
    )

    return AppState(settings=settings, store=store, persistence=persistence)


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown: flush pending writes (no exceptions should escape)."""
    if state.persistence is None:
        return
    try:
        state.persistence.close()
    except Exception:
        logger.exception("Failed to flush pending task writes.")
