# tests/test_blob_store.py

from __future__ import annotations

import os
import stat
import sys
from pathlib import Path

import pytest

from simple_todo.storage.blob_store import FileBlobStore, MemoryBlobStore, SqliteBlobStore


@pytest.fixture(params=["memory", "file", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path):
    if request.param == "memory":
        return MemoryBlobStore()
    if request.param == "file":
        return FileBlobStore(tmp_path / "blobs")
    return SqliteBlobStore(tmp_path / "db" / "tasks.sqlite3")


def test_missing_key_is_none(store) -> None:
    assert store.get("tasks") is None


def test_set_overwrites(store) -> None:
    store.set("tasks", "[]")
    store.set("tasks", '[{"id": "1"}]')
    assert store.get("tasks") == '[{"id": "1"}]'


def test_keys_are_independent(store) -> None:
    store.set("a", "1")
    store.set("b", "2")
    assert (store.get("a"), store.get("b")) == ("1", "2")


@pytest.mark.parametrize("bad", ["", "   "])
def test_blank_key_is_rejected(store, bad: str) -> None:
    with pytest.raises(ValueError):
        store.set(bad, "x")
    with pytest.raises(ValueError):
        store.get(bad)


def test_sqlite_survives_reopen(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    SqliteBlobStore(db).set("tasks", "payload")

    reopened = SqliteBlobStore(db)
    assert reopened.get("tasks") == "payload"
    assert reopened.count_keys() == 1


def test_file_store_writes_atomically(tmp_path: Path) -> None:
    store = FileBlobStore(tmp_path)
    store.set("tasks", "[]")

    assert (tmp_path / "tasks.json").read_text("utf-8") == "[]"
    assert not (tmp_path / "tasks.tmp").exists()
    assert FileBlobStore(tmp_path).get("tasks") == "[]"


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permissions only")
def test_file_store_keeps_file_private(tmp_path: Path) -> None:
    FileBlobStore(tmp_path).set("tasks", "[]")
    mode = stat.S_IMODE(os.stat(tmp_path / "tasks.json").st_mode)
    assert mode == 0o600


def test_memory_store_initial_data() -> None:
    assert MemoryBlobStore({"tasks": "[]"}).get("tasks") == "[]"
