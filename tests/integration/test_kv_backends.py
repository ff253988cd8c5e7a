"""
Integration tests for the on-disk key-value backends.

These run against real files under pytest's tmp_path and verify that:
1. Slots survive a fresh backend / store instance (durability)
2. Writes replace the slot atomically and leave no temp files behind
3. Backend faults surface as StorageError and degrade reads to empty
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

import pytest

from croptracker.config import Settings
from croptracker.exceptions import StorageError, StorageWriteError
from croptracker.infrastructure.kv_store import (
    FileKeyValueStore,
    MemoryKeyValueStore,
    SqliteKeyValueStore,
    build_kv_store,
)
from croptracker.store import RecordStore
from tests.factories import MAIZE, RICE, FakeClock

SLOT = "crop_tracker_data"


@pytest.fixture(params=["file", "sqlite"])
def durable_backend(request, tmp_path: Path):
    if request.param == "file":
        return FileKeyValueStore(tmp_path / "slots")
    return SqliteKeyValueStore(tmp_path / "db" / "crops.sqlite3")


class TestDurableBackends:
    """Behaviour shared by the file and SQLite backends."""

    def test_absent_slot_is_none(self, durable_backend):
        assert durable_backend.get(SLOT) is None

    def test_set_get_delete(self, durable_backend):
        durable_backend.set(SLOT, "[1, 2]")
        durable_backend.set(SLOT, "[3]")
        assert durable_backend.get(SLOT) == "[3]"
        durable_backend.delete(SLOT)
        assert durable_backend.get(SLOT) is None
        durable_backend.delete(SLOT)

    def test_unicode_round_trip(self, durable_backend):
        durable_backend.set(SLOT, json.dumps({"symbol": "₦"}, ensure_ascii=False))
        assert "₦" in durable_backend.get(SLOT)

    def test_records_survive_new_store_instance(self, durable_backend):
        clock = FakeClock()
        first = RecordStore(durable_backend, key=SLOT, clock=clock)
        maize = first.add(MAIZE)
        rice = first.add(RICE)

        reopened = RecordStore(durable_backend, key=SLOT)
        assert reopened.list() == [maize, rice]


class TestFileKeyValueStore:
    def test_writes_leave_no_temp_files(self, tmp_path: Path):
        store = FileKeyValueStore(tmp_path)
        store.set(SLOT, "[]")
        store.set(SLOT, "[1]")
        assert sorted(p.name for p in tmp_path.iterdir()) == [f"{SLOT}.json"]

    def test_rejects_path_like_keys(self, tmp_path: Path):
        with pytest.raises(StorageError):
            FileKeyValueStore(tmp_path).get("../outside")

    def test_corrupt_file_reads_as_empty_collection(self, tmp_path: Path):
        (tmp_path / f"{SLOT}.json").write_text("[{\"id\": ", encoding="utf-8")
        store = RecordStore(FileKeyValueStore(tmp_path), key=SLOT)
        assert store.list() == []

    def test_unwritable_location_reports_write_failure(self, tmp_path: Path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        store = RecordStore(FileKeyValueStore(blocker / "slots"), key=SLOT)

        assert store.list() == []
        with pytest.raises(StorageWriteError):
            store.add(MAIZE)


class TestSqliteKeyValueStore:
    def test_uses_single_kv_table(self, tmp_path: Path):
        path = tmp_path / "crops.sqlite3"
        SqliteKeyValueStore(path).set(SLOT, "[]")
        conn = sqlite3.connect(path)
        try:
            rows = conn.execute("SELECT key, value FROM kv").fetchall()
        finally:
            conn.close()
        assert rows == [(SLOT, "[]")]

    def test_unopenable_database_is_a_storage_error(self, tmp_path: Path):
        directory = tmp_path / "is-a-directory"
        directory.mkdir()
        with pytest.raises(StorageError):
            SqliteKeyValueStore(directory).get(SLOT)


@pytest.mark.parametrize(
    "backend_name, expected_type",
    [("file", FileKeyValueStore), ("sqlite", SqliteKeyValueStore), ("memory", MemoryKeyValueStore)],
)
def test_build_kv_store_selects_backend(tmp_path: Path, backend_name, expected_type):
    settings = Settings(storage_backend=backend_name, data_dir=tmp_path)
    assert isinstance(build_kv_store(settings), expected_type)
