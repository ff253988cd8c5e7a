"""
Pytest configuration for Crop Tracker.

Provides fixtures for:
- A controllable clock so timestamp ordering is deterministic
- Memory-backed record stores, empty and seeded with the Maize/Rice pair
- Environment pointing at a temporary data directory
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from croptracker.config import get_settings
from croptracker.domain.models import CropRecord
from croptracker.infrastructure.kv_store import MemoryKeyValueStore
from croptracker.store import RecordStore
from tests.factories import MAIZE, RICE, FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def store(backend: MemoryKeyValueStore, clock: FakeClock) -> RecordStore:
    return RecordStore(backend, clock=clock)


@pytest.fixture
def seeded_store(store: RecordStore, clock: FakeClock) -> RecordStore:
    """
    Store holding Maize then Rice, added one second apart.
    """
    store.add(MAIZE)
    clock.advance()
    store.add(RICE)
    clock.advance()
    return store


@pytest.fixture
def sample_records(seeded_store: RecordStore) -> list[CropRecord]:
    return seeded_store.list()


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """
    Point the CLI at a fresh file-backed data directory.
    """
    data_dir = tmp_path / "cli-data"
    monkeypatch.setenv("CROP_STORAGE_BACKEND", "file")
    monkeypatch.setenv("CROP_DATA_DIR", str(data_dir))
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield data_dir
    get_settings.cache_clear()
