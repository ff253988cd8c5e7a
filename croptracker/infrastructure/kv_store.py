"""
Key-value slot backends for Crop Tracker.

The record store persists its whole collection in a single named slot of a
durable string store. Three interchangeable backends are provided:

- FileKeyValueStore: one UTF-8 file per key, replaced atomically on write.
- SqliteKeyValueStore: a single ``kv`` table in an on-device SQLite file.
- MemoryKeyValueStore: dict-backed, for tests and throwaway sessions.

Backend faults surface as ``StorageError``. Writes to the durable backends
are retried with tenacity for transient OS/SQLite errors.
"""

from __future__ import annotations

import os
import re
import sqlite3
import tempfile
from contextlib import closing
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from croptracker.config import Settings, get_settings
from croptracker.exceptions import StorageError
from croptracker.utils.logging import get_logger

log = get_logger(__name__)

SQLITE_FILENAME = "croptracker.sqlite3"

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")

_write_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
    retry=retry_if_exception_type((OSError, sqlite3.OperationalError)),
    reraise=True,
)


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Durable string store addressed by key.

    ``set`` replaces the slot's entire contents in one step from the caller's
    perspective; ``get`` returns None for an absent slot.
    """

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryKeyValueStore:
    """In-process dict-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileKeyValueStore:
    """
    Stores each key as ``<directory>/<key>.json``.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace``, so readers never observe a half-written slot.
    """

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key '{key}'", details={"key": key})
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Cannot read slot '{key}'", details={"path": str(path)}) from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self._atomic_write(path, value)
        except OSError as exc:
            raise StorageError(f"Cannot write slot '{key}'", details={"path": str(path)}) from exc

    @_write_retry
    def _atomic_write(self, path: Path, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{path.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot delete slot '{key}'", details={"path": str(path)}) from exc


class SqliteKeyValueStore:
    """
    Stores slots as rows of a ``kv(key, value)`` table in a SQLite file.

    A connection is opened per call; each write commits in its own
    transaction.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()
        self._schema_ready = False

    def _connect(self) -> sqlite3.Connection:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.path)
        if not self._schema_ready:
            with conn:
                conn.execute("CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)")
            self._schema_ready = True
        return conn

    def get(self, key: str) -> Optional[str]:
        try:
            with closing(self._connect()) as conn:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Cannot read slot '{key}'", details={"path": str(self.path)}) from exc
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            self._upsert(key, value)
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Cannot write slot '{key}'", details={"path": str(self.path)}) from exc

    @_write_retry
    def _upsert(self, key: str, value: str) -> None:
        with closing(self._connect()) as conn:
            with conn:
                conn.execute(
                    "INSERT INTO kv (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, value),
                )

    def delete(self, key: str) -> None:
        try:
            with closing(self._connect()) as conn:
                with conn:
                    conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Cannot delete slot '{key}'", details={"path": str(self.path)}) from exc


def build_kv_store(settings: Optional[Settings] = None) -> KeyValueStore:
    """
    Build the backend selected by ``settings.storage_backend``.
    """
    settings = settings or get_settings()
    backend = settings.storage_backend
    if backend == "file":
        store: KeyValueStore = FileKeyValueStore(settings.data_dir)
    elif backend == "sqlite":
        store = SqliteKeyValueStore(Path(settings.data_dir) / SQLITE_FILENAME)
    elif backend == "memory":
        store = MemoryKeyValueStore()
    else:
        raise ValueError(f"Unknown storage backend '{backend}'. Available: file, sqlite, memory")
    log.debug("Storage backend ready", extra={"backend": backend, "data_dir": str(settings.data_dir)})
    return store


__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "FileKeyValueStore",
    "SqliteKeyValueStore",
    "build_kv_store",
]
