"""
Infrastructure package for Crop Tracker.

Centralizes on-device persistence concerns (key-value slot backends).
Keep this layer focused on I/O, decoupled from record semantics.
"""

from croptracker.infrastructure.kv_store import (
    FileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    SqliteKeyValueStore,
    build_kv_store,
)

__all__ = [
    "FileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqliteKeyValueStore",
    "build_kv_store",
]
