"""
Error taxonomy for the Crop Tracker core.

Not-found outcomes are reported as ``None``/``False`` return values, never as
exceptions. Everything below is recoverable: callers report it and carry on.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CropTrackerError(Exception):
    """Base exception for all Crop Tracker errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StorageError(CropTrackerError):
    """Raised by a key-value backend when the slot cannot be read or written."""


class StorageWriteError(CropTrackerError):
    """Raised by the record store when a mutation could not be persisted."""


class RecordValidationError(CropTrackerError):
    """
    Raised when record fields violate the write-boundary invariants.

    ``details`` maps field names to human-readable messages.
    """


__all__ = [
    "CropTrackerError",
    "StorageError",
    "StorageWriteError",
    "RecordValidationError",
]
