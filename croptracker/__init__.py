"""
Crop Tracker - on-device record keeping for crop plantings.

This package provides the record store and derived-view engine behind the
crop tracker:

- A record store persisting the collection in a single key-value slot
- Aggregate statistics over the collection
- A search / status / date-range / pagination query pipeline
- CSV export and a printable report, with currency/date/number formatting

All state lives on the user's device; there is no server component.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from croptracker.aggregate import compute_stats, confirmed_percentage, recent_records
from croptracker.config import Settings, get_settings
from croptracker.domain.models import (
    CropFields,
    CropQuery,
    CropRecord,
    CropUpdate,
    QueryPage,
    StatusFilter,
    StoreStats,
)
from croptracker.exceptions import (
    CropTrackerError,
    RecordValidationError,
    StorageError,
    StorageWriteError,
)
from croptracker.export import (
    csv_filename,
    format_currency,
    format_date,
    format_number,
    to_csv,
)
from croptracker.infrastructure import build_kv_store
from croptracker.query import filter_records, run_query
from croptracker.store import RecordStore
from croptracker.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "CropFields",
    "CropQuery",
    "CropRecord",
    "CropUpdate",
    "QueryPage",
    "StatusFilter",
    "StoreStats",
    # Errors
    "CropTrackerError",
    "RecordValidationError",
    "StorageError",
    "StorageWriteError",
    # Store and derived views
    "RecordStore",
    "build_kv_store",
    "compute_stats",
    "confirmed_percentage",
    "recent_records",
    "filter_records",
    "run_query",
    # Export
    "csv_filename",
    "format_currency",
    "format_date",
    "format_number",
    "to_csv",
    # Logging
    "configure_logging",
    "get_logger",
]
