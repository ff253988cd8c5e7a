"""
Domain package for Crop Tracker.

Exports the record shape and the value types shared by the store, the
aggregate engine, the query pipeline and the exporters.
"""

from croptracker.domain.models import (
    CropFields,
    CropQuery,
    CropRecord,
    CropUpdate,
    QueryPage,
    StatusFilter,
    StoreStats,
)

__all__ = [
    "CropFields",
    "CropQuery",
    "CropRecord",
    "CropUpdate",
    "QueryPage",
    "StatusFilter",
    "StoreStats",
]
