"""
Sample data for demos and first runs.

``load_sample_data`` replaces whatever the store holds with SAMPLE_CROPS.
"""

from __future__ import annotations

from datetime import date
from typing import List

from croptracker.domain.models import CropFields, CropRecord
from croptracker.store import RecordStore
from croptracker.utils.logging import get_logger

log = get_logger(__name__)

# Suggested crop names offered when recording a planting.
CROP_CATALOGUE = [
    "Maize",
    "Rice",
    "Cassava",
    "Yam",
    "Sorghum",
    "Millet",
    "Cowpea",
    "Groundnut",
    "Soybean",
    "Cocoyam",
    "Plantain",
    "Tomato",
    "Pepper",
    "Okra",
    "Sesame",
]

SAMPLE_CROPS: List[CropFields] = [
    CropFields(
        name="Maize",
        date_planted=date(2024, 3, 1),
        acreage=2.0,
        expenses=50000,
        notes="Early rains; hybrid seed from the cooperative.",
        confirmed=True,
    ),
    CropFields(
        name="Rice",
        date_planted=date(2024, 5, 15),
        acreage=1.5,
        expenses=30000,
        notes="Lowland plot near the stream.",
        confirmed=False,
    ),
    CropFields(
        name="Cassava",
        date_planted=date(2024, 4, 10),
        acreage=3.0,
        expenses=42000,
        notes="TME 419 stems, intercropped with maize.",
        confirmed=True,
    ),
    CropFields(
        name="Yam",
        date_planted=date(2024, 2, 20),
        acreage=1.0,
        expenses=65000,
        notes="Mounds prepared in January.",
        confirmed=True,
    ),
    CropFields(
        name="Sorghum",
        date_planted=date(2024, 6, 5),
        acreage=2.5,
        expenses=28000,
        notes="",
        confirmed=False,
    ),
    CropFields(
        name="Groundnut",
        date_planted=date(2024, 5, 28),
        acreage=1.2,
        expenses=18500,
        notes="Needs weeding by mid-June, check for rosette.",
        confirmed=False,
    ),
    CropFields(
        name="Tomato",
        date_planted=date(2024, 9, 12),
        acreage=0.5,
        expenses=35000,
        notes="Dry-season irrigated beds.",
        confirmed=True,
    ),
]


def load_sample_data(store: RecordStore) -> List[CropRecord]:
    """Clear ``store`` and fill it with the sample crops, in order."""
    records = store.replace_all(SAMPLE_CROPS)
    log.info("Sample data loaded", extra={"count": len(records)})
    return records


__all__ = ["CROP_CATALOGUE", "SAMPLE_CROPS", "load_sample_data"]
