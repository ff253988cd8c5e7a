"""
Aggregate statistics over a record collection.

Pure functions: no state, no side effects. Ratios such as the confirmed
percentage are derived from the raw totals by the caller.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence

from croptracker.domain.models import CropRecord, StoreStats


def compute_stats(records: Iterable[CropRecord]) -> StoreStats:
    """
    Sum acreage and expenses and count records in a single pass.
    """
    total_count = 0
    total_acreage = 0.0
    total_expenses = 0.0
    confirmed_count = 0
    for record in records:
        total_count += 1
        total_acreage += record.acreage
        total_expenses += record.expenses
        if record.confirmed:
            confirmed_count += 1

    return StoreStats(
        total_count=total_count,
        total_acreage=total_acreage,
        total_expenses=total_expenses,
        confirmed_count=confirmed_count,
    )


def confirmed_percentage(stats: StoreStats) -> int:
    """Whole-number share of confirmed records; 0 for an empty collection."""
    # Half rounds up: 1 of 8 confirmed is 13%, not 12%.
    return math.floor(stats.confirmed_count / max(stats.total_count, 1) * 100 + 0.5)


def recent_records(records: Sequence[CropRecord], limit: int = 5) -> List[CropRecord]:
    """Last ``limit`` records in insertion order, newest first."""
    if limit <= 0:
        return []
    return list(reversed(records[-limit:]))


__all__ = ["compute_stats", "confirmed_percentage", "recent_records"]
