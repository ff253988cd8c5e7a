"""
Query pipeline: search, status filter, date-range filter and pagination.

``run_query`` is a pure function of (records, query). Filters are combined
with AND and never reorder records; pagination slices the filtered sequence
and yields an empty page when asked for a page past the end.
"""

from __future__ import annotations

from typing import Iterable, List

from croptracker.domain.models import CropQuery, CropRecord, QueryPage, StatusFilter


def _matches_search(record: CropRecord, needle: str) -> bool:
    if not needle:
        return True
    return needle in record.name.lower() or needle in record.notes.lower()


def _matches_status(record: CropRecord, status: StatusFilter) -> bool:
    if status is StatusFilter.CONFIRMED:
        return record.confirmed
    if status is StatusFilter.UNCONFIRMED:
        return not record.confirmed
    return True


def _matches_date_range(record: CropRecord, query: CropQuery) -> bool:
    if query.date_from is not None and record.date_planted < query.date_from:
        return False
    if query.date_to is not None and record.date_planted > query.date_to:
        return False
    return True


def filter_records(records: Iterable[CropRecord], query: CropQuery) -> List[CropRecord]:
    """
    Apply the search, status and date-range filters, preserving source order.
    """
    needle = query.search_term.lower()
    return [
        record
        for record in records
        if _matches_search(record, needle)
        and _matches_status(record, query.status_filter)
        and _matches_date_range(record, query)
    ]


def run_query(records: Iterable[CropRecord], query: CropQuery) -> QueryPage:
    """
    Filter ``records`` and return the requested 1-indexed page.

    Example
    -------
        page = run_query(store.list(), CropQuery(search_term="rice"))
        for record in page.items:
            ...
    """
    filtered = filter_records(records, query)
    start = (query.page - 1) * query.page_size
    end = query.page * query.page_size
    return QueryPage(
        items=filtered[start:end],
        total_count=len(filtered),
        page=query.page,
        page_size=query.page_size,
    )


__all__ = ["filter_records", "run_query"]
