from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from croptracker.domain.models import CropQuery, CropRecord, StatusFilter
from croptracker.query import filter_records, run_query

STAMP = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _record(idx: int, name: str, planted: date, confirmed: bool, notes: str = "") -> CropRecord:
    return CropRecord(
        id=f"id-{idx}",
        name=name,
        date_planted=planted,
        acreage=1.0,
        expenses=100,
        notes=notes,
        confirmed=confirmed,
        created_at=STAMP,
        updated_at=STAMP,
    )


@pytest.fixture
def records() -> list[CropRecord]:
    return [
        _record(1, "Maize", date(2024, 3, 1), True),
        _record(2, "Rice", date(2024, 5, 15), False),
        _record(3, "Cassava", date(2024, 4, 10), True, notes="Intercropped with RICE bund"),
        _record(4, "Brown rice", date(2024, 7, 1), True),
        _record(5, "Yam", date(2024, 2, 20), False, notes="mounds"),
    ]


def test_search_rice_returns_only_rice(sample_records):
    page = run_query(sample_records, CropQuery(search_term="rice", page=1, page_size=20))
    assert [r.name for r in page.items] == ["Rice"]
    assert page.total_count == 1


def test_search_is_case_insensitive_over_name_and_notes(records):
    names = [r.name for r in filter_records(records, CropQuery(search_term="RiCe"))]
    assert names == ["Rice", "Cassava", "Brown rice"]


def test_empty_search_matches_everything(records):
    assert filter_records(records, CropQuery()) == records
    assert filter_records(records, CropQuery(search_term=None)) == records


@pytest.mark.parametrize(
    "status, expected",
    [
        (StatusFilter.ALL, ["Maize", "Rice", "Cassava", "Brown rice", "Yam"]),
        (StatusFilter.CONFIRMED, ["Maize", "Cassava", "Brown rice"]),
        (StatusFilter.UNCONFIRMED, ["Rice", "Yam"]),
        ("unconfirmed", ["Rice", "Yam"]),
    ],
)
def test_status_filter(records, status, expected):
    assert [r.name for r in filter_records(records, CropQuery(status_filter=status))] == expected


def test_date_range_is_inclusive(records):
    query = CropQuery(date_from=date(2024, 3, 1), date_to=date(2024, 5, 15))
    assert [r.name for r in filter_records(records, query)] == ["Maize", "Rice", "Cassava"]


def test_open_ended_date_bounds(records):
    after = filter_records(records, CropQuery(date_from=date(2024, 5, 1)))
    before = filter_records(records, CropQuery(date_to=date(2024, 2, 28)))
    assert [r.name for r in after] == ["Rice", "Brown rice"]
    assert [r.name for r in before] == ["Yam"]


def test_filters_combine_with_and(records):
    query = CropQuery(search_term="rice", status_filter=StatusFilter.CONFIRMED, date_to=date(2024, 6, 1))
    assert [r.name for r in filter_records(records, query)] == ["Cassava"]


def test_pagination_slices_filtered_sequence(records):
    first = run_query(records, CropQuery(page=1, page_size=2))
    last = run_query(records, CropQuery(page=3, page_size=2))

    assert [r.id for r in first.items] == ["id-1", "id-2"]
    assert [r.id for r in last.items] == ["id-5"]
    assert first.total_pages == last.total_pages == 3
    assert (last.first_index, last.last_index) == (5, 5)


def test_page_past_the_end_is_empty_not_an_error(records):
    page = run_query(records, CropQuery(page=9, page_size=2))
    assert page.items == []
    assert page.total_count == 5
    assert (page.first_index, page.last_index) == (0, 0)


def test_no_matches_still_reports_one_page(records):
    page = run_query(records, CropQuery(search_term="wheat"))
    assert page.items == []
    assert page.total_pages == 1


def test_query_is_pure_and_repeatable(records):
    snapshot = list(records)
    query = CropQuery(search_term="a", status_filter=StatusFilter.CONFIRMED, page=1, page_size=2)
    assert run_query(records, query) == run_query(records, query)
    assert records == snapshot


@pytest.mark.parametrize("field", ["page", "page_size"])
def test_page_numbers_must_be_positive(field):
    with pytest.raises(ValidationError):
        CropQuery(**{field: 0})
