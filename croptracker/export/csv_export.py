"""
CSV transform for crop records.

Produces the complete CSV text in memory; saving it under a file name is
the caller's concern.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from croptracker.domain.models import CropRecord
from croptracker.export.formatters import DEFAULT_CURRENCY_SYMBOL, format_locale_date


def csv_headers(currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> List[str]:
    return [
        "Crop Name",
        "Date Planted",
        "Acreage",
        f"Expenses ({currency_symbol})",
        "Confirmed",
        "Notes",
        "Created",
        "Updated",
    ]


def _plain_number(value: float) -> str:
    # Whole values drop the trailing ".0" (2.0 -> "2").
    if float(value).is_integer():
        return str(int(value))
    # Positional notation only (1e-05 -> "0.00001").
    return format(Decimal(repr(float(value))), "f")


def csv_row(record: CropRecord) -> List[str]:
    return [
        record.name,
        record.date_planted.isoformat(),
        _plain_number(record.acreage),
        _plain_number(record.expenses),
        "Yes" if record.confirmed else "No",
        record.notes,
        format_locale_date(record.created_at),
        format_locale_date(record.updated_at),
    ]


def to_csv(records: Iterable[CropRecord], currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """
    Serialize ``records`` to CSV text, header row first.

    Fields holding a comma, quote or line break are quoted and embedded
    quotes doubled. Rows end with CRLF; there is no newline after the last
    row.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\r\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(csv_headers(currency_symbol))
    writer.writerows(csv_row(record) for record in records)
    return buffer.getvalue().removesuffix("\r\n")


def csv_filename(today: Optional[date] = None) -> str:
    """Default download name, e.g. ``crop_records_2024-03-01.csv``."""
    return f"crop_records_{(today or date.today()).isoformat()}.csv"


__all__ = ["csv_headers", "csv_row", "to_csv", "csv_filename"]
