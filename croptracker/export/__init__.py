"""
Export package for Crop Tracker.

Pure transforms from records to text: the CSV artifact and the display
formatters shared by the report and the CLI.
"""

from croptracker.export.csv_export import csv_filename, csv_headers, csv_row, to_csv
from croptracker.export.formatters import (
    DEFAULT_CURRENCY_SYMBOL,
    format_currency,
    format_date,
    format_locale_date,
    format_long_date,
    format_number,
)

__all__ = [
    "DEFAULT_CURRENCY_SYMBOL",
    "csv_filename",
    "csv_headers",
    "csv_row",
    "format_currency",
    "format_date",
    "format_locale_date",
    "format_long_date",
    "format_number",
    "to_csv",
]
