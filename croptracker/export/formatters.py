"""
Display formatters for currency, dates and plain numbers.

Total functions over finite numeric input and valid dates; they do not
validate records.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Union

DEFAULT_CURRENCY_SYMBOL = "₦"

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_WIDE = Context(prec=400)


def _half_up(value: float, decimals: int) -> Decimal:
    # Halves round away from zero; precision covers the whole float range.
    exponent = Decimal(1).scaleb(-decimals)
    return Decimal(repr(float(value))).quantize(exponent, rounding=ROUND_HALF_UP, context=_WIDE)


def format_currency(amount: float, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """
    Render ``amount`` with zero decimals and grouped thousands.

    >>> format_currency(80000)
    '₦80,000'
    >>> format_currency(-1200.4)
    '-₦1,200'
    """
    rounded = _half_up(abs(amount), 0)
    sign = "-" if amount < 0 and rounded else ""
    return f"{sign}{symbol}{rounded:,.0f}"


def format_date(value: Union[str, date]) -> str:
    """
    Render an ISO date (string or ``date``) as ``DD Mon YYYY``.

    >>> format_date("2024-03-01")
    '01 Mar 2024'
    """
    if isinstance(value, datetime):
        value = value.date()
    elif isinstance(value, str):
        value = date.fromisoformat(value[:10])
    return f"{value.day:02d} {_MONTHS[value.month - 1]} {value.year:04d}"


def format_number(value: float, decimals: int = 1) -> str:
    """
    Render ``value`` with exactly ``decimals`` places and ``,`` grouping.

    >>> format_number(1234.56)
    '1,234.6'
    """
    return f"{_half_up(value, decimals):,.{decimals}f}"


def format_locale_date(value: datetime) -> str:
    """Short ``M/D/YYYY`` date of a timestamp, taken in UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return f"{value.month}/{value.day}/{value.year}"


def format_long_date(value: date) -> str:
    """Long report date, e.g. ``Monday, 19 October 2026``."""
    return f"{value:%A}, {value.day} {value:%B %Y}"


__all__ = [
    "DEFAULT_CURRENCY_SYMBOL",
    "format_currency",
    "format_date",
    "format_number",
    "format_locale_date",
    "format_long_date",
]
