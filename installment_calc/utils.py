"""Utility functions for the loan calculator.

This module provides helpers for parsing user input into Python data types and
for handling dates, including adding calendar months and parsing ISO date
strings into ``datetime.date`` instances.
"""

from __future__ import annotations

import calendar
from datetime import date


def parse_iso_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string into a ``date``.

    A bare ``YYYY-MM`` is accepted as the first day of that month.

    Raises
    ------
    ValueError
        If the string is not a valid date.
    """
    try:
        parts = value.strip().split("-")
        if len(parts) == 2:
            parts.append("1")
        if len(parts) != 3:
            raise ValueError
        year, month, day = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def float_from_str(value: str) -> float:
    """Convert a numeric string into a ``float``.

    The function strips any commas and surrounding whitespace. It raises
    ``ValueError`` if conversion fails.
    """
    try:
        return float(value.replace(",", "").strip())
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
