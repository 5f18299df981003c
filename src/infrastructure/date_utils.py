"""
Date Utilities Module

Thin helpers for ISO parsing, display formatting and day arithmetic.
"""

from datetime import date, datetime
from typing import Union

DateLike = Union[date, datetime, str]


def parse_iso_date(value: DateLike) -> date:
    """
    Parse an ISO date string (YYYY-MM-DD) into a date.

    date and datetime values are accepted and normalised to a date.

    Raises:
        ValueError: If the string is not a valid ISO date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])


def format_short(day: date) -> str:
    """Format as '5 Mar' (day without padding, abbreviated month)."""
    return f"{day.day} {day.strftime('%b')}"


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole calendar days from start to end (negative if end is earlier)."""
    return (parse_iso_date(end) - parse_iso_date(start)).days


def add_months(day: date, months: int) -> date:
    """
    First day of the month `months` away from `day`'s month.

    Day-level placement is left to the caller so month-end overflow never occurs.
    """
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)
