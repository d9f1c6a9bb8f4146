from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, Tuple

from ..core.exceptions import InvalidRange, ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(str(value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def month_range(year: int, month: int) -> Tuple[date, date]:
    """First and last calendar day of a month."""
    if not 1 <= int(month) <= 12:
        raise ValidationError("Invalid month. Must be between 1 and 12")
    last = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last)


def days_in_month(year: int, month: int) -> int:
    first, last = month_range(year, month)
    return (last - first).days + 1


def inclusive_days(start: date, end: date) -> int:
    if end < start:
        raise InvalidRange("End date must be on or after start date")
    return (end - start).days + 1


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day in [start, end]."""
    for offset in range(inclusive_days(start, end)):
        yield start + timedelta(days=offset)


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_start <= b_end and a_end >= b_start


def overlap_days(a_start: date, a_end: date, b_start: date, b_end: date) -> int:
    """Number of days shared by two inclusive ranges (0 when disjoint)."""
    if not ranges_overlap(a_start, a_end, b_start, b_end):
        return 0
    return (min(a_end, b_end) - max(a_start, b_start)).days + 1
