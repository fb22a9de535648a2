"""Year-month period helpers.

Deduction months, loan start months and schedule labels are carried as
``"YYYY-MM"`` strings.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Any

from payroll_deductions.exceptions import ValidationError

_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{2})(?:-(\d{2}))?$")


def parse_year_month(value: Any, field: str = "month") -> tuple[int, int]:
    """Parse ``YYYY-MM`` (or a full ISO date / ``date``) into ``(year, month)``."""
    if isinstance(value, date):
        return value.year, value.month
    if not value or not isinstance(value, str):
        raise ValidationError(f"{field} is required (YYYY-MM)", field=field)
    match = _YEAR_MONTH.match(value.strip())
    if match is None:
        raise ValidationError(f"{field} must be formatted YYYY-MM, got {value!r}", field=field)
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(f"{field} has invalid month {month}", field=field)
    return year, month


def format_year_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def normalize_year_month(value: Any, field: str = "month") -> str:
    """Return the canonical ``YYYY-MM`` form of a period value."""
    return format_year_month(*parse_year_month(value, field))


def period_key(month: int, year: int) -> str:
    """Year-month key for a payroll (month, year) pair."""
    if not 1 <= month <= 12:
        raise ValidationError(f"month must be between 1 and 12, got {month}", field="month")
    if year < 1:
        raise ValidationError(f"year must be positive, got {year}", field="year")
    return format_year_month(year, month)


def add_months(year_month: str, months: int) -> str:
    """Shift a ``YYYY-MM`` period by a number of months."""
    year, month = parse_year_month(year_month)
    index = year * 12 + (month - 1) + months
    return format_year_month(index // 12, index % 12 + 1)


def months_between(start: date, end: date) -> int:
    """Calendar months from start to end, ignoring the day of month.

    Negative when end precedes start.
    """
    return (end.year - start.year) * 12 + (end.month - start.month)


def add_years(start: date, years: int) -> date:
    """Same calendar day ``years`` later; 29 February rolls over to 1 March."""
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        return start.replace(year=start.year + years, day=28) + timedelta(days=1)
