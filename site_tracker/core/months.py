"""
Year-month helpers.

Months are carried as 'YYYY-MM' strings; lexical order is chronological.
"""

from datetime import date, datetime
import re

from ..errors import InvalidInputError

YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def is_year_month(value) -> bool:
    """Check that value is a well-formed 'YYYY-MM' string."""
    if not isinstance(value, str):
        return False
    match = YEAR_MONTH_RE.match(value)
    return bool(match) and 1 <= int(match.group(2)) <= 12


def parse_year_month(value: str) -> tuple[int, int]:
    """Split 'YYYY-MM' into (year, month)."""
    if not is_year_month(value):
        raise InvalidInputError(f"Invalid year-month (expected YYYY-MM): {value!r}")
    match = YEAR_MONTH_RE.match(value)
    return int(match.group(1)), int(match.group(2))


def to_year_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def year_month_of(moment) -> str:
    """Year-month of a date or datetime."""
    if not isinstance(moment, (date, datetime)):
        raise InvalidInputError(f"Expected a date, got {type(moment).__name__}")
    return to_year_month(moment.year, moment.month)


def next_year_month(latest: str = None, today: date = None) -> str:
    """Month following `latest`, or the month after today when absent."""
    if latest is None:
        today = today or date.today()
        year, month = today.year, today.month
    else:
        year, month = parse_year_month(latest)

    if month == 12:
        return to_year_month(year + 1, 1)
    return to_year_month(year, month + 1)
