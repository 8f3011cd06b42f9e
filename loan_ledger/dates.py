"""
Calendar Date Helpers

All engine dates are calendar days. Datetimes are accepted at the boundary and
have their time-of-day stripped; ISO ``YYYY-MM-DD`` strings are parsed.
"""

from datetime import date, datetime, timedelta
from typing import Union
import calendar

from .errors import LoanValidationError

DateLike = Union[date, datetime, str]

FULL_LABEL_FORMAT = "%d %b %Y"   # 18 Oct 2026
SHORT_LABEL_FORMAT = "%b %d"     # Oct 18


def as_date(value: DateLike, field_name: str = "date") -> date:
    """
    Coerce a date-like value to a calendar date

    Raises:
        LoanValidationError: If the value is not a date, datetime or ISO date string
    """
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            # Accept full ISO timestamps as stored by some exporters
            if "T" in text:
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            return date.fromisoformat(text)
        except ValueError:
            raise LoanValidationError(f"{field_name} is not a valid ISO date: {value!r}")
    raise LoanValidationError(f"{field_name} must be a date, got {type(value).__name__}")


def days_between(start: DateLike, end: DateLike) -> int:
    """Absolute number of whole days between two calendar dates"""
    return abs((as_date(end) - as_date(start)).days)


def add_days(start: date, days: int) -> date:
    return start + timedelta(days=days)


def add_months(start_date: date, months: int) -> date:
    """Add months to a date, handling month-end edge cases"""
    month = start_date.month - 1 + months
    year = start_date.year + month // 12
    month = month % 12 + 1
    day = min(start_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def whole_months_between(start: date, end: date) -> int:
    """
    Count calendar months from start to end

    A month only counts once its anniversary day-of-month is reached, so
    Jan 4 -> Feb 3 is 0 months and Jan 4 -> Feb 4 is 1 month. Negative when
    end precedes start.
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return months


def full_label(value: date) -> str:
    return value.strftime(FULL_LABEL_FORMAT)


def short_label(value: date) -> str:
    return value.strftime(SHORT_LABEL_FORMAT)
