"""Date manipulation utilities"""

import calendar
from datetime import date, datetime
from typing import Any

from dateutil.relativedelta import relativedelta


def parse_date(value: Any) -> date | None:
    """
    Coerce a stored date field to a date.

    Accepts date/datetime objects and ISO-8601 strings (date or datetime,
    optionally with a trailing Z). Returns None for empty or unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def days_between(start: date, end: date) -> int:
    """Calendar days from start to end (negative when end is earlier)"""
    return (end - start).days


def format_day_month_year(value: date) -> str:
    """Format as dd/MM/yyyy"""
    return value.strftime("%d/%m/%Y")


def add_months(from_date: date, months: int) -> date:
    """Step by calendar months, clamping to the last day of shorter months"""
    return from_date + relativedelta(months=months)


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, pulling the day back to the month's last day if needed"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(max(day, 1), last_day))
