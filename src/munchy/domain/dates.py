"""Calendar helpers for local ``YYYY-MM-DD`` date strings."""

import calendar
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

SUNDAY = 6


def today_in(timezone_name: str) -> date:
    """Return today's date in the given IANA timezone."""
    return datetime.now(tz=ZoneInfo(timezone_name)).date()


def format_local_date(day: date) -> str:
    """Format a date as a zero-padded ``YYYY-MM-DD`` string."""
    return day.isoformat()


def parse_local_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string as a calendar date."""
    return date.fromisoformat(value)


def start_of_week(day: date) -> date:
    """Return the Sunday that starts the week containing ``day``."""
    offset = (day.weekday() - SUNDAY) % 7
    return day - timedelta(days=offset)


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a month."""
    return calendar.monthrange(year, month)[1]


def date_range(start: date, end: date) -> list[str]:
    """Return every date string from ``start`` to ``end`` inclusive."""
    days = (end - start).days
    return [
        format_local_date(start + timedelta(days=offset)) for offset in range(days + 1)
    ]
