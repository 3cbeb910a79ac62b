"""Timestamp and calendar-date helpers.

Timestamps are integer epoch milliseconds. Calendar dates are
``YYYY-MM-DD`` strings in UTC.
"""

from datetime import UTC, date, datetime, timedelta

__all__ = [
    "DAY_MS",
    "add_days",
    "format_date",
    "next_calendar_day",
    "previous_calendar_day",
    "short_date_label",
]

DAY_MS = 24 * 60 * 60 * 1000


def _to_datetime(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp / 1000, tz=UTC)


def format_date(timestamp: int) -> str:
    """Format an epoch-ms timestamp as ``YYYY-MM-DD`` (UTC)."""
    return _to_datetime(timestamp).date().isoformat()


def next_calendar_day(date_str: str) -> str:
    """Return the calendar day after ``date_str``."""
    return (date.fromisoformat(date_str) + timedelta(days=1)).isoformat()


def previous_calendar_day(date_str: str) -> str:
    """Return the calendar day before ``date_str``."""
    return (date.fromisoformat(date_str) - timedelta(days=1)).isoformat()


def add_days(timestamp: int, days: int) -> int:
    """Shift an epoch-ms timestamp by whole days."""
    return timestamp + days * DAY_MS


def short_date_label(timestamp: int) -> str:
    """Render a short label such as ``Jan 5`` for audit titles."""
    moment = _to_datetime(timestamp)
    return f"{moment:%b} {moment.day}"
