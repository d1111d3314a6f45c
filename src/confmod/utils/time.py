"""Time parsing and serialization helpers."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp or calendar date into a datetime.

    Returns None for empty or unparseable input instead of raising.
    """
    if not value or not isinstance(value, str):
        return None

    normalized = value.strip().replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def format_calendar_date(value: date) -> str:
    """Serialize a date (or datetime) as YYYY-MM-DD, dropping time of day."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_calendar_date(value: str) -> date:
    """Parse a YYYY-MM-DD string, raising ValueError on bad input."""
    return date.fromisoformat(value.strip())
