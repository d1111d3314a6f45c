"""Display helpers for record windows, locations and timestamps."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from confmod.models import Location, Revision

NOT_AVAILABLE = "N/A"


def format_day(value: Optional[datetime]) -> str:
    """Format as e.g. 'May 21, 2025'."""
    if value is None:
        return NOT_AVAILABLE
    return f"{value:%B} {value.day}, {value.year}"


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{format_day(value)} {value:%H:%M}"


def format_date_range(from_date: Optional[datetime], to_date: Optional[datetime]) -> str:
    start = format_day(from_date)
    end = format_day(to_date)

    if start == NOT_AVAILABLE and end == NOT_AVAILABLE:
        return NOT_AVAILABLE
    if start == end:
        return start
    if end == NOT_AVAILABLE:
        return f"{start} onwards"
    if start == NOT_AVAILABLE:
        return f"until {end}"
    return f"{start} - {end}"


def format_revision_window(revision: Revision) -> Optional[str]:
    """Window text for dated revisions; None for revisions without a usable window."""
    if not revision.is_dated:
        return None
    return format_date_range(revision.from_date, revision.to_date)


def format_location(location: Optional[Location]) -> str:
    """Join address parts; the continent is shown only when nothing else is known."""
    if location is None:
        return NOT_AVAILABLE
    parts = [
        part
        for part in (location.address, location.city_state_province, location.country)
        if part
    ]
    if not parts and location.continent:
        parts.append(location.continent)
    return ", ".join(parts) if parts else NOT_AVAILABLE
