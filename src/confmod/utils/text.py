"""Text helpers."""

from __future__ import annotations

from typing import Optional


def non_blank(value: Optional[str]) -> Optional[str]:
    """Return the value unless it is None or whitespace only."""
    if value is None or not value.strip():
        return None
    return value


def fold(text: str) -> str:
    """Lower-case text for case-insensitive comparisons."""
    return text.lower()
