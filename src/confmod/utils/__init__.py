"""Utility helpers."""

from confmod.utils.logging import configure_logging, get_logger
from confmod.utils.text import fold, non_blank
from confmod.utils.time import format_calendar_date, parse_calendar_date, parse_timestamp

__all__ = [
    "configure_logging",
    "get_logger",
    "fold",
    "non_blank",
    "format_calendar_date",
    "parse_calendar_date",
    "parse_timestamp",
]
