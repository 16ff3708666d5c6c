"""Utility functions for time handling."""

from .timestamps import (
    ensure_utc,
    format_local_timestamp,
    is_iso_date,
    today_iso,
    utc_now,
)

__all__ = [
    "utc_now",
    "ensure_utc",
    "format_local_timestamp",
    "today_iso",
    "is_iso_date",
]
