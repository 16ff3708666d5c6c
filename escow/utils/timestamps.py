"""Timestamp utilities.

Job logs store UTC ISO-8601 timestamps; batch files and CSV exports use the
operator's local calendar date.
"""

from datetime import date, datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Example:
        >>> utc_now().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC; aware ones are converted.

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_local_timestamp(dt: datetime) -> str:
    """Render a timestamp in the machine's local zone for operator-facing output."""
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""
    return dt_utc.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def today_iso() -> str:
    """Return today's local date as YYYY-MM-DD (batch file naming)."""
    return date.today().isoformat()


def is_iso_date(value: str) -> bool:
    """Check that a string is a real calendar date in YYYY-MM-DD form.

    Args:
        value: Candidate date string

    Returns:
        True if the string parses as YYYY-MM-DD
    """
    if len(value) != 10:
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True
