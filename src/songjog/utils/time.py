"""Time utilities for UTC timestamps and event calendar dates."""

from datetime import date, datetime, timezone
from typing import Any, Optional

DATE_ONLY_FORMAT = "%Y-%m-%d"


def utc_now_z() -> str:
    """
    Get current UTC time as ISO 8601 string with Z suffix.

    Returns:
        ISO 8601 UTC timestamp ending with 'Z' (e.g., '2025-12-23T00:27:07.804867Z')
    """
    return to_utc_z(datetime.now(timezone.utc))


def to_utc_z(dt: datetime) -> str:
    """
    Convert datetime to ISO 8601 UTC string with Z suffix.

    Raises:
        ValueError: If datetime is naive (not timezone-aware)
    """
    if dt.tzinfo is None:
        raise ValueError(
            f"Naive datetime not allowed. Got {dt}. "
            "Use datetime.now(timezone.utc) or dt.replace(tzinfo=timezone.utc)"
        )

    dt_utc = dt.astimezone(timezone.utc)
    return dt_utc.isoformat().replace('+00:00', 'Z')


def today_utc() -> date:
    """Calendar date used as "today" when the caller does not pin one."""
    return datetime.now(timezone.utc).date()


def parse_event_date_safely(value: Any) -> Optional[date]:
    """
    Safely parse an event date into a calendar date.

    Handles:
    - date / datetime objects (datetime is reduced to its date)
    - Date-only strings (YYYY-MM-DD)
    - ISO 8601 datetime strings, with or without a trailing 'Z' or offset;
      the date part is taken as written, without converting to UTC
    - Anything else (None, numbers, garbage text) - returns None

    Args:
        value: Raw date value from an event payload

    Returns:
        date, or None if the value cannot be read as a calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        if len(text) == 10:
            return datetime.strptime(text, DATE_ONLY_FORMAT).date()

        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        # Calendar date as written; the offset is not applied
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def format_event_date(value: Optional[date], long: bool = False) -> str:
    """
    Human-readable event date.

    Short form: 'Jan 15, 2024'. Long form: 'Mon, Jan 15, 2024'.
    Unknown dates render as 'Date TBD'.
    """
    if value is None:
        return "Date TBD"
    text = f"{value.strftime('%b')} {value.day}, {value.year}"
    if long:
        return f"{value.strftime('%a')}, {text}"
    return text
