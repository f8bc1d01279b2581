"""
Datetime utilities
Provides timezone-aware helpers for reading TeslaMate timestamps and rendering them
"""
from datetime import datetime, timezone, tzinfo


def utc_now() -> datetime:
    """
    Get current UTC time (replacement for deprecated datetime.utcnow())

    Returns:
        datetime: Current UTC time with timezone awareness
    """
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Attach UTC to naive timestamps

    TeslaMate stores ``timestamp without time zone`` columns in UTC, so a naive
    value read back from the database is interpreted as UTC. Aware values are
    converted to UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_in_timezone(value: datetime, tz: tzinfo) -> str:
    """
    Render a timestamp as RFC 3339 (second precision) in the given timezone

    Example:
        >>> format_in_timezone(datetime(2024, 5, 1, 12, 0), ZoneInfo("Europe/Berlin"))
        '2024-05-01T14:00:00+02:00'
    """
    rendered = ensure_utc(value).astimezone(tz).isoformat(timespec="seconds")
    if rendered.endswith("+00:00"):
        rendered = rendered[:-6] + "Z"
    return rendered
