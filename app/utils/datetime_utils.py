"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def parse_iso_datetime(value: str | None) -> datetime | None:
    """
    Parse an ISO-8601 timestamp as sent by the API.

    Accepts a trailing ``Z``. Naive values are treated as UTC.

    Args:
        value: Timestamp string

    Returns:
        Aware datetime or None if the value is missing or malformed
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def seconds_until(value: str | None, now: datetime | None = None) -> int | None:
    """
    Seconds from ``now`` until the given ISO timestamp.

    Args:
        value: Expiry timestamp (e.g. ``expireAt`` from the auth endpoints)
        now: Reference time (defaults to current UTC time)

    Returns:
        Whole seconds (may be negative) or None if the value can't be parsed
    """
    expires = parse_iso_datetime(value)
    if expires is None:
        return None
    now = now or utc_now()
    return int((expires - now).total_seconds())


def format_timestamp(value: str | None) -> str:
    """Format an API timestamp for chat output."""
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return value or "Unknown"
    return parsed.strftime("%d.%m.%Y %H:%M UTC")
