"""Datetime utilities."""

from datetime import datetime, timezone


def parse_datetime(value) -> datetime:
    """Parse datetime from ISO string or return as-is if already datetime.

    Naive values are assumed to be UTC.

    Raises:
        ValueError: If the value is not an ISO 8601 timestamp.
    """
    if value is None:
        return datetime.now(timezone.utc)
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (as returned by SQLite)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
