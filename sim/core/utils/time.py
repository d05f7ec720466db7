"""
Timestamps stored on image records.

Records carry ISO-8601 strings with an explicit UTC offset, which both
metadata backends store as plain strings.
"""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Current time as an ISO-8601 UTC string, e.g. ``2024-01-15T10:42:31.123456+00:00``."""
    return to_utc_iso(datetime.now(timezone.utc))


def to_utc_iso(value: datetime) -> str:
    if value.tzinfo is None:
        raise ValueError("timestamp must be timezone-aware")

    return value.astimezone(timezone.utc).isoformat()


def parse_utc_iso(value: str) -> datetime:
    """Parse a stored timestamp, rejecting values without an offset."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp '{value}' has no UTC offset")

    return parsed.astimezone(timezone.utc)
