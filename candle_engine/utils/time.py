"""
Time conversion utilities for the service boundary.

Market timestamps inside the engine are timezone-aware UTC datetimes;
callers and transports often speak epoch milliseconds instead.
"""

from datetime import UTC, datetime
from typing import Optional, Union

TimestampLike = Union[datetime, int, float]


def ensure_utc(ts: datetime) -> datetime:
    """
    Normalize a datetime to timezone-aware UTC.

    Args:
        ts: Naive (taken as UTC) or aware datetime

    Returns:
        Aware datetime in UTC
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def to_epoch_millis(ts: datetime) -> int:
    """Milliseconds since the Unix epoch for a UTC datetime."""
    return int(ensure_utc(ts).timestamp() * 1000)


def from_epoch_millis(ms: Union[int, float]) -> datetime:
    """UTC datetime for milliseconds since the Unix epoch."""
    return datetime.fromtimestamp(ms / 1000.0, tz=UTC)


def coerce_timestamp(value: Optional[TimestampLike]) -> Optional[datetime]:
    """
    Accept a datetime or epoch milliseconds and return an aware UTC datetime.

    Raises:
        TypeError: If value is neither a datetime nor a number
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return from_epoch_millis(value)
    raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")


def format_market_time(market_ts: datetime) -> str:
    """
    Format market timestamp for responses and logging.

    Args:
        market_ts: Market timestamp to format

    Returns:
        ISO8601 formatted string
    """
    return ensure_utc(market_ts).isoformat()
