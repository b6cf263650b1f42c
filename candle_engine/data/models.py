"""
Canonical data models for market data.

This module defines immutable data structures that represent clean,
validated candles after parsing from the source file format.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ..errors import ConfigurationError


class TimeFrame(Enum):
    """Bucket width partitioning a symbol's series. Never resampled."""
    MINUTE_1 = "1m"
    MINUTE_5 = "5m"
    MINUTE_15 = "15m"
    MINUTE_30 = "30m"
    HOUR_1 = "1h"
    DAY_1 = "1day"

    @classmethod
    def parse(cls, value: "str | TimeFrame") -> "TimeFrame":
        """Resolve a timeframe from its value string (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for timeframe in cls:
                if timeframe.value == normalized:
                    return timeframe

        raise ConfigurationError(
            f"Unknown timeframe '{value}'. Use one of: {', '.join(tf.value for tf in cls)}",
            parameter="timeframe",
            value=value
        )


@dataclass(frozen=True)
class Candle:
    """One OHLCV observation. OHLC consistency is not enforced."""
    symbol: str          # Instrument identifier
    timestamp: datetime  # UTC market timestamp, second precision
    open: float          # Opening price
    high: float          # High price
    low: float           # Low price
    close: float         # Closing price
    volume: float        # Traded volume
    trades: int          # Number of trades, non-negative
