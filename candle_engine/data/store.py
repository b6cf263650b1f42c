"""
In-memory time-series store for candles keyed by symbol and timeframe.

Each (symbol, timeframe) series is held as an immutable tuple sorted by
timestamp with no duplicate timestamps. Writers build the merged series
off to the side and swap it in with a single assignment, so readers only
ever see a complete series and never wait on each other. Writers to the
same key are serialized by a per-key lock; writers to different keys run
independently.
"""

import threading
from bisect import bisect_left, bisect_right
from datetime import datetime
from operator import attrgetter
from typing import Iterable, Optional, Union

from ..logging.config import get_store_logger
from .models import Candle, TimeFrame

logger = get_store_logger(__name__)

_timestamp = attrgetter("timestamp")

SeriesKey = tuple[str, TimeFrame]


class MarketDataStore:
    """Owns every stored candle series for the lifetime of the service."""

    def __init__(self) -> None:
        self._data: dict[str, dict[TimeFrame, tuple[Candle, ...]]] = {}
        self._key_locks: dict[SeriesKey, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def add_candles(self, symbol: str, timeframe: Union[str, TimeFrame],
                    new_candles: Iterable[Candle]) -> int:
        """
        Merge candles into the series for (symbol, timeframe).

        The key is created if absent. The resulting series is sorted by
        timestamp ascending with one candle per timestamp; when a timestamp
        is already stored, the newly added candle replaces the stored one,
        and within one batch the last candle for a timestamp wins.

        Args:
            symbol: Instrument identifier
            timeframe: Partition key
            new_candles: Candles to merge, in any order

        Returns:
            Length of the series after the merge
        """
        tf = TimeFrame.parse(timeframe)
        incoming = list(new_candles)

        with self._key_lock((symbol, tf)):
            existing = self._lookup(symbol, tf) or ()

            merged = {candle.timestamp: candle for candle in existing}
            for candle in incoming:
                merged[candle.timestamp] = candle
            series = tuple(sorted(merged.values(), key=_timestamp))

            with self._registry_lock:
                self._data.setdefault(symbol, {})[tf] = series

        logger.debug(
            "Merged candles into series",
            symbol=symbol,
            timeframe=tf.value,
            added=len(incoming),
            replaced_or_duplicate=len(existing) + len(incoming) - len(series),
            series_length=len(series)
        )
        return len(series)

    def get_candles(self, symbol: str, timeframe: Union[str, TimeFrame],
                    from_ts: Optional[datetime] = None,
                    to_ts: Optional[datetime] = None) -> Optional[list[Candle]]:
        """
        Return candles for (symbol, timeframe) within [from_ts, to_ts].

        Both bounds are inclusive; an omitted bound leaves that side open.

        Returns:
            None if the key has never been stored, otherwise a possibly
            empty list ordered by timestamp
        """
        series = self._lookup(symbol, TimeFrame.parse(timeframe))
        if series is None:
            return None

        start = 0 if from_ts is None else bisect_left(series, from_ts, key=_timestamp)
        end = len(series) if to_ts is None else bisect_right(series, to_ts, key=_timestamp)
        return list(series[start:end])

    def latest_candle(self, symbol: str,
                      timeframe: Union[str, TimeFrame]) -> Optional[Candle]:
        """Most recent candle of the series, or None if there is none."""
        series = self._lookup(symbol, TimeFrame.parse(timeframe))
        if not series:
            return None
        return series[-1]

    def has_series(self, symbol: str, timeframe: Union[str, TimeFrame]) -> bool:
        """True if the key exists, even when its series is empty."""
        return self._lookup(symbol, TimeFrame.parse(timeframe)) is not None

    def symbols(self) -> list[str]:
        """Symbols with at least one stored series, sorted."""
        with self._registry_lock:
            return sorted(self._data)

    def timeframes(self, symbol: str) -> list[TimeFrame]:
        """Timeframes stored for a symbol."""
        with self._registry_lock:
            return list(self._data.get(symbol, {}))

    def clear(self) -> None:
        """Drop every stored series."""
        with self._registry_lock:
            self._data.clear()
        logger.info("Market data store cleared")

    def _lookup(self, symbol: str, timeframe: TimeFrame) -> Optional[tuple[Candle, ...]]:
        by_timeframe = self._data.get(symbol)
        if by_timeframe is None:
            return None
        return by_timeframe.get(timeframe)

    def _key_lock(self, key: SeriesKey) -> threading.Lock:
        with self._registry_lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = self._key_locks[key] = threading.Lock()
            return lock
