"""Tests for the in-memory market data store"""

import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from candle_engine.data.models import TimeFrame
from candle_engine.data.store import MarketDataStore
from candle_engine.errors import ConfigurationError


def day(n: int) -> datetime:
    return datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(days=n)


class TestAddCandles:
    """Test merging candles into a series"""

    def test_unknown_key_is_none(self):
        """Test that a never-stored key is distinguishable from an empty one"""
        store = MarketDataStore()
        assert store.get_candles("PETR4", TimeFrame.DAY_1) is None
        assert store.latest_candle("PETR4", TimeFrame.DAY_1) is None
        assert not store.has_series("PETR4", "1day")

    def test_empty_batch_creates_series(self):
        """Test that adding nothing still registers the key"""
        store = MarketDataStore()
        assert store.add_candles("PETR4", "1day", []) == 0
        assert store.get_candles("PETR4", "1day") == []
        assert store.has_series("PETR4", TimeFrame.DAY_1)

    def test_series_is_sorted(self, make_candles):
        """Test that out-of-order input is stored in timestamp order"""
        store = MarketDataStore()
        candles = make_candles([10.0, 11.0, 12.0, 13.0])
        store.add_candles("PETR4", "1day", list(reversed(candles)))

        stored = store.get_candles("PETR4", "1day")
        assert [c.close for c in stored] == [10.0, 11.0, 12.0, 13.0]

    def test_repeated_add_is_idempotent(self, make_candles):
        """Test that adding the same batch twice stores it once"""
        store = MarketDataStore()
        candles = make_candles([10.0, 11.0, 12.0])

        assert store.add_candles("PETR4", "1day", candles) == 3
        assert store.add_candles("PETR4", "1day", candles) == 3
        assert store.get_candles("PETR4", "1day") == candles

    def test_new_data_overwrites_same_timestamp(self, make_candles):
        """Test that a later add replaces a stored candle with the same timestamp"""
        store = MarketDataStore()
        candles = make_candles([10.0, 11.0, 12.0])
        store.add_candles("PETR4", "1day", candles)

        revised = replace(candles[1], close=99.0)
        assert store.add_candles("PETR4", "1day", [revised]) == 3
        assert store.get_candles("PETR4", "1day")[1].close == 99.0

    def test_last_row_in_batch_wins(self, make_candles):
        """Test that duplicates within one batch keep the last occurrence"""
        store = MarketDataStore()
        first = make_candles([10.0])[0]
        second = replace(first, close=20.0)

        assert store.add_candles("PETR4", "1day", [first, second]) == 1
        assert store.latest_candle("PETR4", "1day").close == 20.0

    def test_merge_interleaves_batches(self, make_candles):
        """Test that two disjoint batches merge into one ordered series"""
        store = MarketDataStore()
        candles = make_candles([1.0, 2.0, 3.0, 4.0, 5.0])
        store.add_candles("PETR4", "1day", candles[::2])
        store.add_candles("PETR4", "1day", candles[1::2])

        stored = store.get_candles("PETR4", "1day")
        timestamps = [c.timestamp for c in stored]
        assert timestamps == sorted(set(timestamps))
        assert len(stored) == 5

    def test_timeframes_are_separate_series(self, make_candles):
        """Test that timeframes partition a symbol's data"""
        store = MarketDataStore()
        store.add_candles("PETR4", TimeFrame.DAY_1, make_candles([1.0, 2.0]))
        store.add_candles("PETR4", TimeFrame.MINUTE_5, make_candles([3.0]))

        assert len(store.get_candles("PETR4", TimeFrame.DAY_1)) == 2
        assert len(store.get_candles("PETR4", TimeFrame.MINUTE_5)) == 1
        assert set(store.timeframes("PETR4")) == {TimeFrame.DAY_1, TimeFrame.MINUTE_5}
        assert store.symbols() == ["PETR4"]

    def test_unknown_timeframe_rejected(self, make_candles):
        """Test that timeframe strings outside the closed set are rejected"""
        store = MarketDataStore()
        with pytest.raises(ConfigurationError):
            store.add_candles("PETR4", "2h", make_candles([1.0]))

    def test_clear(self, make_candles):
        """Test that clear drops every series"""
        store = MarketDataStore()
        store.add_candles("PETR4", "1day", make_candles([1.0]))
        store.clear()
        assert store.symbols() == []
        assert store.get_candles("PETR4", "1day") is None


class TestGetCandlesRange:
    """Test inclusive range filtering"""

    @pytest.fixture
    def store(self, make_candles):
        store = MarketDataStore()
        store.add_candles("PETR4", "1day", make_candles([float(i) for i in range(10)]))
        return store

    def test_open_range_returns_all(self, store):
        assert len(store.get_candles("PETR4", "1day")) == 10

    def test_bounds_are_inclusive(self, store):
        """Test that candles exactly on either bound are included"""
        result = store.get_candles("PETR4", "1day", day(2), day(5))
        assert [c.close for c in result] == [2.0, 3.0, 4.0, 5.0]

    def test_only_lower_bound(self, store):
        result = store.get_candles("PETR4", "1day", from_ts=day(8))
        assert [c.close for c in result] == [8.0, 9.0]

    def test_only_upper_bound(self, store):
        result = store.get_candles("PETR4", "1day", to_ts=day(1))
        assert [c.close for c in result] == [0.0, 1.0]

    def test_range_outside_series_is_empty(self, store):
        """Test that an empty range is an empty list, not None"""
        assert store.get_candles("PETR4", "1day", day(20), day(30)) == []

    def test_inverted_range_is_empty(self, store):
        assert store.get_candles("PETR4", "1day", day(5), day(2)) == []


class TestConcurrentAccess:
    """Test concurrent writers and readers"""

    def test_concurrent_writers_same_key(self, make_candles):
        """Test that concurrent merges into one key lose no candles"""
        store = MarketDataStore()
        batches = [
            make_candles([float(i)] * 50, start=day(i * 50))
            for i in range(8)
        ]

        threads = [
            threading.Thread(target=store.add_candles, args=("PETR4", "1day", batch))
            for batch in batches
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stored = store.get_candles("PETR4", "1day")
        assert len(stored) == 400
        timestamps = [c.timestamp for c in stored]
        assert timestamps == sorted(timestamps)

    def test_readers_never_see_unsorted_series(self, make_candles):
        """Test that readers observe complete, ordered snapshots during writes"""
        store = MarketDataStore()
        problems = []
        done = threading.Event()

        def writer():
            for i in range(50):
                store.add_candles("VALE3", "1day", make_candles([1.0] * 20, symbol="VALE3",
                                                               start=day(i * 20)))
            done.set()

        def reader():
            while not done.is_set():
                series = store.get_candles("VALE3", "1day") or []
                timestamps = [c.timestamp for c in series]
                if timestamps != sorted(set(timestamps)):
                    problems.append(timestamps)

        threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader)
                                                       for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert problems == []
        assert len(store.get_candles("VALE3", "1day")) == 1000
