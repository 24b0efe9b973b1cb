"""Tests for the signal memoization cache."""

import pytest

from mtf_signals.schemas import Direction, Timeframe
from mtf_signals.services.cache import SignalCache

from conftest import make_candles, make_signal


def test_key_rounds_price_and_tracks_last_candle():
    cache = SignalCache(price_precision=2)
    candles = make_candles([100.0] * 5)

    key = cache.make_key("btc/usdt", "1h", 100.004, candles)
    assert key == (
        "BTC/USDT",
        "1h",
        100.0,
        5,
        candles[-1].timestamp,
        (100.0, 100.0, 100.0, 100.0, 1000.0),
    )
    assert cache.make_key("BTC/USDT", Timeframe.H1, 99.996, candles) == key
    assert cache.make_key("BTC/USDT", Timeframe.H1, 100.0, candles[:4]) != key


def test_get_put_and_stats():
    cache = SignalCache()
    key = cache.make_key("BTC/USDT", Timeframe.H1, 100.0, [])
    signal = make_signal(Timeframe.H1, Direction.LONG, 80)

    assert cache.get(key) is None
    cache.put(key, signal)
    assert cache.get(key) is signal
    assert key in cache
    assert len(cache) == 1
    assert cache.stats["hits"] == 1
    assert cache.stats["misses"] == 1
    assert cache.stats["hit_rate"] == pytest.approx(0.5)


def test_evicts_least_recently_used():
    cache = SignalCache(max_entries=2)
    signal = make_signal(Timeframe.H1, Direction.LONG, 80)
    keys = [cache.make_key("BTC/USDT", Timeframe.H1, float(p), []) for p in (1, 2, 3)]

    cache.put(keys[0], signal)
    cache.put(keys[1], signal)
    cache.get(keys[0])
    cache.put(keys[2], signal)

    assert len(cache) == 2
    assert keys[0] in cache
    assert keys[1] not in cache
    assert keys[2] in cache


def test_clear_resets_entries_and_stats():
    cache = SignalCache()
    key = cache.make_key("BTC/USDT", Timeframe.H1, 100.0, [])
    cache.put(key, make_signal(Timeframe.H1, Direction.LONG, 80))
    cache.get(key)

    cache.clear()
    assert len(cache) == 0
    assert cache.stats["hits"] == 0


def test_rejects_empty_capacity():
    with pytest.raises(ValueError):
        SignalCache(max_entries=0)


def test_revised_last_candle_changes_key():
    cache = SignalCache()
    candles = make_candles([100.0, 101.0, 102.0], spread=0.5)
    last = candles[-1]
    revised = candles[:-1] + [last.model_copy(update={"close": 103.0, "high": 103.5})]

    assert revised[-1].timestamp == last.timestamp
    assert cache.make_key("BTC/USDT", "1h", 102.0, revised) != cache.make_key(
        "BTC/USDT", "1h", 102.0, candles
    )


def test_from_settings_uses_cache_settings(settings):
    cache = SignalCache.from_settings(
        settings.model_copy(update={"cache_max_entries": 3, "cache_price_precision": 0})
    )

    assert cache.max_entries == 3
    assert cache.stats["max_entries"] == 3
    assert cache.make_key("BTC/USDT", Timeframe.H1, 100.4, [])[2] == 100.0
