"""
In-memory signal cache.

Memoizes generated signals so repeated requests for the same inputs skip
recomputation. Bounded LRU; caller-owned and injected into the engine,
never a hidden global.

Keys:
    (asset, timeframe, rounded price, candle count, last candle timestamp,
     last candle OHLCV)

The last candle is fingerprinted by value as well as timestamp: a still-forming
bar keeps its timestamp while its prices change.
"""

import logging
from collections import OrderedDict
from datetime import datetime
from typing import Optional, Sequence, Union

from mtf_signals.core.config import Settings, get_settings
from mtf_signals.schemas.market import Candle, Timeframe
from mtf_signals.schemas.signal import Signal

logger = logging.getLogger(__name__)

CandleFingerprint = tuple[float, float, float, float, float]
CacheKey = tuple[str, str, float, int, Optional[datetime], Optional[CandleFingerprint]]


class SignalCache:
    """
    Bounded LRU cache of Signals.

    Closed candles before the last one are assumed final; revising history
    further back calls for clear().

    Usage:
        cache = SignalCache.from_settings()
        engine = SignalEngine(cache=cache)
    """

    def __init__(self, max_entries: int = 100, price_precision: int = 2):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.price_precision = price_precision
        self._entries: "OrderedDict[CacheKey, Signal]" = OrderedDict()
        self._hits = 0
        self._misses = 0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SignalCache":
        """Cache sized by the ``cache_max_entries`` and ``cache_price_precision`` settings."""
        settings = settings or get_settings()
        return cls(
            max_entries=settings.cache_max_entries,
            price_precision=settings.cache_price_precision,
        )

    def make_key(
        self,
        asset: str,
        timeframe: Union[Timeframe, str],
        current_price: float,
        candles: Sequence[Candle],
    ) -> CacheKey:
        """Build the memoization key for one signal request."""
        last_timestamp, fingerprint = None, None
        if candles:
            last = candles[-1]
            last_timestamp = last.timestamp
            fingerprint = (last.open, last.high, last.low, last.close, last.volume)
        return (
            asset.upper(),
            Timeframe(timeframe).value,
            round(current_price, self.price_precision),
            len(candles),
            last_timestamp,
            fingerprint,
        )

    def get(self, key: CacheKey) -> Optional[Signal]:
        """Cached signal for the key, or None."""
        signal = self._entries.get(key)
        if signal is None:
            self._misses += 1
            return None
        self._entries.move_to_end(key)
        self._hits += 1
        return signal

    def put(self, key: CacheKey, signal: Signal) -> None:
        """Store a signal, evicting the least recently used entry when full."""
        self._entries[key] = signal
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Signal cache evicted {evicted[0]} {evicted[1]}")

    def clear(self) -> None:
        """Drop every entry and reset statistics."""
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    @property
    def stats(self) -> dict:
        """Cache statistics."""
        total = self._hits + self._misses
        return {
            "entries": len(self._entries),
            "max_entries": self.max_entries,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / total if total else 0.0,
        }
