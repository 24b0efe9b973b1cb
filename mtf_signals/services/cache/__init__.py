"""
Cache module.

Provides bounded in-memory memoization of generated signals.
"""

from mtf_signals.services.cache.signal_cache import CacheKey, SignalCache

__all__ = ["CacheKey", "SignalCache"]
