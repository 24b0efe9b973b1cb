"""
MTF Signals - Multi-timeframe technical signal engine.

Computes indicators from OHLCV candles, scores them into a directional
call with a confidence value, attaches risk levels per timeframe and
harmonizes the results across the timeframe hierarchy.
"""

from mtf_signals.schemas import (
    Candle,
    Direction,
    IndicatorSnapshot,
    Signal,
    Timeframe,
    TimeframeSet,
)
from mtf_signals.services.strategy import SignalEngine
from mtf_signals.services.cache import SignalCache

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Candle",
    "Direction",
    "IndicatorSnapshot",
    "Signal",
    "Timeframe",
    "TimeframeSet",
    "SignalEngine",
    "SignalCache",
]
