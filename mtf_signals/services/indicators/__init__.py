"""
Indicator Engine Service

CONTRACT:
    Input:  Sequence[Candle] (+ current price)
    Output: IndicatorSnapshot

RESPONSIBILITIES:
    - RSI, EMA, MACD, Bollinger Bands, Stochastic, ADX, ATR
    - SMA 20/50, momentum and volume ratio for the scorer
    - Neutral defaults for insufficient or degenerate input

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from mtf_signals.services.indicators.service import (
    IndicatorService,
    get_indicator_service,
    DEFAULT_ADX,
    DEFAULT_RSI,
    DEFAULT_STOCHASTIC,
)

__all__ = [
    "IndicatorService",
    "get_indicator_service",
    "DEFAULT_ADX",
    "DEFAULT_RSI",
    "DEFAULT_STOCHASTIC",
]
