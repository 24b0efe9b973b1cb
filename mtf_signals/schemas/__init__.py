"""
Schema Contracts

JSON-serializable contracts between the engine components and their
external collaborators.
"""

from mtf_signals.schemas.market import (
    Candle,
    Timeframe,
    TIMEFRAME_ORDER,
    harmonization_order,
)
from mtf_signals.schemas.indicators import (
    ADXData,
    BollingerBandsData,
    EMAData,
    IndicatorIssue,
    IndicatorSnapshot,
    MACDData,
    StochasticData,
    TrendDirection,
)
from mtf_signals.schemas.signal import (
    Direction,
    LevelSet,
    PatternBias,
    PatternKind,
    PatternMatch,
    PivotPoints,
    RiskLevels,
    RiskMethod,
    Signal,
    TimeframeSet,
)

__all__ = [
    # Market
    "Candle",
    "Timeframe",
    "TIMEFRAME_ORDER",
    "harmonization_order",
    # Indicators
    "ADXData",
    "BollingerBandsData",
    "EMAData",
    "IndicatorIssue",
    "IndicatorSnapshot",
    "MACDData",
    "StochasticData",
    "TrendDirection",
    # Signals
    "Direction",
    "LevelSet",
    "PatternBias",
    "PatternKind",
    "PatternMatch",
    "PivotPoints",
    "RiskLevels",
    "RiskMethod",
    "Signal",
    "TimeframeSet",
]
