"""
Support/Resistance & Pattern Detector

CONTRACT:
    Input:  Sequence[Candle] (+ current price)
    Output: LevelSet, list[PatternMatch]

Heuristics, not statistically validated. Patterns are minor scoring
inputs only.
"""

from mtf_signals.services.levels.support_resistance import (
    find_pivot_points,
    find_swing_points,
    merge_levels,
    support_resistance,
)
from mtf_signals.services.levels.patterns import (
    detect_candlestick_patterns,
    detect_chart_patterns,
    detect_patterns,
    pattern_bias,
)

__all__ = [
    "find_pivot_points",
    "find_swing_points",
    "merge_levels",
    "support_resistance",
    "detect_candlestick_patterns",
    "detect_chart_patterns",
    "detect_patterns",
    "pattern_bias",
]
