"""
Pattern Detection Heuristics

Rule-based candlestick and chart patterns from body/wick ratios and
recent extremes. Best-effort hints only: they feed a minor scoring vote
and are never the sole basis for a direction call.
"""

from typing import Sequence
import numpy as np

from mtf_signals.schemas.market import Candle
from mtf_signals.schemas.signal import PatternBias, PatternKind, PatternMatch

DOJI_BODY_RATIO = 0.2
WICK_BODY_MULTIPLE = 1.5
DOUBLE_EXTREME_TOLERANCE = 0.02
SHOULDER_TOLERANCE = 0.05
CHART_WINDOW = 20


def _candlestick(name: str, bias: PatternBias) -> PatternMatch:
    return PatternMatch(name=name, bias=bias, kind=PatternKind.CANDLESTICK)


def _chart(name: str, bias: PatternBias) -> PatternMatch:
    return PatternMatch(name=name, bias=bias, kind=PatternKind.CHART)


# =============================================================================
# CANDLESTICK PATTERNS
# =============================================================================


def detect_candlestick_patterns(candles: Sequence[Candle]) -> list[PatternMatch]:
    """Patterns formed by the last one or two bars."""
    if not candles:
        return []

    last = candles[-1]
    if last.range <= 0:
        return []

    patterns: list[PatternMatch] = []
    body = last.body

    if body < DOJI_BODY_RATIO * last.range:
        patterns.append(_candlestick("Doji", PatternBias.NEUTRAL))

    if last.lower_wick > WICK_BODY_MULTIPLE * body and last.upper_wick <= body:
        patterns.append(_candlestick("Hammer", PatternBias.BULLISH))
    elif last.upper_wick > WICK_BODY_MULTIPLE * body and last.lower_wick <= body:
        patterns.append(_candlestick("Shooting Star", PatternBias.BEARISH))

    if len(candles) >= 2:
        prev = candles[-2]
        if (
            prev.is_bearish
            and last.is_bullish
            and last.open <= prev.close
            and last.close >= prev.open
        ):
            patterns.append(_candlestick("Bullish Engulfing", PatternBias.BULLISH))
        elif (
            prev.is_bullish
            and last.is_bearish
            and last.open >= prev.close
            and last.close <= prev.open
        ):
            patterns.append(_candlestick("Bearish Engulfing", PatternBias.BEARISH))

    return patterns


# =============================================================================
# CHART PATTERNS
# =============================================================================


def detect_chart_patterns(candles: Sequence[Candle]) -> list[PatternMatch]:
    """Shapes over the last 20 bars. Nothing with fewer bars."""
    if len(candles) < CHART_WINDOW:
        return []

    recent = candles[-CHART_WINDOW:]
    closes = np.array([c.close for c in recent], dtype=float)
    highs = np.array([c.high for c in recent], dtype=float)
    lows = np.array([c.low for c in recent], dtype=float)

    patterns: list[PatternMatch] = []

    recent_lows = lows[-10:]
    min_low = np.min(recent_lows)
    if np.sum(np.abs(recent_lows - min_low) / min_low < DOUBLE_EXTREME_TOLERANCE) >= 2:
        patterns.append(_chart("Double Bottom", PatternBias.BULLISH))

    recent_highs = highs[-10:]
    max_high = np.max(recent_highs)
    if np.sum(np.abs(recent_highs - max_high) / max_high < DOUBLE_EXTREME_TOLERANCE) >= 2:
        patterns.append(_chart("Double Top", PatternBias.BEARISH))

    slope = (closes[-1] - closes[0]) / len(closes)
    if slope > 0 and max_high == np.max(highs[-5:]):
        patterns.append(_chart("Ascending Triangle", PatternBias.BULLISH))

    mid = len(highs) // 2
    left_shoulder = np.max(highs[: mid - 2])
    head = np.max(highs[mid - 2 : mid + 3])
    right_shoulder = np.max(highs[mid + 3 :])
    if (
        head > left_shoulder
        and head > right_shoulder
        and abs(left_shoulder - right_shoulder) / left_shoulder < SHOULDER_TOLERANCE
    ):
        patterns.append(_chart("Head and Shoulders", PatternBias.BEARISH))

    return patterns


def detect_patterns(candles: Sequence[Candle]) -> list[PatternMatch]:
    """All candlestick and chart patterns for the sequence."""
    return detect_candlestick_patterns(candles) + detect_chart_patterns(candles)


def pattern_bias(patterns: Sequence[PatternMatch]) -> PatternBias:
    """Net bias of a pattern list."""
    score = sum(
        1 if p.bias == PatternBias.BULLISH else -1 if p.bias == PatternBias.BEARISH else 0
        for p in patterns
    )
    if score > 0:
        return PatternBias.BULLISH
    if score < 0:
        return PatternBias.BEARISH
    return PatternBias.NEUTRAL
