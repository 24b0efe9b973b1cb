"""
Support/Resistance Detection

Swing-point based levels plus classic pivot points. These are hints for
the scorer and for display, not authoritative price levels.
"""

import logging
from typing import Sequence
import numpy as np

from mtf_signals.schemas.market import Candle
from mtf_signals.schemas.signal import LevelSet, PivotPoints

logger = logging.getLogger(__name__)

MIN_CANDLES_FOR_SWINGS = 50
FALLBACK_STEP = 0.02


def find_swing_points(
    highs: np.ndarray, lows: np.ndarray, lookback: int = 5
) -> tuple[list[int], list[int]]:
    """
    Find swing highs and swing lows.

    A bar is a swing high if its high is strictly above every high within
    ``lookback`` bars on each side; symmetric rule for swing lows.

    Returns: (swing_high_indices, swing_low_indices)
    """
    swing_highs: list[int] = []
    swing_lows: list[int] = []

    for i in range(lookback, len(highs) - lookback):
        neighbours_high = np.concatenate((highs[i - lookback : i], highs[i + 1 : i + lookback + 1]))
        neighbours_low = np.concatenate((lows[i - lookback : i], lows[i + 1 : i + lookback + 1]))

        if highs[i] > np.max(neighbours_high):
            swing_highs.append(i)
        if lows[i] < np.min(neighbours_low):
            swing_lows.append(i)

    return swing_highs, swing_lows


def merge_levels(prices: Sequence[float], proximity: float = 0.005) -> list[float]:
    """Sort prices and merge the ones closer than ``proximity`` (relative)."""
    merged: list[list[float]] = []
    for price in sorted(prices):
        if merged and abs(price - merged[-1][-1]) <= merged[-1][-1] * proximity:
            merged[-1].append(price)
        else:
            merged.append([price])
    return [float(np.mean(group)) for group in merged]


def find_pivot_points(
    high: float, low: float, close: float, pivot_type: str = "standard"
) -> PivotPoints:
    """
    Calculate pivot points.

    Types: standard, fibonacci, camarilla
    """
    pivot = (high + low + close) / 3
    diff = high - low

    if pivot_type == "standard":
        r1 = (2 * pivot) - low
        r2 = pivot + diff
        r3 = high + 2 * (pivot - low)
        s1 = (2 * pivot) - high
        s2 = pivot - diff
        s3 = low - 2 * (high - pivot)

    elif pivot_type == "fibonacci":
        r1 = pivot + (0.382 * diff)
        r2 = pivot + (0.618 * diff)
        r3 = pivot + diff
        s1 = pivot - (0.382 * diff)
        s2 = pivot - (0.618 * diff)
        s3 = pivot - diff

    elif pivot_type == "camarilla":
        r1 = close + (diff * 1.1 / 12)
        r2 = close + (diff * 1.1 / 6)
        r3 = close + (diff * 1.1 / 4)
        s1 = close - (diff * 1.1 / 12)
        s2 = close - (diff * 1.1 / 6)
        s3 = close - (diff * 1.1 / 4)

    else:
        raise ValueError(f"Unknown pivot type: {pivot_type}")

    return PivotPoints(
        pivot=pivot, r1=r1, r2=r2, r3=r3, s1=s1, s2=s2, s3=s3, type=pivot_type
    )


def support_resistance(
    candles: Sequence[Candle],
    current_price: float,
    max_levels: int = 3,
    lookback: int = 5,
    recent_swings: int = 10,
    proximity: float = 0.005,
    pivot_type: str = "standard",
) -> LevelSet:
    """
    Support and resistance levels around ``current_price``.

    Uses the most recent swing prices, merged by proximity. Missing levels
    are padded in 2% steps away from price so the result always holds
    ``max_levels`` of each.
    """
    supports: list[float] = []
    resistances: list[float] = []

    if len(candles) >= MIN_CANDLES_FOR_SWINGS:
        highs = np.array([c.high for c in candles], dtype=float)
        lows = np.array([c.low for c in candles], dtype=float)
        swing_highs, swing_lows = find_swing_points(highs, lows, lookback)

        # (index, price) in time order, keep the most recent ones
        swings = sorted(
            [(i, float(highs[i])) for i in swing_highs] + [(i, float(lows[i])) for i in swing_lows]
        )[-recent_swings:]
        levels = merge_levels([price for _, price in swings], proximity)

        supports = sorted((lv for lv in levels if lv < current_price), reverse=True)[:max_levels]
        resistances = sorted(lv for lv in levels if lv > current_price)[:max_levels]

    supports = _pad_levels(supports, current_price, max_levels, -FALLBACK_STEP)
    resistances = _pad_levels(resistances, current_price, max_levels, FALLBACK_STEP)

    pivots = None
    if candles:
        # Pivots from the previous completed bar
        ref = candles[-2] if len(candles) > 1 else candles[-1]
        pivots = find_pivot_points(ref.high, ref.low, ref.close, pivot_type)

    return LevelSet(supports=supports, resistances=resistances, pivot_points=pivots)


def _pad_levels(levels: list[float], price: float, count: int, step: float) -> list[float]:
    padded = list(levels)
    while len(padded) < count:
        last = padded[-1] if padded else price
        padded.append(last * (1 + step))
    return padded
