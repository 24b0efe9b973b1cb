"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
Series functions return arrays aligned to their input, NaN where the
indicator is not yet defined. All math is deterministic.
"""

import numpy as np
from typing import Optional


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average."""
    if len(data) < period:
        return np.full(len(data), np.nan)

    result = np.full(len(data), np.nan)
    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return result


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """
    Exponential Moving Average.

    Seeded with the simple average of the first ``period`` values; all-NaN
    when fewer values are available.
    """
    if len(data) < period:
        return np.full(len(data), np.nan)

    result = np.full(len(data), np.nan)
    multiplier = 2 / (period + 1)

    # Start with SMA
    result[period - 1] = np.mean(data[:period])

    for i in range(period, len(data)):
        result[i] = data[i] * multiplier + result[i - 1] * (1 - multiplier)

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """Relative Strength Index (Wilder smoothing)."""
    if len(closes) < period + 1:
        return np.full(len(closes), np.nan)

    deltas = np.diff(closes)

    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    # Seed with the simple mean of the first `period` changes
    avg_gain = np.mean(gains[:period])
    avg_loss = np.mean(losses[:period])

    result = np.full(len(closes), np.nan)
    result[period] = _rsi_value(avg_gain, avg_loss)

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i + 1] = _rsi_value(avg_gain, avg_loss)

    return result


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    The signal line is the EMA of the MACD line itself, computed only over
    the indices where both price EMAs are defined.

    Returns: (macd_line, signal_line, histogram)
    """
    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    macd_line = fast_ema - slow_ema

    signal_line = np.full(len(closes), np.nan)
    defined = ~np.isnan(macd_line)
    if defined.any():
        start = int(np.argmax(defined))
        signal_line[start:] = ema(macd_line[start:], signal_period)

    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram


def stochastic(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
    k_period: int = 14,
    d_period: int = 3,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Stochastic Oscillator.

    Returns: (k, d)
    """
    if len(closes) < k_period:
        return np.full(len(closes), np.nan), np.full(len(closes), np.nan)

    k = np.full(len(closes), np.nan)

    for i in range(k_period - 1, len(closes)):
        highest_high = np.max(highs[i - k_period + 1 : i + 1])
        lowest_low = np.min(lows[i - k_period + 1 : i + 1])

        if highest_high == lowest_low:
            k[i] = 50
        else:
            k[i] = ((closes[i] - lowest_low) / (highest_high - lowest_low)) * 100

    k = np.clip(k, 0, 100)
    d = sma(k, d_period)

    return k, d


def momentum(closes: np.ndarray, price: float, lookback: int = 10) -> float:
    """Percent change of ``price`` against the close ``lookback`` bars back."""
    if len(closes) < lookback:
        return 0.0
    reference = closes[-lookback]
    if reference == 0:
        return 0.0
    return float((price - reference) / reference * 100)


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def true_range(highs: np.ndarray, lows: np.ndarray, closes: np.ndarray) -> np.ndarray:
    """True Range. The first bar has no previous close and uses high - low."""
    tr = np.zeros(len(closes))
    if len(closes) == 0:
        return tr

    tr[0] = highs[0] - lows[0]
    for i in range(1, len(closes)):
        tr[i] = max(
            highs[i] - lows[i],
            abs(highs[i] - closes[i - 1]),
            abs(lows[i] - closes[i - 1]),
        )
    return tr


def atr(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> np.ndarray:
    """Average True Range: mean of the trailing ``period`` true ranges."""
    if len(closes) < period + 1:
        return np.full(len(closes), np.nan)

    tr = true_range(highs, lows, closes)

    result = np.full(len(closes), np.nan)
    for i in range(period, len(closes)):
        result[i] = np.mean(tr[i - period + 1 : i + 1])
    return result


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger Bands (population standard deviation).

    Returns: (upper, middle, lower, bandwidth)
    """
    middle = sma(closes, period)

    std = np.full(len(closes), np.nan)
    for i in range(period - 1, len(closes)):
        std[i] = np.std(closes[i - period + 1 : i + 1])

    upper = middle + (std_dev * std)
    lower = middle - (std_dev * std)

    with np.errstate(divide="ignore", invalid="ignore"):
        bandwidth = (upper - lower) / middle

    return upper, middle, lower, bandwidth


def band_position(price: float, upper: float, lower: float) -> float:
    """Position of ``price`` within the bands, clamped to [0, 1]."""
    width = upper - lower
    if width <= 0:
        return 0.5
    return float(min(1.0, max(0.0, (price - lower) / width)))


# =============================================================================
# VOLUME INDICATORS
# =============================================================================


def volume_ratio(volumes: np.ndarray, period: int = 20) -> float:
    """Last volume relative to the trailing average. Zero volumes count as 1."""
    if len(volumes) == 0:
        return 1.0

    adjusted = np.where(volumes > 0, volumes, 1.0)
    window = adjusted[-period:]
    avg = np.mean(window)
    return float(adjusted[-1] / avg)


# =============================================================================
# TREND INDICATORS
# =============================================================================


def directional_movement(
    highs: np.ndarray, lows: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    """
    +DM and -DM per bar.

    A move counts only if it is positive and exceeds the opposite move.
    """
    plus_dm = np.zeros(len(highs))
    minus_dm = np.zeros(len(highs))

    for i in range(1, len(highs)):
        up_move = highs[i] - highs[i - 1]
        down_move = lows[i - 1] - lows[i]

        if up_move > down_move and up_move > 0:
            plus_dm[i] = up_move
        if down_move > up_move and down_move > 0:
            minus_dm[i] = down_move

    return plus_dm, minus_dm


def adx(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Directional index from trailing ``period`` averages of TR, +DM and -DM.

    Returns: (adx, plus_di, minus_di)
    """
    if len(closes) < period + 1:
        nan_arr = np.full(len(closes), np.nan)
        return nan_arr, nan_arr.copy(), nan_arr.copy()

    plus_dm, minus_dm = directional_movement(highs, lows)
    tr = true_range(highs, lows, closes)

    adx_result = np.full(len(closes), np.nan)
    plus_di = np.full(len(closes), np.nan)
    minus_di = np.full(len(closes), np.nan)

    for i in range(period, len(closes)):
        window = slice(i - period + 1, i + 1)
        avg_tr = np.mean(tr[window])

        if avg_tr <= 0:
            plus_di[i] = minus_di[i] = adx_result[i] = 0.0
            continue

        p_di = 100 * np.mean(plus_dm[window]) / avg_tr
        m_di = 100 * np.mean(minus_dm[window]) / avg_tr
        plus_di[i] = p_di
        minus_di[i] = m_di

        di_sum = p_di + m_di
        adx_result[i] = 100 * abs(p_di - m_di) / di_sum if di_sum > 0 else 0.0

    return np.clip(adx_result, 0, 100), plus_di, minus_di


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_last_valid(arr: np.ndarray) -> Optional[float]:
    """Get last non-NaN value from array."""
    valid = arr[~np.isnan(arr)]
    return float(valid[-1]) if len(valid) > 0 else None
