"""
Indicator Engine Service Implementation

Calculates the latest value of every indicator from a candle sequence.
Every method is total: short or degenerate input yields the documented
neutral default instead of an exception.
"""

import logging
from typing import Optional, Sequence
import numpy as np

from mtf_signals.schemas.market import Candle
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
from mtf_signals.services.base import BaseService
from mtf_signals.services.indicators.calculations import (
    sma,
    ema,
    rsi,
    macd,
    stochastic,
    atr,
    adx,
    bollinger_bands,
    band_position,
    momentum,
    volume_ratio,
    get_last_valid,
)

logger = logging.getLogger(__name__)

# Documented neutral defaults
DEFAULT_RSI = 50.0
DEFAULT_ADX = 25.0
DEFAULT_STOCHASTIC = 50.0
DEFAULT_BAND_POSITION = 0.5


def _ohlcv_to_arrays(candles: Sequence[Candle]) -> tuple:
    """Convert candle list to numpy arrays."""
    opens = np.array([c.open for c in candles], dtype=float)
    highs = np.array([c.high for c in candles], dtype=float)
    lows = np.array([c.low for c in candles], dtype=float)
    closes = np.array([c.close for c in candles], dtype=float)
    volumes = np.array([c.volume for c in candles], dtype=float)
    return opens, highs, lows, closes, volumes


class IndicatorService(BaseService[Sequence[Candle], IndicatorSnapshot]):
    """
    Indicator Engine Service.

    Stateless: every call is a pure function of its arguments.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    def execute(self, input_data: Sequence[Candle]) -> IndicatorSnapshot:
        """Snapshot priced at the last close."""
        price = input_data[-1].close if input_data else 0.0
        return self.snapshot(input_data, price)

    # =========================================================================
    # Individual indicators
    # =========================================================================

    def rsi(self, candles: Sequence[Candle], period: int = 14) -> float:
        """Wilder RSI. 50 with fewer than period+1 candles, 100 with no losses."""
        closes = _ohlcv_to_arrays(candles)[3]
        return self._rsi(closes, period, [])

    def ema(self, values: Sequence[float], period: int) -> Optional[float]:
        """Latest EMA value, None when fewer than ``period`` values."""
        return get_last_valid(ema(np.asarray(values, dtype=float), period))

    def macd(self, candles: Sequence[Candle]) -> MACDData:
        """MACD 12/26/9. All-zero with fewer than 26 candles."""
        closes = _ohlcv_to_arrays(candles)[3]
        return self._macd(closes, [])

    def bollinger(
        self,
        candles: Sequence[Candle],
        period: int = 20,
        k: float = 2.0,
        price: Optional[float] = None,
    ) -> BollingerBandsData:
        """Bollinger Bands with the price position clamped to [0, 1]."""
        closes = _ohlcv_to_arrays(candles)[3]
        if price is None:
            price = float(closes[-1]) if len(closes) else 0.0
        return self._bollinger(closes, price, period, k, [])

    def stochastic(
        self, candles: Sequence[Candle], k_period: int = 14, d_period: int = 3
    ) -> StochasticData:
        """Stochastic %K/%D, both clamped to [0, 100]. 50/50 when short."""
        _, highs, lows, closes, _ = _ohlcv_to_arrays(candles)
        return self._stochastic(highs, lows, closes, k_period, d_period, [])

    def adx(self, candles: Sequence[Candle], period: int = 14) -> ADXData:
        """Directional index. 25 with fewer than period+1 candles."""
        _, highs, lows, closes, _ = _ohlcv_to_arrays(candles)
        return self._adx(highs, lows, closes, period, [])

    def atr(self, candles: Sequence[Candle], period: int = 14) -> float:
        """Mean true range over the trailing window. 0 when short."""
        _, highs, lows, closes, _ = _ohlcv_to_arrays(candles)
        return self._atr(highs, lows, closes, period, [])

    # =========================================================================
    # Snapshot
    # =========================================================================

    def snapshot(self, candles: Sequence[Candle], current_price: float) -> IndicatorSnapshot:
        """Calculate every indicator for one candle sequence."""
        _, highs, lows, closes, volumes = _ohlcv_to_arrays(candles)
        issues: list[IndicatorIssue] = []

        last_close = float(closes[-1]) if len(closes) else current_price
        previous_close = float(closes[-2]) if len(closes) > 1 else last_close

        snapshot = IndicatorSnapshot(
            rsi=self._rsi(closes, 14, issues),
            macd=self._macd(closes, issues),
            ema=self._ema_stack(closes, current_price, issues),
            bollinger=self._bollinger(closes, current_price, 20, 2.0, issues),
            stochastic=self._stochastic(highs, lows, closes, 14, 3, issues),
            adx=self._adx(highs, lows, closes, 14, issues),
            atr=self._atr(highs, lows, closes, 14, issues),
            sma_20=get_last_valid(sma(closes, 20)) or last_close,
            sma_50=get_last_valid(sma(closes, 50)) or last_close,
            momentum=momentum(closes, current_price, 10),
            volume_ratio=volume_ratio(volumes, 20),
            close=last_close,
            previous_close=previous_close,
            candle_count=len(candles),
            issues=tuple(issues),
        )

        if issues:
            logger.debug(
                f"{len(candles)} candles: indicators fell back to defaults "
                f"({', '.join(i.value for i in issues)})"
            )
        return snapshot

    # =========================================================================
    # Array-level helpers (record fallbacks into `issues`)
    # =========================================================================

    def _rsi(self, closes: np.ndarray, period: int, issues: list) -> float:
        value = get_last_valid(rsi(closes, period))
        if value is None:
            issues.append(IndicatorIssue.RSI_INSUFFICIENT_HISTORY)
            return DEFAULT_RSI
        if value == 100.0:
            issues.append(IndicatorIssue.RSI_ZERO_LOSS)
        return float(min(100.0, max(0.0, value)))

    def _macd(self, closes: np.ndarray, issues: list) -> MACDData:
        if len(closes) < 26:
            issues.append(IndicatorIssue.MACD_INSUFFICIENT_HISTORY)
            return MACDData()

        macd_line, signal_line, _ = macd(closes, 12, 26, 9)
        value = get_last_valid(macd_line) or 0.0
        signal = signal_line[-1]
        # Fewer than 9 MACD values: no signal line yet
        signal = 0.0 if np.isnan(signal) else float(signal)

        return MACDData(value=value, signal=signal, histogram=value - signal)

    def _ema_stack(self, closes: np.ndarray, price: float, issues: list) -> EMAData:
        fast = get_last_valid(ema(closes, 12))
        slow = get_last_valid(ema(closes, 26))
        long = get_last_valid(ema(closes, 50))
        if fast is None or slow is None or long is None:
            issues.append(IndicatorIssue.EMA_INSUFFICIENT_HISTORY)

        fast = price if fast is None else fast
        slow = price if slow is None else slow
        long = price if long is None else long

        if fast > slow:
            trend = TrendDirection.BULLISH
        elif fast < slow:
            trend = TrendDirection.BEARISH
        else:
            trend = TrendDirection.SIDEWAYS

        return EMAData(fast=fast, slow=slow, long=long, trend=trend)

    def _bollinger(
        self, closes: np.ndarray, price: float, period: int, k: float, issues: list
    ) -> BollingerBandsData:
        if len(closes) < period:
            issues.append(IndicatorIssue.BOLLINGER_INSUFFICIENT_HISTORY)
            level = float(closes[-1]) if len(closes) else price
            return BollingerBandsData(
                upper=level, middle=level, lower=level, position=DEFAULT_BAND_POSITION
            )

        upper, middle, lower, _ = bollinger_bands(closes, period, k)
        upper_val, middle_val, lower_val = float(upper[-1]), float(middle[-1]), float(lower[-1])
        if upper_val - lower_val <= 0:
            issues.append(IndicatorIssue.BOLLINGER_ZERO_WIDTH)

        return BollingerBandsData(
            upper=upper_val,
            middle=middle_val,
            lower=lower_val,
            position=band_position(price, upper_val, lower_val),
        )

    def _stochastic(
        self,
        highs: np.ndarray,
        lows: np.ndarray,
        closes: np.ndarray,
        k_period: int,
        d_period: int,
        issues: list,
    ) -> StochasticData:
        if len(closes) < k_period:
            issues.append(IndicatorIssue.STOCHASTIC_INSUFFICIENT_HISTORY)
            return StochasticData(k=DEFAULT_STOCHASTIC, d=DEFAULT_STOCHASTIC)

        k_arr, _ = stochastic(highs, lows, closes, k_period, d_period)
        window = slice(len(closes) - k_period, len(closes))
        if np.max(highs[window]) == np.min(lows[window]):
            issues.append(IndicatorIssue.STOCHASTIC_ZERO_RANGE)

        k_val = float(k_arr[-1])
        # %D over the last d_period %K values that have a full window
        recent_k = k_arr[-d_period:]
        recent_k = recent_k[~np.isnan(recent_k)]
        d_val = float(np.mean(recent_k)) if len(recent_k) else k_val

        return StochasticData(
            k=min(100.0, max(0.0, k_val)),
            d=min(100.0, max(0.0, d_val)),
        )

    def _adx(
        self,
        highs: np.ndarray,
        lows: np.ndarray,
        closes: np.ndarray,
        period: int,
        issues: list,
    ) -> ADXData:
        adx_arr, plus_di_arr, minus_di_arr = adx(highs, lows, closes, period)
        adx_val = get_last_valid(adx_arr)
        if adx_val is None:
            issues.append(IndicatorIssue.ADX_INSUFFICIENT_HISTORY)
            return ADXData(adx=DEFAULT_ADX)

        return ADXData(
            adx=adx_val,
            plus_di=get_last_valid(plus_di_arr) or 0.0,
            minus_di=get_last_valid(minus_di_arr) or 0.0,
        )

    def _atr(
        self,
        highs: np.ndarray,
        lows: np.ndarray,
        closes: np.ndarray,
        period: int,
        issues: list,
    ) -> float:
        value = get_last_valid(atr(highs, lows, closes, period))
        if value is None:
            issues.append(IndicatorIssue.ATR_INSUFFICIENT_HISTORY)
            return 0.0
        return max(0.0, value)


# Stateless, so one shared instance is enough
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
