"""
CONTRACT 2: Indicator Snapshot

Input: candle sequence for one timeframe
Output: IndicatorSnapshot

Closed, versioned record of the latest value of every indicator.
Recomputed wholesale on each candle batch, never mutated.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


SNAPSHOT_SCHEMA_VERSION = 1


# =============================================================================
# ENUMS
# =============================================================================


class TrendDirection(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    SIDEWAYS = "SIDEWAYS"


class IndicatorIssue(str, Enum):
    """Why an indicator fell back to its documented default."""

    RSI_INSUFFICIENT_HISTORY = "RSI_INSUFFICIENT_HISTORY"
    RSI_ZERO_LOSS = "RSI_ZERO_LOSS"
    MACD_INSUFFICIENT_HISTORY = "MACD_INSUFFICIENT_HISTORY"
    EMA_INSUFFICIENT_HISTORY = "EMA_INSUFFICIENT_HISTORY"
    BOLLINGER_INSUFFICIENT_HISTORY = "BOLLINGER_INSUFFICIENT_HISTORY"
    BOLLINGER_ZERO_WIDTH = "BOLLINGER_ZERO_WIDTH"
    STOCHASTIC_INSUFFICIENT_HISTORY = "STOCHASTIC_INSUFFICIENT_HISTORY"
    STOCHASTIC_ZERO_RANGE = "STOCHASTIC_ZERO_RANGE"
    ADX_INSUFFICIENT_HISTORY = "ADX_INSUFFICIENT_HISTORY"
    ATR_INSUFFICIENT_HISTORY = "ATR_INSUFFICIENT_HISTORY"


# =============================================================================
# COMPONENTS
# =============================================================================


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class MACDData(_Frozen):
    """MACD indicator values."""

    value: float = 0.0
    signal: float = 0.0
    histogram: float = 0.0


class EMAData(_Frozen):
    """EMA stack (12/26/50)."""

    fast: float
    slow: float
    long: float
    trend: TrendDirection = TrendDirection.SIDEWAYS


class BollingerBandsData(_Frozen):
    """Bollinger Bands values."""

    upper: float
    middle: float
    lower: float
    position: float = Field(default=0.5, ge=0, le=1, description="Price position within bands (0-1)")


class StochasticData(_Frozen):
    """Stochastic oscillator values."""

    k: float = Field(default=50.0, ge=0, le=100)
    d: float = Field(default=50.0, ge=0, le=100)


class ADXData(_Frozen):
    """Directional movement values."""

    adx: float = Field(default=25.0, ge=0, le=100)
    plus_di: float = Field(default=0.0, ge=0)
    minus_di: float = Field(default=0.0, ge=0)


# =============================================================================
# OUTPUT: IndicatorSnapshot
# =============================================================================


class IndicatorSnapshot(_Frozen):
    """
    Latest indicator values for one (asset, timeframe) candle sequence.
    Returned by: Indicator Service
    Consumed by: Signal Scorer, diagnostic collaborators
    """

    schema_version: int = SNAPSHOT_SCHEMA_VERSION

    rsi: float = Field(..., ge=0, le=100)
    macd: MACDData
    ema: EMAData
    bollinger: BollingerBandsData
    stochastic: StochasticData
    adx: ADXData
    atr: float = Field(..., ge=0)
    sma_20: float
    sma_50: float

    momentum: float = Field(..., description="% change over the last 10 bars")
    volume_ratio: float = Field(..., ge=0, description="Last volume / 20-bar average")

    close: float
    previous_close: float
    candle_count: int = Field(..., ge=0)

    issues: tuple[IndicatorIssue, ...] = ()
