"""
CONTRACT 3: Signals

Output: Signal per timeframe, collected into a TimeframeSet

Signals are immutable. Recomputation and harmonization produce new
instances; nothing is patched in place.
"""

from datetime import datetime
from enum import Enum
from typing import Iterator, Optional
from pydantic import BaseModel, ConfigDict, Field

from mtf_signals.schemas.indicators import IndicatorSnapshot
from mtf_signals.schemas.market import TIMEFRAME_ORDER, Timeframe


# =============================================================================
# ENUMS
# =============================================================================


class Direction(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"
    NEUTRAL = "NEUTRAL"


class PatternBias(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class PatternKind(str, Enum):
    CANDLESTICK = "candlestick"
    CHART = "chart"


class RiskMethod(str, Enum):
    PERCENT_TABLE = "PERCENT_TABLE"
    ATR_DYNAMIC = "ATR_DYNAMIC"


# =============================================================================
# COMPONENTS
# =============================================================================


class PatternMatch(BaseModel):
    """Heuristic pattern hint. Not statistically validated."""

    model_config = ConfigDict(frozen=True)

    name: str
    bias: PatternBias
    kind: PatternKind


class PivotPoints(BaseModel):
    """Pivot point levels."""

    model_config = ConfigDict(frozen=True)

    pivot: float
    r1: float
    r2: float
    r3: float
    s1: float
    s2: float
    s3: float
    type: str = Field(default="standard", description="standard/fibonacci/camarilla")


class LevelSet(BaseModel):
    """Support/resistance levels around the current price."""

    model_config = ConfigDict(frozen=True)

    supports: list[float] = Field(..., description="Support levels (nearest first)")
    resistances: list[float] = Field(..., description="Resistance levels (nearest first)")
    pivot_points: Optional[PivotPoints] = None


class RiskLevels(BaseModel):
    """Stop-loss / take-profit pair for one entry."""

    model_config = ConfigDict(frozen=True)

    stop_loss: float
    take_profit: float
    risk_reward: float = Field(..., ge=0)
    method: RiskMethod = RiskMethod.PERCENT_TABLE


# =============================================================================
# OUTPUT: Signal
# =============================================================================


class Signal(BaseModel):
    """
    Directional call for one (asset, timeframe, price).
    Returned by: Signal Engine
    Consumed by: Timeframe Harmonizer, display/storage collaborators
    """

    model_config = ConfigDict(frozen=True)

    direction: Direction
    confidence: int = Field(..., ge=0, le=100)
    strength: float = Field(default=0.0, ge=0, le=1, description="Indicator confluence (0-1)")

    entry_price: float
    stop_loss: float
    take_profit: float
    risk_reward: float = Field(..., ge=0)

    timeframe: Timeframe
    indicators: IndicatorSnapshot
    levels: Optional[LevelSet] = None
    patterns: list[PatternMatch] = Field(default_factory=list)

    timestamp: datetime


class TimeframeSet(BaseModel):
    """
    At most one Signal per timeframe for one asset.
    May have gaps; consumers must not assume full coverage.
    """

    model_config = ConfigDict(frozen=True)

    asset: str
    signals: dict[Timeframe, Signal] = Field(default_factory=dict)

    def get(self, timeframe: Timeframe) -> Optional[Signal]:
        return self.signals.get(timeframe)

    def missing(self) -> list[Timeframe]:
        """Timeframes of the hierarchy without a signal."""
        return [tf for tf in TIMEFRAME_ORDER if tf not in self.signals]

    def __iter__(self) -> Iterator[Signal]:
        # Shortest -> longest, regardless of insertion order
        for tf in TIMEFRAME_ORDER:
            if tf in self.signals:
                yield self.signals[tf]

    def __len__(self) -> int:
        return len(self.signals)

    def __contains__(self, timeframe: object) -> bool:
        return timeframe in self.signals
