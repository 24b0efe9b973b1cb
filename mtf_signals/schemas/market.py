"""
CONTRACT 1: Market Data

Input supplied by an external market-data provider: ascending-time OHLCV
candles per timeframe. Candles are immutable once handed to the engine.
"""

from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class Timeframe(str, Enum):
    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    M30 = "30m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"
    D3 = "3d"
    W1 = "1w"
    MN1 = "1M"

    @property
    def rank(self) -> int:
        """Position in the hierarchy, 0 being the shortest timeframe."""
        return TIMEFRAME_ORDER.index(self)


# Shortest -> longest
TIMEFRAME_ORDER: tuple[Timeframe, ...] = (
    Timeframe.M1,
    Timeframe.M5,
    Timeframe.M15,
    Timeframe.M30,
    Timeframe.H1,
    Timeframe.H4,
    Timeframe.D1,
    Timeframe.D3,
    Timeframe.W1,
    Timeframe.MN1,
)


def harmonization_order() -> tuple[Timeframe, ...]:
    """Timeframes from longest to shortest."""
    return tuple(reversed(TIMEFRAME_ORDER))


# =============================================================================
# CANDLE
# =============================================================================


class Candle(BaseModel):
    """Single OHLCV candlestick."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> "Candle":
        if self.high < max(self.open, self.close, self.low):
            raise ValueError(
                f"high {self.high} below max(open, close, low) at {self.timestamp}"
            )
        if self.low > min(self.open, self.close, self.high):
            raise ValueError(
                f"low {self.low} above min(open, close, high) at {self.timestamp}"
            )
        return self

    @property
    def body(self) -> float:
        return abs(self.close - self.open)

    @property
    def range(self) -> float:
        return self.high - self.low

    @property
    def upper_wick(self) -> float:
        return self.high - max(self.open, self.close)

    @property
    def lower_wick(self) -> float:
        return min(self.open, self.close) - self.low

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open
