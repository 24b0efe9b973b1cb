"""
Scoring Weight Table

Every weight and threshold used by the signal scorer lives here, in one
named table passed into the scorer. Values are the canonical, empirically
tuned set and must not be inlined elsewhere.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ScoringConfig(BaseModel):
    """
    Canonical weight table for the weighted-voting scorer.

    Each vote adds its weight to the bullish or bearish side and its full
    weight to the total possible weight.
    """

    model_config = ConfigDict(frozen=True)

    # Insufficient-history guard
    min_candles: int = Field(default=50, ge=1)
    insufficient_confidence: int = Field(default=30, ge=0, le=100)

    # Direction
    confluence_threshold: float = Field(default=0.65, ge=0, le=1)

    # RSI
    rsi_weight: float = 7
    rsi_mild_weight: float = 3
    rsi_oversold: float = 28
    rsi_overbought: float = 72
    rsi_mild_low: float = 40
    rsi_mild_high: float = 60

    # MACD
    macd_weight: float = 13
    macd_partial_weight: float = 6

    # EMA stack
    ema_weight: float = 15

    # Bollinger Bands
    bollinger_weight: float = 9
    bollinger_low: float = 0.15
    bollinger_high: float = 0.85

    # Stochastic
    stochastic_weight: float = 5
    stochastic_oversold: float = 20
    stochastic_overbought: float = 80

    # ATR volatility
    atr_weight: float = 12
    atr_continuation_weight: float = 8
    atr_compression_weight: float = 4
    atr_high_volatility: float = 0.03
    atr_low_volatility: float = 0.01

    # Patterns (only counted alongside other votes)
    pattern_weight: float = 2

    # Confidence factors
    confluence_factor: float = 40
    trend_aligned_bonus: float = 30
    trend_neutral_bonus: float = 15
    trend_opposed_bonus: float = 5
    momentum_strong: float = 2.0
    momentum_moderate: float = 1.0
    momentum_strong_bonus: float = 15
    momentum_moderate_bonus: float = 10
    momentum_weak_bonus: float = 5
    volume_strong: float = 1.3
    volume_moderate: float = 1.1
    volume_strong_bonus: float = 10
    volume_moderate_bonus: float = 7
    volume_weak_bonus: float = 3
    adx_trending: float = 25
    structure_trending_bonus: float = 5
    structure_ranging_bonus: float = 2

    confidence_floor: float = Field(default=35, ge=0, le=100)
    confidence_ceiling: float = Field(default=95, ge=0, le=100)

    @model_validator(mode="after")
    def _check_bounds(self) -> "ScoringConfig":
        if self.confidence_floor > self.confidence_ceiling:
            raise ValueError("confidence_floor must not exceed confidence_ceiling")
        if self.rsi_oversold >= self.rsi_overbought:
            raise ValueError("rsi_oversold must be below rsi_overbought")
        if self.bollinger_low >= self.bollinger_high:
            raise ValueError("bollinger_low must be below bollinger_high")
        return self


DEFAULT_SCORING = ScoringConfig()
