"""
Signal Scorer

Weighted voting over one IndicatorSnapshot:
    1. each indicator votes bullish/bearish with a fixed weight
    2. strength = |bullish - bearish| / total possible weight
    3. direction needs a clear majority above the confluence threshold
    4. confidence = five independent factors, summed and clamped

Deterministic: the same snapshot and config always give the same result.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from mtf_signals.schemas.indicators import IndicatorSnapshot
from mtf_signals.schemas.signal import Direction, PatternBias, PatternMatch
from mtf_signals.services.levels.patterns import pattern_bias
from mtf_signals.services.scoring.weights import DEFAULT_SCORING, ScoringConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of scoring one snapshot."""

    direction: Direction
    confidence: int
    strength: float = 0.0
    bullish: float = 0.0
    bearish: float = 0.0
    total_weight: float = 0.0


@dataclass
class _Tally:
    bullish: float = 0.0
    bearish: float = 0.0
    total: float = 0.0

    def vote(self, bullish: float = 0.0, bearish: float = 0.0, weight: float = 0.0) -> None:
        self.bullish += bullish
        self.bearish += bearish
        self.total += weight


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values."""
    return int(math.floor(value + 0.5))


class SignalScorer:
    """
    Converts indicator readings into (direction, confidence).

    Usage:
        scorer = SignalScorer(ScoringConfig())
        result = scorer.score(snapshot, current_price)
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or DEFAULT_SCORING

    def score(
        self,
        snapshot: IndicatorSnapshot,
        current_price: float,
        patterns: Sequence[PatternMatch] = (),
    ) -> ScoreResult:
        cfg = self.config

        if snapshot.candle_count < cfg.min_candles:
            logger.debug(
                f"Insufficient history ({snapshot.candle_count} < {cfg.min_candles}), neutral signal"
            )
            return ScoreResult(direction=Direction.NEUTRAL, confidence=cfg.insufficient_confidence)

        tally = _Tally()
        self._vote_rsi(tally, snapshot)
        self._vote_macd(tally, snapshot)
        self._vote_ema(tally, snapshot, current_price)
        self._vote_bollinger(tally, snapshot)
        self._vote_stochastic(tally, snapshot)
        self._vote_volatility(tally, snapshot, current_price)
        self._vote_patterns(tally, patterns)

        strength = abs(tally.bullish - tally.bearish) / tally.total if tally.total > 0 else 0.0

        if tally.bullish > tally.bearish and strength > cfg.confluence_threshold:
            direction = Direction.LONG
        elif tally.bearish > tally.bullish and strength > cfg.confluence_threshold:
            direction = Direction.SHORT
        else:
            direction = Direction.NEUTRAL

        confidence = (
            self.technical_confluence(strength)
            + self.trend_alignment(snapshot, direction)
            + self.momentum_strength(snapshot)
            + self.volume_confirmation(snapshot)
            + self.market_structure(snapshot)
        )
        confidence = min(cfg.confidence_ceiling, max(cfg.confidence_floor, confidence))

        return ScoreResult(
            direction=direction,
            confidence=round_half_up(confidence),
            strength=strength,
            bullish=tally.bullish,
            bearish=tally.bearish,
            total_weight=tally.total,
        )

    # =========================================================================
    # Votes
    # =========================================================================

    def _vote_rsi(self, tally: _Tally, snapshot: IndicatorSnapshot) -> None:
        cfg = self.config
        value = snapshot.rsi
        if value < cfg.rsi_oversold:
            tally.vote(bullish=cfg.rsi_weight, weight=cfg.rsi_weight)
        elif value > cfg.rsi_overbought:
            tally.vote(bearish=cfg.rsi_weight, weight=cfg.rsi_weight)
        elif value < cfg.rsi_mild_low:
            tally.vote(bullish=cfg.rsi_mild_weight, weight=cfg.rsi_weight)
        elif value > cfg.rsi_mild_high:
            tally.vote(bearish=cfg.rsi_mild_weight, weight=cfg.rsi_weight)

    def _vote_macd(self, tally: _Tally, snapshot: IndicatorSnapshot) -> None:
        cfg = self.config
        macd = snapshot.macd
        if macd.histogram > 0 and macd.value > macd.signal:
            tally.vote(bullish=cfg.macd_weight, weight=cfg.macd_weight)
        elif macd.histogram < 0 and macd.value < macd.signal:
            tally.vote(bearish=cfg.macd_weight, weight=cfg.macd_weight)
        elif macd.histogram > 0:
            tally.vote(bullish=cfg.macd_partial_weight, weight=cfg.macd_weight)
        elif macd.histogram < 0:
            tally.vote(bearish=cfg.macd_partial_weight, weight=cfg.macd_weight)

    def _vote_ema(self, tally: _Tally, snapshot: IndicatorSnapshot, price: float) -> None:
        cfg = self.config
        ema = snapshot.ema
        if ema.fast > ema.slow and price > ema.fast:
            tally.vote(bullish=cfg.ema_weight, weight=cfg.ema_weight)
        elif ema.fast < ema.slow and price < ema.fast:
            tally.vote(bearish=cfg.ema_weight, weight=cfg.ema_weight)

    def _vote_bollinger(self, tally: _Tally, snapshot: IndicatorSnapshot) -> None:
        cfg = self.config
        position = snapshot.bollinger.position
        if position < cfg.bollinger_low:
            tally.vote(bullish=cfg.bollinger_weight, weight=cfg.bollinger_weight)
        elif position > cfg.bollinger_high:
            tally.vote(bearish=cfg.bollinger_weight, weight=cfg.bollinger_weight)

    def _vote_stochastic(self, tally: _Tally, snapshot: IndicatorSnapshot) -> None:
        cfg = self.config
        k, d = snapshot.stochastic.k, snapshot.stochastic.d
        if k < cfg.stochastic_oversold and d < cfg.stochastic_oversold:
            tally.vote(bullish=cfg.stochastic_weight, weight=cfg.stochastic_weight)
        elif k > cfg.stochastic_overbought and d > cfg.stochastic_overbought:
            tally.vote(bearish=cfg.stochastic_weight, weight=cfg.stochastic_weight)

    def _vote_volatility(self, tally: _Tally, snapshot: IndicatorSnapshot, price: float) -> None:
        cfg = self.config
        ratio = snapshot.atr / price if price > 0 else 0.0
        if ratio > cfg.atr_high_volatility:
            # High volatility: expect continuation of the last bar
            if price > snapshot.previous_close:
                tally.vote(bullish=cfg.atr_continuation_weight, weight=cfg.atr_weight)
            else:
                tally.vote(bearish=cfg.atr_continuation_weight, weight=cfg.atr_weight)
        elif ratio < cfg.atr_low_volatility:
            # Compression: breakout either way
            tally.vote(
                bullish=cfg.atr_compression_weight,
                bearish=cfg.atr_compression_weight,
                weight=cfg.atr_weight,
            )

    def _vote_patterns(self, tally: _Tally, patterns: Sequence[PatternMatch]) -> None:
        # Never the sole basis for a call
        if not patterns or tally.total <= 0:
            return
        cfg = self.config
        bias = pattern_bias(patterns)
        if bias == PatternBias.BULLISH:
            tally.vote(bullish=cfg.pattern_weight, weight=cfg.pattern_weight)
        elif bias == PatternBias.BEARISH:
            tally.vote(bearish=cfg.pattern_weight, weight=cfg.pattern_weight)
        else:
            tally.vote(weight=cfg.pattern_weight)

    # =========================================================================
    # Confidence factors
    # =========================================================================

    def technical_confluence(self, strength: float) -> float:
        return strength * self.config.confluence_factor

    def trend_alignment(self, snapshot: IndicatorSnapshot, direction: Direction) -> float:
        cfg = self.config
        ema = snapshot.ema
        if (ema.fast > ema.slow and direction == Direction.LONG) or (
            ema.fast < ema.slow and direction == Direction.SHORT
        ):
            return cfg.trend_aligned_bonus
        if direction == Direction.NEUTRAL:
            return cfg.trend_neutral_bonus
        return cfg.trend_opposed_bonus

    def momentum_strength(self, snapshot: IndicatorSnapshot) -> float:
        cfg = self.config
        magnitude = abs(snapshot.momentum)
        if magnitude > cfg.momentum_strong:
            return cfg.momentum_strong_bonus
        if magnitude > cfg.momentum_moderate:
            return cfg.momentum_moderate_bonus
        return cfg.momentum_weak_bonus

    def volume_confirmation(self, snapshot: IndicatorSnapshot) -> float:
        cfg = self.config
        if snapshot.volume_ratio > cfg.volume_strong:
            return cfg.volume_strong_bonus
        if snapshot.volume_ratio > cfg.volume_moderate:
            return cfg.volume_moderate_bonus
        return cfg.volume_weak_bonus

    def market_structure(self, snapshot: IndicatorSnapshot) -> float:
        cfg = self.config
        if snapshot.adx.adx > cfg.adx_trending:
            return cfg.structure_trending_bonus
        return cfg.structure_ranging_bonus
