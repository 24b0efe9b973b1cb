"""
Signal Engine Implementation

Orchestrates the signal pipeline for one asset:
    Indicators → Levels/Patterns → Scorer → Risk Levels   (per timeframe)
    Timeframes → Harmonizer                                (per asset)

This is the main entry point for generating signals. The engine holds no
mutable state of its own; memoization lives in the injected SignalCache.
"""

import logging
import math
import numbers
from datetime import datetime, timezone
from typing import Mapping, Optional, Sequence, Union

from mtf_signals.core.config import Settings, get_settings
from mtf_signals.schemas.market import Candle, Timeframe
from mtf_signals.schemas.signal import RiskMethod, Signal, TimeframeSet
from mtf_signals.services.base import BaseService, ConfigurationError
from mtf_signals.services.cache import SignalCache
from mtf_signals.services.harmonizer import TimeframeHarmonizer
from mtf_signals.services.indicators import IndicatorService, get_indicator_service
from mtf_signals.services.levels import detect_patterns, support_resistance
from mtf_signals.services.risk import RiskLevelCalculator, get_risk_calculator
from mtf_signals.services.scoring import ScoringConfig, SignalScorer

logger = logging.getLogger(__name__)

# Timestamp of a signal computed from no candles at all
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class SignalEngine(BaseService[TimeframeSet, TimeframeSet]):
    """
    Multi-timeframe signal engine.

    Usage:
        engine = SignalEngine(cache=SignalCache(max_entries=200))
        signal = engine.generate_signal(candles, "1h", current_price=101.5)
        signals = engine.analyze("BTC/USDT", {"1h": h1, "4h": h4}, 101.5)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        scoring_config: Optional[ScoringConfig] = None,
        cache: Optional[SignalCache] = None,
        risk_method: RiskMethod = RiskMethod.PERCENT_TABLE,
        indicator_service: Optional[IndicatorService] = None,
        risk_calculator: Optional[RiskLevelCalculator] = None,
    ):
        self.settings = settings or get_settings()
        self.scoring_config = scoring_config or ScoringConfig(
            min_candles=self.settings.min_candles
        )
        self.cache = cache
        self.risk_method = risk_method
        self.indicator_service = indicator_service or get_indicator_service()
        self.risk_calculator = risk_calculator or get_risk_calculator()
        self.scorer = SignalScorer(self.scoring_config)
        self.harmonizer = TimeframeHarmonizer(
            settings=self.settings,
            risk_calculator=self.risk_calculator,
            risk_method=risk_method,
        )

    @property
    def name(self) -> str:
        return "SignalEngine"

    def execute(self, input_data: TimeframeSet) -> TimeframeSet:
        """Harmonize an already computed set of signals."""
        return self.harmonizer.harmonize(input_data)

    # =========================================================================
    # Single timeframe
    # =========================================================================

    def generate_signal(
        self,
        candles: Sequence[Candle],
        timeframe: Union[Timeframe, str],
        current_price: float,
        asset: str = "",
    ) -> Signal:
        """
        Generate one signal from a candle sequence.

        Short or degenerate history never raises: it yields a NEUTRAL,
        low-confidence signal. Invalid wiring (unknown timeframe,
        non-positive price, unordered candles) raises ConfigurationError.
        """
        tf = self._resolve_timeframe(timeframe)
        self._validate_inputs(candles, current_price, tf)
        current_price = float(current_price)

        cache_key = None
        if self.cache is not None:
            cache_key = self.cache.make_key(asset, tf, current_price, candles)
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit for {asset or '-'} {tf.value}")
                return cached

        # Stage 1: Indicators
        snapshot = self.indicator_service.snapshot(candles, current_price)

        # Stage 2: Levels and patterns
        levels = support_resistance(candles, current_price)
        patterns = detect_patterns(candles)

        # Stage 3: Scoring
        score = self.scorer.score(snapshot, current_price, patterns)

        # Stage 4: Risk levels
        risk = self.risk_calculator.calculate(
            score.direction, current_price, snapshot.atr, tf, self.risk_method
        )

        signal = Signal(
            direction=score.direction,
            confidence=score.confidence,
            strength=min(1.0, score.strength),
            entry_price=current_price,
            stop_loss=risk.stop_loss,
            take_profit=risk.take_profit,
            risk_reward=risk.risk_reward,
            timeframe=tf,
            indicators=snapshot,
            levels=levels,
            patterns=patterns,
            timestamp=candles[-1].timestamp if candles else EPOCH,
        )

        logger.info(
            f"{asset or '-'} {tf.value}: {signal.direction.value} "
            f"confidence={signal.confidence} strength={signal.strength:.2f} "
            f"({len(candles)} candles)"
        )

        if self.cache is not None:
            self.cache.put(cache_key, signal)
        return signal

    # =========================================================================
    # All timeframes
    # =========================================================================

    def analyze(
        self,
        asset: str,
        candles_by_timeframe: Mapping[Union[Timeframe, str], Sequence[Candle]],
        current_price: Optional[float] = None,
    ) -> TimeframeSet:
        """
        Generate a signal per supplied timeframe, then harmonize them.

        Without ``current_price`` each timeframe is priced at its own last
        close. Timeframes not supplied are simply absent from the result.
        """
        logger.info(f"Analyzing {asset} on {len(candles_by_timeframe)} timeframes")

        signals: dict[Timeframe, Signal] = {}
        for timeframe, candles in candles_by_timeframe.items():
            tf = self._resolve_timeframe(timeframe)
            price = current_price
            if price is None:
                if not candles:
                    raise ConfigurationError(
                        self.name,
                        f"No price for {tf.value}: no candles and no current price",
                        {"asset": asset, "timeframe": tf.value},
                    )
                price = candles[-1].close
            signals[tf] = self.generate_signal(candles, tf, price, asset)

        raw = TimeframeSet(asset=asset, signals=signals)
        harmonized = self.harmonizer.harmonize(raw)

        missing = harmonized.missing()
        if missing:
            logger.debug(f"{asset}: no signal for {', '.join(tf.value for tf in missing)}")
        return harmonized

    # =========================================================================
    # Input checks
    # =========================================================================

    def _resolve_timeframe(self, timeframe: Union[Timeframe, str]) -> Timeframe:
        try:
            return Timeframe(timeframe)
        except ValueError:
            raise ConfigurationError(
                self.name,
                f"Unknown timeframe: {timeframe!r}",
                {"allowed": [tf.value for tf in Timeframe]},
            )

    def _validate_inputs(
        self, candles: Sequence[Candle], current_price: float, timeframe: Timeframe
    ) -> None:
        if (
            not isinstance(current_price, numbers.Real)
            or not math.isfinite(current_price)
            or current_price <= 0
        ):
            raise ConfigurationError(
                self.name,
                f"Current price must be a positive number, got {current_price!r}",
                {"timeframe": timeframe.value},
            )
        for prev, curr in zip(candles, candles[1:]):
            if curr.timestamp < prev.timestamp:
                raise ConfigurationError(
                    self.name,
                    "Candles must be in ascending time order",
                    {"timeframe": timeframe.value, "at": curr.timestamp.isoformat()},
                )


_engine_instance: Optional[SignalEngine] = None


def get_signal_engine() -> SignalEngine:
    """Get or create the default engine instance (no cache)."""
    global _engine_instance
    if _engine_instance is None:
        _engine_instance = SignalEngine()
    return _engine_instance
