"""
Risk Level Calculator

Stop-loss / take-profit levels for one entry, scaled by timeframe.

Methods:
    PERCENT_TABLE: fixed percentages per timeframe (default)
    ATR_DYNAMIC:   ATR x timeframe multiplier, reward at 2x the risk
"""

import logging
import math
from typing import Optional, Union

from mtf_signals.schemas.market import Timeframe
from mtf_signals.schemas.signal import Direction, RiskLevels, RiskMethod
from mtf_signals.services.base import BaseService

logger = logging.getLogger(__name__)

# (stop-loss %, take-profit %) per timeframe
TIMEFRAME_RISK_TABLE: dict[Timeframe, tuple[float, float]] = {
    Timeframe.M1: (0.15, 0.30),
    Timeframe.M5: (0.25, 0.50),
    Timeframe.M15: (0.40, 0.80),
    Timeframe.M30: (0.60, 1.20),
    Timeframe.H1: (0.80, 1.60),
    Timeframe.H4: (1.50, 3.75),
    Timeframe.D1: (3.00, 7.50),
    Timeframe.D3: (4.50, 13.50),
    Timeframe.W1: (6.00, 18.00),
    Timeframe.MN1: (8.00, 24.00),
}
DEFAULT_RISK_PERCENTS = (0.80, 1.60)

# Neutral signals get a symmetric, reduced band
NEUTRAL_BAND_FACTOR = 0.6

ATR_MULTIPLIERS: dict[Timeframe, float] = {
    Timeframe.M1: 1.5,
    Timeframe.M5: 2.0,
    Timeframe.M15: 2.5,
    Timeframe.H1: 3.0,
    Timeframe.H4: 3.5,
    Timeframe.D1: 4.0,
}
DEFAULT_ATR_MULTIPLIER = 2.5
ATR_REWARD_MULTIPLE = 2.0

# Floor for the risk distance, relative to entry
MIN_RISK_FRACTION = 0.001


def _risk_percents(timeframe: Union[Timeframe, str]) -> tuple[float, float]:
    try:
        return TIMEFRAME_RISK_TABLE[Timeframe(timeframe)]
    except ValueError:
        logger.warning(f"No risk profile for timeframe {timeframe!r}, using defaults")
        return DEFAULT_RISK_PERCENTS


def _atr_multiplier(timeframe: Union[Timeframe, str]) -> float:
    try:
        return ATR_MULTIPLIERS.get(Timeframe(timeframe), DEFAULT_ATR_MULTIPLIER)
    except ValueError:
        return DEFAULT_ATR_MULTIPLIER


def risk_reward_ratio(entry: float, stop_loss: float, take_profit: float) -> float:
    """
    Reward distance over risk distance.

    A zero risk distance is replaced by a small floor so the ratio stays
    finite.
    """
    risk = abs(entry - stop_loss)
    if risk <= 0 or not math.isfinite(risk):
        risk = max(abs(entry) * MIN_RISK_FRACTION, 1e-9)
    reward = abs(take_profit - entry)
    ratio = reward / risk
    return ratio if math.isfinite(ratio) else 0.0


class RiskLevelCalculator(BaseService[tuple, RiskLevels]):
    """
    Computes stop-loss, take-profit and risk/reward for a direction.

    Stateless. Usage:
        calc = RiskLevelCalculator()
        levels = calc.calculate(Direction.LONG, 100.0, atr=2.1, timeframe=Timeframe.D1)
    """

    @property
    def name(self) -> str:
        return "RiskLevelCalculator"

    def execute(self, input_data: tuple) -> RiskLevels:
        return self.calculate(*input_data)

    def calculate(
        self,
        direction: Direction,
        entry_price: float,
        atr: float,
        timeframe: Union[Timeframe, str],
        method: RiskMethod = RiskMethod.PERCENT_TABLE,
    ) -> RiskLevels:
        levels = None
        if method == RiskMethod.ATR_DYNAMIC:
            if math.isfinite(atr) and atr > 0:
                levels = self._atr_levels(direction, entry_price, atr, timeframe)
                # Distances wider than the entry itself would price a level at or below zero
                if min(levels) <= 0:
                    logger.debug(
                        f"ATR {atr} too wide for entry {entry_price} on {timeframe}, "
                        f"using percent table"
                    )
                    levels = None
            else:
                logger.debug(f"ATR {atr} unusable on {timeframe}, using percent table")

        if levels is None:
            method = RiskMethod.PERCENT_TABLE
            levels = self._percent_levels(direction, entry_price, timeframe)
        stop_loss, take_profit = levels

        return RiskLevels(
            stop_loss=stop_loss,
            take_profit=take_profit,
            risk_reward=risk_reward_ratio(entry_price, stop_loss, take_profit),
            method=method,
        )

    def _percent_levels(
        self, direction: Direction, entry: float, timeframe: Union[Timeframe, str]
    ) -> tuple[float, float]:
        sl_pct, tp_pct = _risk_percents(timeframe)
        sl, tp = sl_pct / 100, tp_pct / 100

        if direction == Direction.LONG:
            return entry * (1 - sl), entry * (1 + tp)
        if direction == Direction.SHORT:
            return entry * (1 + sl), entry * (1 - tp)

        band = sl * NEUTRAL_BAND_FACTOR
        return entry * (1 - band), entry * (1 + band)

    def _atr_levels(
        self,
        direction: Direction,
        entry: float,
        atr: float,
        timeframe: Union[Timeframe, str],
    ) -> tuple[float, float]:
        stop_distance = atr * _atr_multiplier(timeframe)
        target_distance = stop_distance * ATR_REWARD_MULTIPLE

        if direction == Direction.LONG:
            return entry - stop_distance, entry + target_distance
        if direction == Direction.SHORT:
            return entry + stop_distance, entry - target_distance

        band = stop_distance * NEUTRAL_BAND_FACTOR
        return entry - band, entry + band


_calculator_instance: Optional[RiskLevelCalculator] = None


def get_risk_calculator() -> RiskLevelCalculator:
    """Get or create risk calculator instance."""
    global _calculator_instance
    if _calculator_instance is None:
        _calculator_instance = RiskLevelCalculator()
    return _calculator_instance
