"""
Timeframe Harmonizer

Cascades trend bias from longer timeframes down to shorter ones.

Walks the hierarchy longest -> shortest. A confident higher timeframe
pulls the confidence of every lower timeframe toward its own, more
strongly the further apart they are. Far enough apart, the lower
timeframe also adopts the higher direction. Lower timeframes never
alter higher ones.
"""

import logging
from typing import Optional

from mtf_signals.core.config import Settings, get_settings
from mtf_signals.schemas.market import Timeframe, harmonization_order
from mtf_signals.schemas.signal import Direction, RiskMethod, Signal, TimeframeSet
from mtf_signals.services.base import BaseService
from mtf_signals.services.risk.service import RiskLevelCalculator, get_risk_calculator
from mtf_signals.services.scoring.scorer import round_half_up

logger = logging.getLogger(__name__)


class TimeframeHarmonizer(BaseService[TimeframeSet, TimeframeSet]):
    """
    Harmonizes a TimeframeSet.

    Deterministic: the same input set always gives the same output set.
    The input set is left untouched; adjusted signals are copies.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        risk_calculator: Optional[RiskLevelCalculator] = None,
        risk_method: RiskMethod = RiskMethod.PERCENT_TABLE,
    ):
        self.settings = settings or get_settings()
        self.risk_calculator = risk_calculator or get_risk_calculator()
        self.risk_method = risk_method

    @property
    def name(self) -> str:
        return "TimeframeHarmonizer"

    def execute(self, input_data: TimeframeSet) -> TimeframeSet:
        return self.harmonize(input_data)

    def influence(self, distance: int) -> float:
        """Influence of a higher timeframe ``distance`` steps above a lower one."""
        return min(self.settings.max_influence, distance * self.settings.influence_step)

    def harmonize(self, timeframe_set: TimeframeSet) -> TimeframeSet:
        order = harmonization_order()
        current: dict[Timeframe, Signal] = dict(timeframe_set.signals)

        for i, higher_tf in enumerate(order):
            higher = current.get(higher_tf)
            if higher is None:
                continue
            if higher.confidence <= self.settings.harmonizer_confidence_threshold:
                continue

            for j in range(i + 1, len(order)):
                lower_tf = order[j]
                lower = current.get(lower_tf)
                if lower is None:
                    continue
                current[lower_tf] = self._blend(higher, lower, self.influence(j - i))

        return TimeframeSet(asset=timeframe_set.asset, signals=current)

    def _blend(self, higher: Signal, lower: Signal, influence: float) -> Signal:
        confidence = round_half_up(
            (1 - influence) * lower.confidence + influence * higher.confidence
        )
        update: dict = {"confidence": min(100, max(0, confidence))}

        if (
            influence > self.settings.direction_propagation_threshold
            and higher.direction != Direction.NEUTRAL
            and lower.direction != higher.direction
        ):
            logger.debug(
                f"{lower.timeframe.value} adopts {higher.direction.value} "
                f"from {higher.timeframe.value} (influence {influence:.2f})"
            )
            levels = self.risk_calculator.calculate(
                higher.direction,
                lower.entry_price,
                lower.indicators.atr,
                lower.timeframe,
                self.risk_method,
            )
            update.update(
                direction=higher.direction,
                stop_loss=levels.stop_loss,
                take_profit=levels.take_profit,
                risk_reward=levels.risk_reward,
            )

        return lower.model_copy(update=update)
