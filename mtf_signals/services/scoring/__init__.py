"""
Signal Scorer

CONTRACT:
    Input:  IndicatorSnapshot + current price (+ pattern hints)
    Output: ScoreResult (direction, confidence, strength)

All weights and thresholds come from ScoringConfig.
"""

from mtf_signals.services.scoring.weights import DEFAULT_SCORING, ScoringConfig
from mtf_signals.services.scoring.scorer import ScoreResult, SignalScorer, round_half_up

__all__ = [
    "DEFAULT_SCORING",
    "ScoringConfig",
    "ScoreResult",
    "SignalScorer",
    "round_half_up",
]
