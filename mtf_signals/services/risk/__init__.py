"""
Risk Level Calculator

CONTRACT:
    Input:  direction, entry price, ATR, timeframe
    Output: RiskLevels (stop_loss, take_profit, risk_reward)
"""

from mtf_signals.services.risk.service import (
    ATR_MULTIPLIERS,
    DEFAULT_RISK_PERCENTS,
    TIMEFRAME_RISK_TABLE,
    RiskLevelCalculator,
    get_risk_calculator,
    risk_reward_ratio,
)

__all__ = [
    "ATR_MULTIPLIERS",
    "DEFAULT_RISK_PERCENTS",
    "TIMEFRAME_RISK_TABLE",
    "RiskLevelCalculator",
    "get_risk_calculator",
    "risk_reward_ratio",
]
