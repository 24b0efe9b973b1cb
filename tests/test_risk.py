"""Tests for risk level calculation."""

import math

import pytest

from mtf_signals.schemas import Direction, RiskMethod, Timeframe
from mtf_signals.services.risk import (
    TIMEFRAME_RISK_TABLE,
    RiskLevelCalculator,
    get_risk_calculator,
    risk_reward_ratio,
)


@pytest.fixture
def calculator() -> RiskLevelCalculator:
    return RiskLevelCalculator()


def test_long_daily_levels(calculator):
    levels = calculator.calculate(Direction.LONG, 100.0, atr=2.0, timeframe=Timeframe.D1)

    assert levels.stop_loss == pytest.approx(97.0)
    assert levels.take_profit == pytest.approx(107.5)
    assert levels.risk_reward == pytest.approx(2.5)
    assert levels.method == RiskMethod.PERCENT_TABLE


def test_short_daily_levels(calculator):
    levels = calculator.calculate(Direction.SHORT, 100.0, atr=2.0, timeframe=Timeframe.D1)

    assert levels.stop_loss == pytest.approx(103.0)
    assert levels.take_profit == pytest.approx(92.5)
    assert levels.risk_reward == pytest.approx(2.5)


def test_neutral_band_is_symmetric_and_reduced(calculator):
    levels = calculator.calculate(Direction.NEUTRAL, 100.0, atr=2.0, timeframe=Timeframe.D1)

    assert levels.stop_loss == pytest.approx(98.2)
    assert levels.take_profit == pytest.approx(101.8)
    assert levels.risk_reward == pytest.approx(1.0)


def test_accepts_timeframe_labels(calculator):
    by_label = calculator.calculate(Direction.LONG, 100.0, 0.0, "4h")
    by_enum = calculator.calculate(Direction.LONG, 100.0, 0.0, Timeframe.H4)
    assert by_label == by_enum
    assert by_label.take_profit == pytest.approx(103.75)


def test_unknown_timeframe_uses_default_percentages(calculator):
    levels = calculator.calculate(Direction.LONG, 100.0, 0.0, "2h")
    assert levels.stop_loss == pytest.approx(99.2)
    assert levels.take_profit == pytest.approx(101.6)


def test_longer_timeframes_have_wider_stops():
    stops = [TIMEFRAME_RISK_TABLE[tf][0] for tf in Timeframe]
    assert stops == sorted(stops)


def test_atr_dynamic_levels(calculator):
    levels = calculator.calculate(
        Direction.LONG, 100.0, atr=2.0, timeframe=Timeframe.H1, method=RiskMethod.ATR_DYNAMIC
    )
    # 2.0 x 3.0 stop, twice that as target
    assert levels.stop_loss == pytest.approx(94.0)
    assert levels.take_profit == pytest.approx(112.0)
    assert levels.risk_reward == pytest.approx(2.0)
    assert levels.method == RiskMethod.ATR_DYNAMIC


def test_atr_dynamic_short_uses_default_multiplier(calculator):
    levels = calculator.calculate(
        Direction.SHORT, 100.0, atr=2.0, timeframe=Timeframe.W1, method=RiskMethod.ATR_DYNAMIC
    )
    assert levels.stop_loss == pytest.approx(105.0)
    assert levels.take_profit == pytest.approx(90.0)


def test_atr_dynamic_falls_back_without_atr(calculator):
    levels = calculator.calculate(
        Direction.LONG, 100.0, atr=0.0, timeframe=Timeframe.D1, method=RiskMethod.ATR_DYNAMIC
    )
    assert levels.method == RiskMethod.PERCENT_TABLE
    assert levels.stop_loss == pytest.approx(97.0)


def test_risk_reward_never_infinite():
    assert risk_reward_ratio(100.0, 100.0, 101.0) == pytest.approx(10.0)
    assert risk_reward_ratio(0.0, 0.0, 0.0) == 0.0
    assert math.isfinite(risk_reward_ratio(0.0, 0.0, 1.0))


def test_get_risk_calculator_is_shared():
    assert get_risk_calculator() is get_risk_calculator()


def test_atr_dynamic_short_never_targets_below_zero(calculator):
    # 15 x 4.0 stop, 120 target distance from a 100 entry
    levels = calculator.calculate(
        Direction.SHORT, 100.0, atr=15.0, timeframe=Timeframe.D1, method=RiskMethod.ATR_DYNAMIC
    )
    assert levels.method == RiskMethod.PERCENT_TABLE
    assert levels.stop_loss == pytest.approx(103.0)
    assert levels.take_profit == pytest.approx(92.5)
    assert levels.take_profit > 0


def test_atr_dynamic_long_never_stops_below_zero(calculator):
    levels = calculator.calculate(
        Direction.LONG, 10.0, atr=5.0, timeframe=Timeframe.H1, method=RiskMethod.ATR_DYNAMIC
    )
    assert levels.method == RiskMethod.PERCENT_TABLE
    assert levels.stop_loss == pytest.approx(9.92)
    assert levels.take_profit == pytest.approx(10.16)


def test_execute_unpacks_arguments(calculator):
    args = (Direction.LONG, 100.0, 2.0, Timeframe.D1)
    assert calculator.execute(args) == calculator.calculate(*args)
    assert calculator.name == "RiskLevelCalculator"
    assert calculator.health_check() is True
