# tests/conftest.py
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

import pytest

from mtf_signals.core.config import Settings
from mtf_signals.schemas import (
    ADXData,
    BollingerBandsData,
    Candle,
    Direction,
    EMAData,
    IndicatorSnapshot,
    MACDData,
    Signal,
    StochasticData,
    Timeframe,
)

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_candles(
    closes: Sequence[float],
    spread: float = 0.0,
    volume: float = 1000.0,
    start: datetime = START,
    step: timedelta = timedelta(hours=1),
) -> list[Candle]:
    """Candles that open at the previous close, with ``spread`` beyond the body."""
    candles = []
    prev = closes[0]
    for i, close in enumerate(closes):
        candles.append(
            Candle(
                timestamp=start + i * step,
                open=prev,
                high=max(prev, close) + spread,
                low=min(prev, close) - spread,
                close=close,
                volume=volume,
            )
        )
        prev = close
    return candles


def make_bars(
    highs: Sequence[float], lows: Sequence[float], start: datetime = START
) -> list[Candle]:
    """Candles from explicit highs/lows, open and close at the midpoint."""
    candles = []
    for i, (high, low) in enumerate(zip(highs, lows)):
        mid = (high + low) / 2
        candles.append(
            Candle(
                timestamp=start + timedelta(hours=i),
                open=mid,
                high=high,
                low=low,
                close=mid,
                volume=1000.0,
            )
        )
    return candles


def make_snapshot(**overrides) -> IndicatorSnapshot:
    """Snapshot with no indicator votes unless overridden."""
    values = dict(
        rsi=50.0,
        macd=MACDData(),
        ema=EMAData(fast=100.0, slow=100.0, long=100.0),
        bollinger=BollingerBandsData(upper=104.0, middle=100.0, lower=96.0, position=0.5),
        stochastic=StochasticData(),
        adx=ADXData(adx=20.0),
        atr=2.0,
        sma_20=100.0,
        sma_50=100.0,
        momentum=0.0,
        volume_ratio=1.0,
        close=100.0,
        previous_close=100.0,
        candle_count=60,
    )
    values.update(overrides)
    return IndicatorSnapshot(**values)


def make_signal(
    timeframe: Timeframe,
    direction: Direction,
    confidence: int,
    entry: float = 100.0,
    atr: float = 2.0,
) -> Signal:
    if direction == Direction.SHORT:
        stop_loss, take_profit = entry * 1.01, entry * 0.98
    else:
        stop_loss, take_profit = entry * 0.99, entry * 1.02
    return Signal(
        direction=direction,
        confidence=confidence,
        strength=0.5,
        entry_price=entry,
        stop_loss=stop_loss,
        take_profit=take_profit,
        risk_reward=2.0,
        timeframe=timeframe,
        indicators=make_snapshot(atr=atr),
        timestamp=START,
    )


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def flat_candles() -> list[Candle]:
    """60 identical bars at 100 with no range."""
    return make_candles([100.0] * 60)


@pytest.fixture
def zigzag_candles() -> list[Candle]:
    """60 bars of a triangle wave between 100 and 110 (period 20)."""
    values = []
    for i in range(60):
        phase = i % 20
        values.append(100.0 + (phase if phase <= 10 else 20 - phase))
    return make_bars([v + 0.5 for v in values], [v - 0.5 for v in values])


@pytest.fixture
def long_snapshot() -> IndicatorSnapshot:
    """Mild RSI, full MACD and EMA stack votes for LONG at price 106."""
    return make_snapshot(
        rsi=35.0,
        macd=MACDData(value=1.2, signal=0.8, histogram=0.4),
        ema=EMAData(fast=105.0, slow=100.0, long=95.0),
        adx=ADXData(adx=30.0, plus_di=25.0, minus_di=10.0),
        momentum=1.5,
        volume_ratio=1.2,
        close=106.0,
        previous_close=105.0,
    )
