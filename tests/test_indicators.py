"""Tests for the indicator library."""

import numpy as np
import pytest

from mtf_signals.schemas import IndicatorIssue, TrendDirection
from mtf_signals.services.indicators import (
    DEFAULT_ADX,
    DEFAULT_RSI,
    IndicatorService,
    get_indicator_service,
)
from mtf_signals.services.indicators.calculations import (
    ema,
    macd,
    momentum,
    rsi,
    volume_ratio,
)

from conftest import make_bars, make_candles


@pytest.fixture
def service() -> IndicatorService:
    return IndicatorService()


def test_ema_is_seeded_with_sma():
    result = ema(np.array([1.0, 2.0, 3.0, 4.0, 5.0]), 3)
    assert np.isnan(result[0]) and np.isnan(result[1])
    assert result[2:] == pytest.approx([2.0, 3.0, 4.0])


def test_ema_undefined_below_period(service):
    assert service.ema([1.0, 2.0, 3.0, 4.0], 5) is None
    assert np.isnan(ema(np.array([1.0, 2.0]), 3)).all()


def test_rsi_defaults_to_50_with_short_history(service):
    candles = make_candles([100.0 + i for i in range(14)])
    assert service.rsi(candles) == DEFAULT_RSI


def test_rsi_is_100_without_losses_and_0_without_gains(service):
    up = make_candles([100.0 + i for i in range(30)])
    down = make_candles([200.0 - i for i in range(30)])
    assert service.rsi(up) == 100.0
    assert service.rsi(down) == pytest.approx(0.0)


def test_rsi_uses_wilder_smoothing():
    # 14 alternating changes of +1/-1 seed gain=loss=0.5, then one +2 change
    closes = [100.0]
    for i in range(14):
        closes.append(closes[-1] + (1.0 if i % 2 == 0 else -1.0))
    closes.append(closes[-1] + 2.0)

    avg_gain = (0.5 * 13 + 2.0) / 14
    avg_loss = (0.5 * 13) / 14
    expected = 100 - 100 / (1 + avg_gain / avg_loss)

    assert rsi(np.array(closes), 14)[-1] == pytest.approx(expected)


def test_rsi_stays_in_range(service, zigzag_candles):
    assert 0.0 <= service.rsi(zigzag_candles) <= 100.0


def test_macd_zero_with_fewer_than_26_candles(service):
    result = service.macd(make_candles([100.0 + i for i in range(25)]))
    assert (result.value, result.signal, result.histogram) == (0.0, 0.0, 0.0)


def test_macd_signal_zero_until_nine_macd_values(service):
    # 30 candles give 5 MACD values
    result = service.macd(make_candles([100.0 + i for i in range(30)]))
    assert result.value > 0
    assert result.signal == 0.0
    assert result.histogram == pytest.approx(result.value)


def test_macd_signal_line_defined_over_macd_series():
    closes = np.array([100.0 + np.sin(i / 3) * 5 for i in range(60)])
    line, signal, hist = macd(closes)
    assert np.isnan(signal[:33]).all()
    assert not np.isnan(signal[33:]).any()
    assert hist[-1] == pytest.approx(line[-1] - signal[-1])


def test_bollinger_population_std(service):
    closes = [float(i) for i in range(1, 21)]
    bands = service.bollinger(make_candles(closes), price=10.5)

    std = np.std(closes)
    assert bands.middle == pytest.approx(10.5)
    assert bands.upper == pytest.approx(10.5 + 2 * std)
    assert bands.lower == pytest.approx(10.5 - 2 * std)
    assert bands.position == pytest.approx(0.5)


def test_bollinger_position_is_clamped(service):
    # Bands around 109.5 +- 11.5, well clear of both prices
    closes = [100.0 + i for i in range(20)]
    assert service.bollinger(make_candles(closes), price=1000.0).position == 1.0
    assert service.bollinger(make_candles(closes), price=50.0).position == 0.0


def test_bollinger_short_history_collapses_to_last_close(service):
    bands = service.bollinger(make_candles([100.0, 101.0, 102.0]))
    assert bands.upper == bands.middle == bands.lower == 102.0
    assert bands.position == 0.5


def test_stochastic_defaults_and_zero_range(service, flat_candles):
    short = service.stochastic(make_candles([100.0] * 10))
    assert (short.k, short.d) == (50.0, 50.0)

    flat = service.stochastic(flat_candles)
    assert (flat.k, flat.d) == (50.0, 50.0)


def test_stochastic_close_at_window_high(service):
    candles = make_candles([100.0 + i for i in range(20)])
    result = service.stochastic(candles)
    assert result.k == pytest.approx(100.0)
    assert result.d == pytest.approx(100.0)


def test_atr_is_mean_true_range(service):
    candles = make_bars([102.0] * 15, [100.0] * 15)
    assert service.atr(candles[:14]) == 0.0
    assert service.atr(candles) == pytest.approx(2.0)


def test_atr_includes_gaps_from_previous_close(service):
    # Every bar gaps 3 above the previous close, range 1
    highs = [101.0 + 3 * i for i in range(15)]
    lows = [100.0 + 3 * i for i in range(15)]
    candles = make_bars(highs, lows)
    # prev close = mid of previous bar = low + 0.5 - 3; high - prev close = 3.5
    assert service.atr(candles) == pytest.approx(3.5)


def test_adx_default_and_pure_uptrend(service):
    assert service.adx(make_candles([100.0] * 10)).adx == DEFAULT_ADX

    highs = [102.0 + i for i in range(30)]
    lows = [100.0 + i for i in range(30)]
    result = service.adx(make_bars(highs, lows))
    assert result.adx == pytest.approx(100.0)
    assert result.plus_di > 0
    assert result.minus_di == 0.0


def test_adx_zero_for_flat_market(service, flat_candles):
    assert service.adx(flat_candles).adx == 0.0


def test_momentum_and_volume_ratio():
    closes = np.array([100.0] * 20)
    assert momentum(closes, 105.0, 10) == pytest.approx(5.0)
    assert momentum(closes[:5], 105.0, 10) == 0.0

    assert volume_ratio(np.array([])) == 1.0
    # zeros count as 1
    assert volume_ratio(np.array([0.0, 0.0, 0.0, 4.0])) == pytest.approx(4.0 / 1.75)


def test_snapshot_of_empty_sequence_uses_defaults(service):
    snapshot = service.snapshot([], 123.0)

    assert snapshot.candle_count == 0
    assert snapshot.rsi == DEFAULT_RSI
    assert snapshot.adx.adx == DEFAULT_ADX
    assert snapshot.atr == 0.0
    assert snapshot.ema.fast == snapshot.ema.slow == snapshot.ema.long == 123.0
    assert snapshot.close == snapshot.previous_close == 123.0
    assert snapshot.momentum == 0.0
    assert snapshot.volume_ratio == 1.0
    assert IndicatorIssue.RSI_INSUFFICIENT_HISTORY in snapshot.issues
    assert IndicatorIssue.ATR_INSUFFICIENT_HISTORY in snapshot.issues


def test_snapshot_of_flat_market_records_degenerate_inputs(service, flat_candles):
    snapshot = service.snapshot(flat_candles, 100.0)

    assert snapshot.rsi == 100.0
    assert snapshot.bollinger.position == 0.5
    assert snapshot.ema.trend == TrendDirection.SIDEWAYS
    assert snapshot.sma_20 == snapshot.sma_50 == 100.0
    assert IndicatorIssue.RSI_ZERO_LOSS in snapshot.issues
    assert IndicatorIssue.BOLLINGER_ZERO_WIDTH in snapshot.issues
    assert IndicatorIssue.STOCHASTIC_ZERO_RANGE in snapshot.issues


def test_snapshot_uptrend(service):
    candles = make_candles([100.0 + i for i in range(60)], spread=0.5)
    snapshot = service.snapshot(candles, 159.0)

    assert snapshot.candle_count == 60
    assert snapshot.ema.trend == TrendDirection.BULLISH
    assert snapshot.ema.fast > snapshot.ema.slow > snapshot.ema.long
    assert snapshot.macd.value > 0
    assert snapshot.previous_close == 158.0
    assert snapshot.issues == (IndicatorIssue.RSI_ZERO_LOSS,)


def test_execute_prices_at_last_close(service, zigzag_candles):
    assert service.execute(zigzag_candles) == service.snapshot(zigzag_candles, 101.0)


def test_get_indicator_service_is_shared():
    assert get_indicator_service() is get_indicator_service()
