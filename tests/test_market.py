"""Tests for trend readings and market context."""

import pytest

from scalp_advisor.market import benchmark_daily_trend, build_market_context, trend_reading
from scalp_advisor.models import Candle, SentimentReading, Trend


def _daily(closes: list[float]) -> list[Candle]:
    return [
        Candle(
            timestamp=1_700_000_000_000 + i * 86_400_000,
            open=c,
            high=c * 1.01,
            low=c * 0.99,
            close=c,
            volume=1.0,
        )
        for i, c in enumerate(closes)
    ]


class TestTrendReading:
    """Tests for the close-vs-EMA trend reading."""

    def test_rising(self):
        reading = trend_reading(_daily([100.0 + i for i in range(20)]), period=15)

        assert reading.direction == Trend.UP
        assert reading.close == pytest.approx(119.0)
        assert reading.ema < reading.close

    def test_falling(self):
        reading = trend_reading(_daily([100.0 - i for i in range(20)]), period=15)
        assert reading.direction == Trend.DOWN

    def test_constant_is_flat(self):
        reading = trend_reading(_daily([100.0] * 20), period=15)
        assert reading.direction == Trend.FLAT

    def test_short_history_is_flat_without_ema(self):
        reading = trend_reading(_daily([100.0, 101.0]), period=15)

        assert reading.direction == Trend.FLAT
        assert reading.close == pytest.approx(101.0)
        assert reading.ema is None

    def test_empty(self):
        reading = trend_reading([])
        assert reading.direction == Trend.FLAT
        assert reading.close is None

    def test_current_price_overrides_last_close(self):
        """The last 15m close sits below the EMA while the current price is above it."""
        candles = _daily([100.0] * 19 + [99.0])

        assert trend_reading(candles, period=15).direction == Trend.DOWN

        reading = trend_reading(candles, period=15, price=105.0)
        assert reading.direction == Trend.UP
        assert reading.close == pytest.approx(105.0)
        assert reading.ema < 100.0


class TestBenchmarkDailyTrend:
    """Tests for the benchmark daily trend against its EMA."""

    def test_up(self):
        trend, ema_value, close = benchmark_daily_trend(_daily([100.0 + i for i in range(60)]))

        assert trend == Trend.UP
        assert close == pytest.approx(159.0)
        assert ema_value < close

    def test_down(self):
        trend, _, _ = benchmark_daily_trend(_daily([200.0 - i for i in range(60)]))
        assert trend == Trend.DOWN

    def test_equal_close_is_down(self):
        trend, _, _ = benchmark_daily_trend(_daily([100.0] * 50))
        assert trend == Trend.DOWN

    @pytest.mark.parametrize("n", [0, 1, 49])
    def test_insufficient_history_is_absent(self, n):
        assert benchmark_daily_trend(_daily([100.0] * n)) == (None, None, None)

    def test_custom_period(self):
        trend, _, _ = benchmark_daily_trend(_daily([1.0, 2.0, 3.0]), period=3)
        assert trend == Trend.UP


class TestBuildMarketContext:
    """Tests for MarketContext assembly."""

    def test_all_absent(self):
        market = build_market_context(None, [])

        assert market.sentiment_value is None
        assert market.sentiment_classification is None
        assert market.benchmark_daily_trend is None
        assert market.benchmark_daily_ema50 is None
        assert market.benchmark_daily_close is None

    def test_populated(self):
        market = build_market_context(
            SentimentReading(value=72, classification="Greed"),
            _daily([100.0 + i for i in range(60)]),
        )

        assert market.sentiment_value == 72
        assert market.sentiment_classification == "Greed"
        assert market.benchmark_daily_trend == Trend.UP
        assert market.benchmark_daily_close == pytest.approx(159.0)
        assert market.benchmark_distance_pct > 0
