"""Trend readings derived from higher-timeframe candles.

These are returned as explicit values next to the enriched primary candles
rather than written onto them.
"""

import logging
from typing import Sequence

from scalp_advisor.indicators import ema
from scalp_advisor.models.candle import Candle
from scalp_advisor.models.market import MarketContext, SentimentReading, Trend, TrendReading

logger = logging.getLogger(__name__)


def trend_reading(
    candles: Sequence[Candle],
    period: int = 15,
    price: float | None = None,
) -> TrendReading:
    """
    Compare a price with the EMA of the given candles.

    Args:
        candles: Candles in ascending timestamp order (e.g. 15m)
        period: EMA period
        price: Current price, usually the latest primary close. Defaults to
            the last close of ``candles``.

    Returns:
        TrendReading, FLAT when the EMA is not yet available
    """
    if not candles:
        return TrendReading(close=price)

    close = candles[-1].close if price is None else price
    ema_value = ema([c.close for c in candles], period)[-1]
    if ema_value is None:
        return TrendReading(close=close)

    if close > ema_value:
        direction = Trend.UP
    elif close < ema_value:
        direction = Trend.DOWN
    else:
        direction = Trend.FLAT
    return TrendReading(direction=direction, close=close, ema=ema_value)


def benchmark_daily_trend(
    daily_candles: Sequence[Candle],
    period: int = 50,
) -> tuple[Trend | None, float | None, float | None]:
    """
    Classify the benchmark asset's daily trend against its EMA.

    Fewer than ``period`` candles leaves the trend absent. A missing or
    zero close/EMA is FLAT. Otherwise UP when close > EMA, DOWN otherwise.

    Returns:
        Tuple of (trend, ema, close)
    """
    if len(daily_candles) < period:
        logger.debug(
            "Benchmark trend unavailable: %d daily candles, %d needed",
            len(daily_candles),
            period,
        )
        return None, None, None

    close = daily_candles[-1].close
    ema_value = ema([c.close for c in daily_candles], period)[-1]
    if not close or not ema_value:
        return Trend.FLAT, ema_value, close

    trend = Trend.UP if close > ema_value else Trend.DOWN
    return trend, ema_value, close


def build_market_context(
    sentiment: SentimentReading | None,
    daily_candles: Sequence[Candle],
    period: int = 50,
) -> MarketContext:
    """Assemble MarketContext from a sentiment reading and benchmark daily candles."""
    trend, ema_value, close = benchmark_daily_trend(daily_candles, period)
    sentiment = sentiment or SentimentReading()
    return MarketContext(
        sentiment_value=sentiment.value,
        sentiment_classification=sentiment.classification,
        benchmark_daily_trend=trend,
        benchmark_daily_ema50=ema_value,
        benchmark_daily_close=close,
    )
