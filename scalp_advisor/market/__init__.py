"""Market context and higher-timeframe trend helpers."""

from scalp_advisor.market.trend import (
    benchmark_daily_trend,
    build_market_context,
    trend_reading,
)

__all__ = [
    "benchmark_daily_trend",
    "build_market_context",
    "trend_reading",
]
