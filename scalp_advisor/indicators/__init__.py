"""Technical indicators (pure math, no I/O)."""

from scalp_advisor.indicators.indicators import (
    ema,
    sma,
    rolling_std,
    highest,
    lowest,
    bollinger_bands,
    true_range,
    atr,
    stochastic,
    vwap,
    enrich,
    IndicatorCalculator,
)

__all__ = [
    "ema",
    "sma",
    "rolling_std",
    "highest",
    "lowest",
    "bollinger_bands",
    "true_range",
    "atr",
    "stochastic",
    "vwap",
    "enrich",
    "IndicatorCalculator",
]
