"""Advisor configuration models.

Every window length, cut-off and rule weight lives here so scorers and the
recommendation engine can be driven from fixtures or a YAML file.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator


class IndicatorConfig(BaseModel):
    """Indicator windows.

    Enriched candle fields are named after the default windows
    (ema5, atr14, vma20, ...) whatever the configured values are.
    """

    ema_fast_period: int = Field(default=5, gt=0)
    ema_mid_period: int = Field(default=10, gt=0)
    ema_slow_period: int = Field(default=15, gt=0)

    # Bollinger Bands: population standard deviation (ddof=0) by default
    bb_period: int = Field(default=20, gt=1)
    bb_num_std: float = Field(default=2.0, gt=0)
    bb_ddof: Literal[0, 1] = 0

    stoch_k_period: int = Field(default=14, gt=0)
    stoch_d_period: int = Field(default=3, gt=0)
    # %K when highest high == lowest low; None leaves it absent
    stoch_flat_value: float | None = 50.0

    atr_period: int = Field(default=14, gt=0)
    atr_method: Literal["sma", "wilder"] = "sma"

    # None = cumulative over the whole supplied sequence
    vwap_window: int | None = Field(default=None, gt=0)

    vma_period: int = Field(default=20, gt=0)

    @property
    def min_history(self) -> int:
        """Candles needed before every indicator is present."""
        return max(
            self.ema_fast_period,
            self.ema_mid_period,
            self.ema_slow_period,
            self.bb_period,
            self.stoch_k_period + self.stoch_d_period - 1,
            self.atr_period + 1,
            self.vma_period,
        )


DEFAULT_SIGNAL_WEIGHTS: dict[str, float] = {
    # long battery
    "ema_bullish": 2.0,
    "trend_up": 2.0,
    "bb_lower_touch": 1.5,
    "stoch_bullish_cross": 2.0,
    "stoch_rising": 1.0,
    "above_vwap": 1.0,
    "bullish_candle": 0.5,
    # short battery
    "ema_bearish": 2.0,
    "trend_down": 2.0,
    "bb_upper_touch": 1.5,
    "stoch_bearish_cross": 2.0,
    "stoch_falling": 1.0,
    "below_vwap": 1.0,
    "bearish_candle": 0.5,
    # shared
    "volume_surge": 1.0,
}


class SignalScorerConfig(BaseModel):
    """Entry rule cut-offs and weights."""

    stoch_oversold: float = Field(default=20.0, ge=0, le=100)
    stoch_overbought: float = Field(default=80.0, ge=0, le=100)
    # volume > vma20 * ratio
    volume_surge_ratio: float = Field(default=1.0, gt=0)
    weights: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_SIGNAL_WEIGHTS)
    )

    @model_validator(mode="after")
    def _validate(self):
        if self.stoch_oversold >= self.stoch_overbought:
            raise ValueError(
                f"stoch_oversold ({self.stoch_oversold}) must be below "
                f"stoch_overbought ({self.stoch_overbought})"
            )
        _check_weights(self.weights, DEFAULT_SIGNAL_WEIGHTS)
        return self

    def weight(self, key: str) -> float:
        return self.weights.get(key, DEFAULT_SIGNAL_WEIGHTS[key])


LIQUIDATION_RULE_KEY = "liquidation_near"

DEFAULT_HOLDABILITY_WEIGHTS: dict[str, float] = {
    "in_profit": 2.0,
    "adverse_within_tolerance": 1.0,
    "ema_aligned": 2.0,
    "stoch_not_exhausted": 1.0,
    "vwap_aligned": 1.0,
    "benchmark_aligned": 1.0,
    "trend_aligned": 2.0,
    # penalty, subtracted when met
    LIQUIDATION_RULE_KEY: 10.0,
}


class HoldabilityConfig(BaseModel):
    """Holdability rule cut-offs and weights."""

    # adverse move from entry still considered noise, in percent
    max_adverse_pct: float = Field(default=0.5, ge=0)
    # price within this distance of liquidation (percent of price) is unsafe
    liquidation_margin_pct: float = Field(default=2.0, ge=0)
    # benchmark move against the position beyond this counts as divergence
    benchmark_divergence_pct: float = Field(default=0.1, ge=0)
    trend_ema_period: int = Field(default=15, gt=0)
    stoch_oversold: float = Field(default=20.0, ge=0, le=100)
    stoch_overbought: float = Field(default=80.0, ge=0, le=100)
    weights: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_HOLDABILITY_WEIGHTS)
    )

    @model_validator(mode="after")
    def _validate(self):
        _check_weights(self.weights, DEFAULT_HOLDABILITY_WEIGHTS)
        positive = sum(
            self.weight(k) for k in DEFAULT_HOLDABILITY_WEIGHTS if k != LIQUIDATION_RULE_KEY
        )
        penalty = self.weight(LIQUIDATION_RULE_KEY)
        if penalty < positive:
            raise ValueError(
                f"'{LIQUIDATION_RULE_KEY}' weight ({penalty}) must be at least the "
                f"sum of the other holdability weights ({positive})"
            )
        return self

    def weight(self, key: str) -> float:
        return self.weights.get(key, DEFAULT_HOLDABILITY_WEIGHTS[key])


class RecommendationConfig(BaseModel):
    """Decision thresholds."""

    entry_threshold: float = Field(default=6.0, ge=0)
    # winning direction must lead the other by at least this much
    min_score_margin: float = Field(default=2.0, ge=0)

    close_threshold: float = Field(default=4.0, ge=0)
    caution_threshold: float = Field(default=6.0, ge=0)

    strong_grade: float = Field(default=6.0, ge=0)
    moderate_grade: float = Field(default=4.0, ge=0)

    extreme_fear: float = Field(default=20.0, ge=0, le=100)
    extreme_greed: float = Field(default=80.0, ge=0, le=100)

    # opposed benchmark trend vetoes entries once the benchmark is this far
    # (percent) from its daily EMA; unknown distance also vetoes
    benchmark_veto_distance_pct: float = Field(default=1.0, ge=0)

    @model_validator(mode="after")
    def _validate(self):
        if self.close_threshold > self.caution_threshold:
            raise ValueError(
                f"close_threshold ({self.close_threshold}) must not exceed "
                f"caution_threshold ({self.caution_threshold})"
            )
        if self.moderate_grade > self.strong_grade:
            raise ValueError(
                f"moderate_grade ({self.moderate_grade}) must not exceed "
                f"strong_grade ({self.strong_grade})"
            )
        if self.extreme_fear >= self.extreme_greed:
            raise ValueError(
                f"extreme_fear ({self.extreme_fear}) must be below "
                f"extreme_greed ({self.extreme_greed})"
            )
        return self


class AdvisorConfig(BaseModel):
    """Top-level configuration tree."""

    indicators: IndicatorConfig = Field(default_factory=IndicatorConfig)
    signals: SignalScorerConfig = Field(default_factory=SignalScorerConfig)
    holdability: HoldabilityConfig = Field(default_factory=HoldabilityConfig)
    recommendation: RecommendationConfig = Field(default_factory=RecommendationConfig)

    # daily EMA period for the benchmark trend
    benchmark_ema_period: int = Field(default=50, gt=0)


def _check_weights(weights: dict[str, float], known: dict[str, float]) -> None:
    unknown = sorted(set(weights) - set(known))
    if unknown:
        raise ValueError(
            f"Unknown rule weight(s): {', '.join(unknown)}. "
            f"Known: {', '.join(sorted(known))}"
        )
    negative = sorted(k for k, v in weights.items() if v < 0)
    if negative:
        raise ValueError(f"Rule weights must be non-negative: {', '.join(negative)}")
