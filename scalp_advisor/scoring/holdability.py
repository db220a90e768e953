"""Holdability scoring for an open position.

Positive rules add weight when the position still looks worth holding;
the liquidation rule is a penalty that outweighs all of them together
(enforced by HoldabilityConfig), so a position near liquidation scores 0.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from scalp_advisor.market.trend import trend_reading
from scalp_advisor.models.candle import Candle, EnrichedCandle
from scalp_advisor.models.config import LIQUIDATION_RULE_KEY, HoldabilityConfig
from scalp_advisor.models.market import Trend, TrendReading
from scalp_advisor.models.position import PositionInfo
from scalp_advisor.models.signal import HoldabilityResult
from scalp_advisor.scoring.rules import Rule, evaluate_rules, gt, lt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HoldContext:
    """Everything a holdability rule may look at."""

    latest: EnrichedCandle
    position: PositionInfo
    # benchmark close-to-close change over the last two candles, percent
    benchmark_change_pct: float | None
    trend: TrendReading
    config: HoldabilityConfig

    @property
    def is_long(self) -> bool:
        return self.position.sign > 0

    def aligned(self, a: float | None, b: float | None) -> bool:
        """a above b for longs, below for shorts."""
        return gt(a, b) if self.is_long else lt(a, b)


def _in_profit(ctx: HoldContext) -> bool:
    return ctx.position.favorable_move_pct(ctx.latest.close) > 0


def _adverse_within_tolerance(ctx: HoldContext) -> bool:
    return -ctx.position.favorable_move_pct(ctx.latest.close) <= ctx.config.max_adverse_pct


def _stoch_not_exhausted(ctx: HoldContext) -> bool:
    if ctx.is_long:
        return lt(ctx.latest.stoch_k, ctx.config.stoch_overbought)
    return gt(ctx.latest.stoch_k, ctx.config.stoch_oversold)


def _benchmark_aligned(ctx: HoldContext) -> bool:
    change = ctx.benchmark_change_pct
    if change is None:
        return False
    return change * ctx.position.sign > -ctx.config.benchmark_divergence_pct


def _trend_aligned(ctx: HoldContext) -> bool:
    wanted = Trend.UP if ctx.is_long else Trend.DOWN
    return ctx.trend.direction == wanted


def _liquidation_near(ctx: HoldContext) -> bool:
    # crossed liquidation gives a distance <= 0, which is inside the margin
    distance = ctx.position.liquidation_distance_pct(ctx.latest.close)
    if distance is None:
        return False
    return distance <= 0 or distance < ctx.config.liquidation_margin_pct


HOLD_RULES: tuple[Rule[HoldContext], ...] = (
    Rule("in_profit", "Price in profit vs entry", "pnl", _in_profit),
    Rule(
        "adverse_within_tolerance", "Adverse move from entry within tolerance", "pnl",
        _adverse_within_tolerance,
    ),
    Rule(
        "ema_aligned", "EMA5/EMA10 aligned with position", "trend",
        lambda ctx: ctx.aligned(ctx.latest.ema5, ctx.latest.ema10),
    ),
    Rule(
        "stoch_not_exhausted", "Stochastic not exhausted against position", "momentum",
        _stoch_not_exhausted,
    ),
    Rule(
        "vwap_aligned", "Close on position side of VWAP", "vwap",
        lambda ctx: ctx.aligned(ctx.latest.close, ctx.latest.vwap),
    ),
    Rule(
        "benchmark_aligned", "Benchmark momentum not diverging against position", "benchmark",
        _benchmark_aligned,
    ),
    Rule(
        "trend_aligned", "15m trend aligned with position", "trend",
        _trend_aligned,
    ),
    Rule(
        LIQUIDATION_RULE_KEY, "Price within liquidation safety margin", "risk",
        _liquidation_near, penalty=True,
    ),
)


def benchmark_change_pct(candles: Sequence[Candle]) -> float | None:
    """Close-to-close change of the last two candles in percent."""
    if len(candles) < 2 or candles[-2].close == 0:
        return None
    return (candles[-1].close - candles[-2].close) / candles[-2].close * 100


class HoldabilityScorer:
    """Score whether an open position should keep being held."""

    def __init__(self, config: HoldabilityConfig | None = None):
        self.config = config or HoldabilityConfig()

    def score(
        self,
        latest: EnrichedCandle,
        position: PositionInfo,
        benchmark_candles: Sequence[Candle] = (),
        trend_candles: Sequence[Candle] = (),
    ) -> HoldabilityResult:
        """
        Evaluate the holdability battery.

        Args:
            latest: Latest enriched candle of the traded asset
            position: The open position (never called while flat)
            benchmark_candles: Short-horizon benchmark candles, latest last
            trend_candles: Medium-horizon candles of the traded asset; their
                EMA is compared with ``latest.close``

        Returns:
            HoldabilityResult with score clamped at 0 and every rule detailed
        """
        context = HoldContext(
            latest=latest,
            position=position,
            benchmark_change_pct=benchmark_change_pct(benchmark_candles),
            trend=trend_reading(trend_candles, self.config.trend_ema_period, price=latest.close),
            config=self.config,
        )
        result = evaluate_rules(HOLD_RULES, context, self.config.weight)
        if result.score < 0:
            logger.debug(
                "Holdability clamped from %.2f to 0 (%s position)",
                result.score,
                position.side.value,
            )
        return HoldabilityResult(
            score=max(result.score, 0.0),
            details=tuple(result.details),
        )
