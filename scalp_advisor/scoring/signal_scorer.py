"""Entry signal scoring.

Long and short each have their own rule battery; the short rules are not
negations of the long ones. An absent indicator makes every rule that
reads it False.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from scalp_advisor.models.candle import EnrichedCandle
from scalp_advisor.models.config import RecommendationConfig, SignalScorerConfig
from scalp_advisor.models.market import Trend, TrendReading
from scalp_advisor.models.signal import Direction, DirectionalSignal
from scalp_advisor.scoring.grading import grade_score
from scalp_advisor.scoring.rules import (
    Rule,
    evaluate_rules,
    ge,
    gt,
    le,
    lt,
    unmet_details,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignalContext:
    """Everything an entry rule may look at."""

    latest: EnrichedCandle
    previous: EnrichedCandle | None
    trend: TrendReading | None
    config: SignalScorerConfig


def _stoch_crossed_up(ctx: SignalContext) -> bool:
    prev = ctx.previous
    if prev is None:
        return False
    return (
        le(prev.stoch_k, prev.stoch_d)
        and gt(ctx.latest.stoch_k, ctx.latest.stoch_d)
        and lt(prev.stoch_k, ctx.config.stoch_oversold)
    )


def _stoch_crossed_down(ctx: SignalContext) -> bool:
    prev = ctx.previous
    if prev is None:
        return False
    return (
        ge(prev.stoch_k, prev.stoch_d)
        and lt(ctx.latest.stoch_k, ctx.latest.stoch_d)
        and gt(prev.stoch_k, ctx.config.stoch_overbought)
    )


def _stoch_rising(ctx: SignalContext) -> bool:
    prev = ctx.previous
    return (
        prev is not None
        and gt(ctx.latest.stoch_k, prev.stoch_k)
        and lt(ctx.latest.stoch_k, ctx.config.stoch_overbought)
    )


def _stoch_falling(ctx: SignalContext) -> bool:
    prev = ctx.previous
    return (
        prev is not None
        and lt(ctx.latest.stoch_k, prev.stoch_k)
        and gt(ctx.latest.stoch_k, ctx.config.stoch_oversold)
    )


def _volume_surge(ctx: SignalContext) -> bool:
    vma = ctx.latest.vma20
    return vma is not None and ctx.latest.volume > vma * ctx.config.volume_surge_ratio


def _bands_open(ctx: SignalContext) -> bool:
    # zero-width bands sit on the close, so neither side can be touched
    return gt(ctx.latest.bb_upper, ctx.latest.bb_lower)


def _trend_is(ctx: SignalContext, direction: Trend) -> bool:
    return ctx.trend is not None and ctx.trend.direction == direction


LONG_RULES: tuple[Rule[SignalContext], ...] = (
    Rule(
        "ema_bullish", "EMA5 above EMA10", "trend",
        lambda ctx: gt(ctx.latest.ema5, ctx.latest.ema10),
    ),
    Rule(
        "trend_up", "15m trend up (close above EMA15)", "trend",
        lambda ctx: _trend_is(ctx, Trend.UP),
    ),
    Rule(
        "bb_lower_touch", "Close at or below lower Bollinger band", "volatility",
        lambda ctx: _bands_open(ctx) and le(ctx.latest.close, ctx.latest.bb_lower),
    ),
    Rule(
        "stoch_bullish_cross", "%K crossed above %D from oversold", "momentum",
        _stoch_crossed_up,
    ),
    Rule(
        "stoch_rising", "%K rising below overbought", "momentum",
        _stoch_rising,
    ),
    Rule(
        "above_vwap", "Close above VWAP", "vwap",
        lambda ctx: gt(ctx.latest.close, ctx.latest.vwap),
    ),
    Rule(
        "volume_surge", "Volume above its moving average", "volume",
        _volume_surge,
    ),
    Rule(
        "bullish_candle", "Bullish candle (close above open)", "price_action",
        lambda ctx: ctx.latest.is_bullish,
    ),
)

SHORT_RULES: tuple[Rule[SignalContext], ...] = (
    Rule(
        "ema_bearish", "EMA5 below EMA10", "trend",
        lambda ctx: lt(ctx.latest.ema5, ctx.latest.ema10),
    ),
    Rule(
        "trend_down", "15m trend down (close below EMA15)", "trend",
        lambda ctx: _trend_is(ctx, Trend.DOWN),
    ),
    Rule(
        "bb_upper_touch", "Close at or above upper Bollinger band", "volatility",
        lambda ctx: _bands_open(ctx) and ge(ctx.latest.close, ctx.latest.bb_upper),
    ),
    Rule(
        "stoch_bearish_cross", "%K crossed below %D from overbought", "momentum",
        _stoch_crossed_down,
    ),
    Rule(
        "stoch_falling", "%K falling above oversold", "momentum",
        _stoch_falling,
    ),
    Rule(
        "below_vwap", "Close below VWAP", "vwap",
        lambda ctx: lt(ctx.latest.close, ctx.latest.vwap),
    ),
    Rule(
        "volume_surge", "Volume above its moving average", "volume",
        _volume_surge,
    ),
    Rule(
        "bearish_candle", "Bearish candle (close below open)", "price_action",
        lambda ctx: ctx.latest.is_bearish,
    ),
)


class SignalScorer:
    """Score entry conditions for one direction at a time.

    Score = sum of the weights of the rules that are met. Details list
    every rule in definition order, met or not.
    """

    RULES: dict[Direction, tuple[Rule[SignalContext], ...]] = {
        Direction.LONG: LONG_RULES,
        Direction.SHORT: SHORT_RULES,
    }

    def __init__(
        self,
        config: SignalScorerConfig | None = None,
        grading: RecommendationConfig | None = None,
    ):
        self.config = config or SignalScorerConfig()
        # grade cut-offs live with the decision thresholds
        self.grading = grading or RecommendationConfig()

    def score(
        self,
        candles: Sequence[EnrichedCandle],
        direction: Direction,
        trend: TrendReading | None = None,
    ) -> DirectionalSignal:
        """
        Score the latest candle for the given direction.

        Args:
            candles: Enriched candles in ascending order, latest last.
                Only the last two are read.
            direction: LONG or SHORT
            trend: Medium-horizon trend reading, if available

        Returns:
            DirectionalSignal (score 0 and all rules unmet when empty)
        """
        rules = self.RULES[direction]
        if not candles:
            logger.debug("No candles to score for %s", direction.value)
            return DirectionalSignal(
                direction=direction,
                grade=grade_score(0.0, self.grading),
                details=unmet_details(rules),
            )

        context = SignalContext(
            latest=candles[-1],
            previous=candles[-2] if len(candles) > 1 else None,
            trend=trend,
            config=self.config,
        )
        result = evaluate_rules(rules, context, self.config.weight)
        score = max(result.score, 0.0)
        return DirectionalSignal(
            direction=direction,
            score=score,
            grade=grade_score(score, self.grading),
            reasons=tuple(result.reasons),
            types=result.categories,
            details=tuple(result.details),
        )

    def score_both(
        self,
        candles: Sequence[EnrichedCandle],
        trend: TrendReading | None = None,
    ) -> tuple[DirectionalSignal, DirectionalSignal]:
        """Score long and short. Returns (long, short)."""
        return (
            self.score(candles, Direction.LONG, trend),
            self.score(candles, Direction.SHORT, trend),
        )
