"""Recommendation decision engine.

Keyed by the current position state:

- Flat: open a side only when exactly one entry score clears the entry
  threshold, leads the other by the configured margin, and market context
  does not veto it. Otherwise wait.
- Long/Short: close on liquidation proximity or low holdability, hold
  (with a caution when holdability is middling) otherwise. An opposing
  entry signal never flips a position; closing and opening are separate
  recommendations.

Reasons are appended in evaluation order and are never empty.
This module is pure business logic with no I/O dependencies.
"""

import logging

from scalp_advisor.models.config import LIQUIDATION_RULE_KEY, RecommendationConfig
from scalp_advisor.models.market import MarketContext, Trend
from scalp_advisor.models.position import PositionState
from scalp_advisor.models.recommendation import Action, Recommendation
from scalp_advisor.models.signal import Direction, DirectionalSignal, HoldabilityResult
from scalp_advisor.scoring.grading import grade_score

logger = logging.getLogger(__name__)

_OPEN_ACTION = {Direction.LONG: Action.OPEN_LONG, Direction.SHORT: Action.OPEN_SHORT}
_FAVORED_TREND = {Direction.LONG: Trend.UP, Direction.SHORT: Trend.DOWN}


class RecommendationEngine:
    """Turn scores and market context into a single recommended action."""

    def __init__(self, config: RecommendationConfig | None = None):
        self.config = config or RecommendationConfig()

    def recommend(
        self,
        state: PositionState,
        long_signal: DirectionalSignal,
        short_signal: DirectionalSignal,
        holdability: HoldabilityResult | None = None,
        market: MarketContext | None = None,
    ) -> Recommendation:
        """
        Resolve the recommendation for the given state.

        Args:
            state: Current position state (caller-supplied)
            long_signal: Long entry signal
            short_signal: Short entry signal
            holdability: Holdability of the open position; ignored when flat
            market: Market context; all-absent when None

        Returns:
            Recommendation with a non-empty reasons tuple
        """
        market = market or MarketContext()
        if state == PositionState.FLAT:
            action, reasons = self._from_flat(long_signal, short_signal, market)
        else:
            side = Direction.LONG if state == PositionState.LONG else Direction.SHORT
            opposing = short_signal if side == Direction.LONG else long_signal
            action, reasons = self._from_position(side, opposing, holdability, market)

        logger.debug("Recommendation for %s: %s", state.value, action.value)
        return Recommendation(action=action, reasons=tuple(reasons))

    # ------------------------------------------------------------------
    # Flat
    # ------------------------------------------------------------------

    def _from_flat(
        self,
        long_signal: DirectionalSignal,
        short_signal: DirectionalSignal,
        market: MarketContext,
    ) -> tuple[Action, list[str]]:
        cfg = self.config
        reasons: list[str] = []

        long_ok = long_signal.score >= cfg.entry_threshold
        short_ok = short_signal.score >= cfg.entry_threshold

        if not long_ok and not short_ok:
            reasons.append(
                f"No entry signal reached threshold {cfg.entry_threshold:g} "
                f"(long {long_signal.score:g}, short {short_signal.score:g})"
            )
            return Action.WAIT, reasons

        if long_ok and short_ok:
            reasons.append(
                f"Both long ({long_signal.score:g}) and short ({short_signal.score:g}) "
                f"cleared threshold {cfg.entry_threshold:g}; signals conflict"
            )
            return Action.WAIT, reasons

        signal, other = (long_signal, short_signal) if long_ok else (short_signal, long_signal)
        direction = signal.direction
        grade = grade_score(signal.score, cfg)
        reasons.append(
            f"{direction.value.capitalize()} signal {grade.value} ({signal.score:g}) "
            f"cleared entry threshold {cfg.entry_threshold:g}"
        )

        margin = signal.score - other.score
        if margin < cfg.min_score_margin:
            reasons.append(
                f"Lead over {other.direction.value} signal ({margin:g}) below "
                f"required margin {cfg.min_score_margin:g}"
            )
            return Action.WAIT, reasons
        reasons.append(f"Leads {other.direction.value} signal by {margin:g}")

        vetoed = self._benchmark_veto(direction, market, reasons)
        vetoed = self._sentiment_veto(direction, market, reasons) or vetoed
        if vetoed:
            reasons.append(f"{direction.value.capitalize()} entry vetoed by market context")
            return Action.WAIT, reasons

        if signal.reasons:
            reasons.append("Signals: " + ", ".join(signal.reasons))
        return _OPEN_ACTION[direction], reasons

    def _benchmark_veto(
        self,
        direction: Direction,
        market: MarketContext,
        reasons: list[str],
    ) -> bool:
        trend = market.benchmark_daily_trend
        if trend is None:
            reasons.append("Benchmark daily trend unavailable")
            return False
        if trend == Trend.FLAT:
            reasons.append("Benchmark daily trend flat")
            return False
        if trend == _FAVORED_TREND[direction]:
            reasons.append(
                f"Benchmark daily trend {trend.value}, aligned with {direction.value} entry"
            )
            return False

        distance = market.benchmark_distance_pct
        if distance is None or distance >= self.config.benchmark_veto_distance_pct:
            detail = "distance from EMA unknown" if distance is None else f"{distance:.2f}% from EMA"
            reasons.append(
                f"Benchmark daily trend {trend.value} strongly opposes "
                f"{direction.value} entry ({detail})"
            )
            return True

        reasons.append(
            f"Benchmark daily trend {trend.value} mildly opposes {direction.value} entry "
            f"({distance:.2f}% from EMA)"
        )
        return False

    def _sentiment_veto(
        self,
        direction: Direction,
        market: MarketContext,
        reasons: list[str],
    ) -> bool:
        value = market.sentiment_value
        if value is None:
            reasons.append("Sentiment index unavailable")
            return False

        label = f"Sentiment {value:g}"
        if market.sentiment_classification:
            label += f" ({market.sentiment_classification})"

        if direction == Direction.LONG and value >= self.config.extreme_greed:
            reasons.append(f"{label} at extreme greed; long reversal risk")
            return True
        if direction == Direction.SHORT and value <= self.config.extreme_fear:
            reasons.append(f"{label} at extreme fear; short reversal risk")
            return True

        reasons.append(f"{label} not at a reversal extreme")
        return False

    # ------------------------------------------------------------------
    # In a position
    # ------------------------------------------------------------------

    def _from_position(
        self,
        side: Direction,
        opposing: DirectionalSignal,
        holdability: HoldabilityResult | None,
        market: MarketContext,
    ) -> tuple[Action, list[str]]:
        cfg = self.config
        reasons: list[str] = []

        if holdability is None:
            reasons.append(f"Holdability unavailable for {side.value} position; hold with caution and monitor")
            action = Action.HOLD
        elif holdability.is_met(LIQUIDATION_RULE_KEY):
            reasons.append(f"Price within liquidation safety margin of {side.value} position")
            action = Action.CLOSE
        elif holdability.score < cfg.close_threshold:
            reasons.append(
                f"Holdability {holdability.score:g} below close threshold {cfg.close_threshold:g}"
            )
            _append_unmet(holdability, reasons)
            action = Action.CLOSE
        elif holdability.score < cfg.caution_threshold:
            reasons.append(
                f"Holdability {holdability.score:g} below {cfg.caution_threshold:g}; "
                f"hold with caution and tighten stop"
            )
            _append_unmet(holdability, reasons)
            action = Action.HOLD
        else:
            reasons.append(
                f"Holdability {holdability.score:g} at or above {cfg.caution_threshold:g}; "
                f"{side.value} position healthy"
            )
            action = Action.HOLD

        if opposing.score >= cfg.entry_threshold:
            if action == Action.CLOSE:
                reasons.append(
                    f"Opposing {opposing.direction.value} signal "
                    f"{grade_score(opposing.score, cfg).value} ({opposing.score:g}); "
                    f"re-evaluate entry after closing"
                )
            else:
                reasons.append(
                    f"Opposing {opposing.direction.value} signal "
                    f"{grade_score(opposing.score, cfg).value} ({opposing.score:g}) "
                    f"noted; close first before any reversal"
                )

        trend = market.benchmark_daily_trend
        if action == Action.HOLD and trend is not None and trend == _FAVORED_TREND[opposing.direction]:
            reasons.append(f"Benchmark daily trend {trend.value} runs against {side.value} position")

        return action, reasons


def _append_unmet(holdability: HoldabilityResult, reasons: list[str]) -> None:
    failed = holdability.failed_conditions
    if failed:
        reasons.append("Unmet: " + ", ".join(failed))


def recommend(
    state: PositionState,
    long_signal: DirectionalSignal,
    short_signal: DirectionalSignal,
    holdability: HoldabilityResult | None = None,
    market: MarketContext | None = None,
    config: RecommendationConfig | None = None,
) -> Recommendation:
    """Resolve a recommendation with a one-off engine."""
    return RecommendationEngine(config).recommend(
        state, long_signal, short_signal, holdability, market
    )
