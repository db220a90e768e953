"""Tests for the recommendation decision engine."""

import itertools

import pytest

from scalp_advisor.models import (
    Action,
    Direction,
    DirectionalSignal,
    HoldabilityResult,
    MarketContext,
    PositionState,
    RecommendationConfig,
    ScoreDetail,
    Trend,
)
from scalp_advisor.recommendation import RecommendationEngine, recommend


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _signal(direction: Direction, score: float, *reasons: str) -> DirectionalSignal:
    return DirectionalSignal(direction=direction, score=score, reasons=reasons)


def _long(score: float, *reasons: str) -> DirectionalSignal:
    return _signal(Direction.LONG, score, *reasons)


def _short(score: float, *reasons: str) -> DirectionalSignal:
    return _signal(Direction.SHORT, score, *reasons)


def _holdability(score: float, liquidation_near: bool = False, unmet: tuple[str, ...] = ()) -> HoldabilityResult:
    details = [
        ScoreDetail(key=f"rule_{i}", condition=text, met=False)
        for i, text in enumerate(unmet)
    ]
    details.append(
        ScoreDetail(
            key="liquidation_near",
            condition="Price within liquidation safety margin",
            met=liquidation_near,
            weight=-10.0 if liquidation_near else 0.0,
            penalty=True,
        )
    )
    return HoldabilityResult(score=score, details=tuple(details))


def _market(
    trend: Trend | None = None,
    ema: float | None = None,
    close: float | None = None,
    sentiment: float | None = None,
    classification: str | None = None,
) -> MarketContext:
    return MarketContext(
        sentiment_value=sentiment,
        sentiment_classification=classification,
        benchmark_daily_trend=trend,
        benchmark_daily_ema50=ema,
        benchmark_daily_close=close,
    )


NEUTRAL = _market(Trend.UP, ema=60_000.0, close=62_000.0, sentiment=55, classification="Neutral")


# ---------------------------------------------------------------------------
# Flat
# ---------------------------------------------------------------------------

class TestFlat:
    """Recommendations while flat."""

    def test_aligned_long_opens(self):
        rec = recommend(
            PositionState.FLAT,
            _long(8.0, "EMA5 above EMA10", "Close above VWAP"),
            _short(2.0),
            market=NEUTRAL,
        )

        assert rec.action == Action.OPEN_LONG
        assert "Benchmark daily trend up, aligned with long entry" in rec.reasons
        assert rec.reasons[-1] == "Signals: EMA5 above EMA10, Close above VWAP"

    def test_reasons_follow_evaluation_order(self):
        rec = recommend(PositionState.FLAT, _long(8.0), _short(2.0), market=NEUTRAL)

        assert rec.reasons[0].startswith("Long signal strong (8) cleared entry threshold")
        assert rec.reasons[1] == "Leads short signal by 6"
        assert rec.reasons[2].startswith("Benchmark daily trend")
        assert rec.reasons[3].startswith("Sentiment 55 (Neutral)")

    def test_short_opens(self):
        market = _market(Trend.DOWN, ema=60_000.0, close=58_000.0, sentiment=45)
        rec = recommend(PositionState.FLAT, _long(1.0), _short(7.0), market=market)
        assert rec.action == Action.OPEN_SHORT

    def test_below_threshold_waits(self):
        rec = recommend(PositionState.FLAT, _long(5.5), _short(3.0), market=NEUTRAL)

        assert rec.action == Action.WAIT
        assert rec.reasons == ("No entry signal reached threshold 6 (long 5.5, short 3)",)

    def test_both_directions_conflict(self):
        rec = recommend(PositionState.FLAT, _long(7.0), _short(6.5), market=NEUTRAL)

        assert rec.action == Action.WAIT
        assert "conflict" in rec.reasons[0]

    def test_insufficient_margin_waits(self):
        config = RecommendationConfig(entry_threshold=4.0, min_score_margin=2.0)
        rec = recommend(PositionState.FLAT, _long(5.0), _short(3.5), market=NEUTRAL, config=config)

        assert rec.action == Action.WAIT
        assert rec.reasons[-1] == "Lead over short signal (1.5) below required margin 2"

    def test_strong_opposed_benchmark_vetoes(self):
        market = _market(Trend.DOWN, ema=60_000.0, close=57_000.0, sentiment=50)
        rec = recommend(PositionState.FLAT, _long(8.0), _short(0.0), market=market)

        assert rec.action == Action.WAIT
        assert any("strongly opposes long entry (5.00% from EMA)" in r for r in rec.reasons)
        assert rec.reasons[-1] == "Long entry vetoed by market context"

    def test_unknown_distance_vetoes(self):
        market = _market(Trend.DOWN)
        rec = recommend(PositionState.FLAT, _long(8.0), _short(0.0), market=market)

        assert rec.action == Action.WAIT
        assert any("distance from EMA unknown" in r for r in rec.reasons)

    def test_mild_opposition_does_not_veto(self):
        market = _market(Trend.DOWN, ema=60_000.0, close=59_700.0)
        rec = recommend(PositionState.FLAT, _long(8.0), _short(0.0), market=market)

        assert rec.action == Action.OPEN_LONG
        assert any("mildly opposes" in r for r in rec.reasons)

    def test_flat_benchmark_does_not_veto(self):
        rec = recommend(PositionState.FLAT, _long(8.0), _short(0.0), market=_market(Trend.FLAT))

        assert rec.action == Action.OPEN_LONG
        assert "Benchmark daily trend flat" in rec.reasons

    def test_extreme_greed_vetoes_long(self):
        market = _market(Trend.UP, ema=1.0, close=2.0, sentiment=85, classification="Extreme Greed")
        rec = recommend(PositionState.FLAT, _long(8.0), _short(0.0), market=market)

        assert rec.action == Action.WAIT
        assert "Sentiment 85 (Extreme Greed) at extreme greed; long reversal risk" in rec.reasons

    def test_extreme_greed_allows_short(self):
        market = _market(Trend.DOWN, ema=2.0, close=1.0, sentiment=85)
        rec = recommend(PositionState.FLAT, _long(0.0), _short(8.0), market=market)
        assert rec.action == Action.OPEN_SHORT

    def test_extreme_fear_vetoes_short(self):
        market = _market(Trend.DOWN, ema=2.0, close=1.0, sentiment=15)
        rec = recommend(PositionState.FLAT, _long(0.0), _short(8.0), market=market)

        assert rec.action == Action.WAIT
        assert any("extreme fear; short reversal risk" in r for r in rec.reasons)

    def test_absent_market_context_does_not_veto(self):
        rec = recommend(PositionState.FLAT, _long(8.0), _short(0.0))

        assert rec.action == Action.OPEN_LONG
        assert "Benchmark daily trend unavailable" in rec.reasons
        assert "Sentiment index unavailable" in rec.reasons

    def test_holdability_ignored_when_flat(self):
        rec = recommend(
            PositionState.FLAT, _long(0.0), _short(0.0), holdability=_holdability(0.0, True)
        )
        assert rec.action == Action.WAIT

    @pytest.mark.parametrize("threshold,expected", [
        (5.0, Action.OPEN_LONG),
        (7.0, Action.OPEN_LONG),
        (7.5, Action.WAIT),
    ])
    def test_entry_threshold_is_configurable(self, threshold, expected):
        config = RecommendationConfig(entry_threshold=threshold)
        rec = recommend(PositionState.FLAT, _long(7.0), _short(0.0), market=NEUTRAL, config=config)
        assert rec.action == expected


# ---------------------------------------------------------------------------
# In a position
# ---------------------------------------------------------------------------

class TestInPosition:
    """Recommendations while holding a position."""

    def test_low_holdability_closes(self):
        rec = recommend(
            PositionState.LONG,
            _long(0.0),
            _short(0.0),
            holdability=_holdability(2.0, unmet=("EMA5/EMA10 aligned with position",)),
            market=NEUTRAL,
        )

        assert rec.action == Action.CLOSE
        assert rec.reasons[0] == "Holdability 2 below close threshold 4"
        assert rec.reasons[1] == "Unmet: EMA5/EMA10 aligned with position"
        assert not any("liquidation" in r for r in rec.reasons)

    @pytest.mark.parametrize("state", [PositionState.LONG, PositionState.SHORT])
    def test_liquidation_closes(self, state):
        rec = recommend(
            state,
            _long(0.0),
            _short(0.0),
            holdability=_holdability(0.0, liquidation_near=True),
        )

        assert rec.action == Action.CLOSE
        assert rec.reasons[0] == (
            f"Price within liquidation safety margin of {state.value} position"
        )

    def test_caution_hold(self):
        rec = recommend(
            PositionState.SHORT,
            _long(0.0),
            _short(0.0),
            holdability=_holdability(5.0, unmet=("Close on position side of VWAP",)),
        )

        assert rec.action == Action.HOLD
        assert "caution" in rec.reasons[0]
        assert rec.reasons[1] == "Unmet: Close on position side of VWAP"

    def test_healthy_hold(self):
        rec = recommend(
            PositionState.LONG, _long(3.0), _short(1.0), holdability=_holdability(8.0)
        )

        assert rec.action == Action.HOLD
        assert rec.reasons == ("Holdability 8 at or above 6; long position healthy",)

    @pytest.mark.parametrize("holdability", [0.0, 3.0, 5.0, 9.0])
    def test_opposing_signal_never_flips(self, holdability):
        rec = recommend(
            PositionState.LONG,
            _long(0.0),
            _short(9.0),
            holdability=_holdability(holdability),
        )

        assert rec.action in (Action.HOLD, Action.CLOSE)
        assert any("Opposing short signal strong (9)" in r for r in rec.reasons)

    def test_missing_holdability_holds(self):
        rec = recommend(PositionState.SHORT, _long(0.0), _short(0.0), holdability=None)

        assert rec.action == Action.HOLD
        assert "unavailable" in rec.reasons[0]

    def test_benchmark_against_hold_is_noted(self):
        market = _market(Trend.DOWN, ema=2.0, close=1.0)
        rec = recommend(
            PositionState.LONG, _long(0.0), _short(0.0), holdability=_holdability(8.0), market=market
        )

        assert rec.action == Action.HOLD
        assert rec.reasons[-1] == "Benchmark daily trend down runs against long position"

    @pytest.mark.parametrize("close_threshold,expected", [
        (2.0, Action.HOLD),
        (3.0, Action.HOLD),
        (3.5, Action.CLOSE),
    ])
    def test_close_threshold_is_configurable(self, close_threshold, expected):
        config = RecommendationConfig(close_threshold=close_threshold)
        rec = recommend(
            PositionState.LONG, _long(0.0), _short(0.0), holdability=_holdability(3.0), config=config
        )
        assert rec.action == expected


# ---------------------------------------------------------------------------
# Totality
# ---------------------------------------------------------------------------

SCORES = [0.0, 4.0, 6.0, 10.0]
HOLDABILITIES = [None, _holdability(0.0, True), _holdability(0.0), _holdability(5.0), _holdability(10.0)]
MARKETS = [
    MarketContext(),
    NEUTRAL,
    _market(Trend.DOWN),
    _market(Trend.FLAT, sentiment=10),
    _market(Trend.UP, ema=100.0, close=100.5, sentiment=95),
]


class TestTotality:
    """Every input combination yields one action with reasons."""

    @pytest.mark.parametrize("state", list(PositionState))
    def test_every_combination_resolves(self, state):
        engine = RecommendationEngine()
        for long_score, short_score, holdability, market in itertools.product(
            SCORES, SCORES, HOLDABILITIES, MARKETS
        ):
            rec = engine.recommend(state, _long(long_score), _short(short_score), holdability, market)

            assert isinstance(rec.action, Action)
            assert rec.reasons
            assert all(r for r in rec.reasons)
            if state == PositionState.FLAT:
                assert rec.action in (Action.OPEN_LONG, Action.OPEN_SHORT, Action.WAIT)
            else:
                assert rec.action in (Action.HOLD, Action.CLOSE)

    def test_engine_is_deterministic(self):
        engine = RecommendationEngine()
        args = (PositionState.FLAT, _long(8.0), _short(2.0), None, NEUTRAL)
        assert engine.recommend(*args) == engine.recommend(*args)
