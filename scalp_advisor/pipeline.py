"""End-to-end evaluation of one set of fetched inputs.

Runs indicators, both entry scorers, holdability (when a position is open)
and the recommendation engine, and packs everything into a SignalSnapshot.
No I/O: the caller fetches the inputs and owns what happens to the result.
"""

import logging

from scalp_advisor.indicators import IndicatorCalculator
from scalp_advisor.market import build_market_context, trend_reading
from scalp_advisor.models.config import AdvisorConfig
from scalp_advisor.models.position import PositionState
from scalp_advisor.models.snapshot import AdvisorInputs, SignalSnapshot
from scalp_advisor.recommendation import RecommendationEngine
from scalp_advisor.scoring import HoldabilityScorer, SignalScorer

logger = logging.getLogger(__name__)


class Advisor:
    """Holds one configured instance of every layer."""

    def __init__(self, config: AdvisorConfig | None = None):
        self.config = config or AdvisorConfig()
        self.indicator_calc = IndicatorCalculator(self.config.indicators)
        self.signal_scorer = SignalScorer(self.config.signals, self.config.recommendation)
        self.holdability_scorer = HoldabilityScorer(self.config.holdability)
        self.engine = RecommendationEngine(self.config.recommendation)

    def evaluate(self, inputs: AdvisorInputs) -> SignalSnapshot:
        """
        Evaluate inputs into a snapshot.

        Missing or short candle sequences never raise; they surface as
        absent indicators, unmet rules and, ultimately, a Wait or a
        cautious Hold.
        """
        enriched = self.indicator_calc.enrich(inputs.candles)
        latest = enriched[-1] if enriched else None

        trend = trend_reading(
            inputs.trend_candles,
            self.config.holdability.trend_ema_period,
            price=latest.close if latest else None,
        )
        long_signal, short_signal = self.signal_scorer.score_both(enriched, trend)

        holdability = None
        if inputs.position is not None and latest is not None:
            holdability = self.holdability_scorer.score(
                latest,
                inputs.position,
                inputs.benchmark_candles,
                inputs.trend_candles,
            )
        elif inputs.position is not None:
            logger.debug("Position open but no candles; holdability not scored")

        market = build_market_context(
            inputs.sentiment,
            inputs.benchmark_daily_candles,
            self.config.benchmark_ema_period,
        )

        recommendation = self.engine.recommend(
            PositionState.of(inputs.position),
            long_signal,
            short_signal,
            holdability,
            market,
        )

        return SignalSnapshot(
            time=latest.timestamp if latest else None,
            price=latest.close if latest else None,
            market_context=market,
            long_signal=long_signal,
            short_signal=short_signal,
            trend=trend,
            holdability=holdability,
            position=inputs.position,
            indicators=latest,
            recommendation=recommendation,
        )


def evaluate(inputs: AdvisorInputs, config: AdvisorConfig | None = None) -> SignalSnapshot:
    """Evaluate inputs with a one-off Advisor."""
    return Advisor(config).evaluate(inputs)
