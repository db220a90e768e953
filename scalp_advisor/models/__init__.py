"""Data models shared by every layer."""

from scalp_advisor.models.candle import INDICATOR_FIELDS, Candle, EnrichedCandle
from scalp_advisor.models.config import (
    AdvisorConfig,
    HoldabilityConfig,
    IndicatorConfig,
    RecommendationConfig,
    SignalScorerConfig,
)
from scalp_advisor.models.market import (
    MarketContext,
    SentimentReading,
    Trend,
    TrendReading,
)
from scalp_advisor.models.position import PositionInfo, PositionState
from scalp_advisor.models.recommendation import Action, Recommendation
from scalp_advisor.models.signal import (
    Direction,
    DirectionalSignal,
    HoldabilityResult,
    ScoreDetail,
    ScoreGrade,
)
from scalp_advisor.models.snapshot import AdvisorInputs, SignalSnapshot

__all__ = [
    "INDICATOR_FIELDS",
    "Candle",
    "EnrichedCandle",
    "AdvisorConfig",
    "HoldabilityConfig",
    "IndicatorConfig",
    "RecommendationConfig",
    "SignalScorerConfig",
    "MarketContext",
    "SentimentReading",
    "Trend",
    "TrendReading",
    "PositionInfo",
    "PositionState",
    "Action",
    "Recommendation",
    "Direction",
    "DirectionalSignal",
    "HoldabilityResult",
    "ScoreDetail",
    "ScoreGrade",
    "AdvisorInputs",
    "SignalSnapshot",
]
