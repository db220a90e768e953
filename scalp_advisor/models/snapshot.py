"""Advisor inputs and the snapshot returned for them."""

from pydantic import BaseModel, ConfigDict, Field

from scalp_advisor.models.candle import Candle, EnrichedCandle
from scalp_advisor.models.market import MarketContext, SentimentReading, TrendReading
from scalp_advisor.models.position import PositionInfo
from scalp_advisor.models.recommendation import Recommendation
from scalp_advisor.models.signal import DirectionalSignal, HoldabilityResult


class AdvisorInputs(BaseModel):
    """Everything the collaborators fetch before evaluation.

    Candle sequences must already be in ascending timestamp order.
    """

    model_config = ConfigDict(frozen=True)

    # primary asset, short interval (e.g. 1m)
    candles: tuple[Candle, ...] = ()
    # benchmark asset, same short interval; last two are compared
    benchmark_candles: tuple[Candle, ...] = ()
    # primary asset, medium interval (e.g. 15m)
    trend_candles: tuple[Candle, ...] = ()
    # benchmark asset, daily
    benchmark_daily_candles: tuple[Candle, ...] = ()
    position: PositionInfo | None = None
    sentiment: SentimentReading = Field(default_factory=SentimentReading)


class SignalSnapshot(BaseModel):
    """Result of one full evaluation."""

    model_config = ConfigDict(frozen=True)

    time: int | None = None
    price: float | None = None
    market_context: MarketContext
    long_signal: DirectionalSignal
    short_signal: DirectionalSignal
    trend: TrendReading
    holdability: HoldabilityResult | None = None
    position: PositionInfo | None = None
    indicators: EnrichedCandle | None = None
    recommendation: Recommendation
