"""Market-wide context models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Trend(str, Enum):
    """Direction of price relative to its moving average."""

    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class TrendReading(BaseModel):
    """Close vs EMA on a given timeframe.

    Returned alongside enriched candles instead of being attached to them.
    """

    model_config = ConfigDict(frozen=True)

    direction: Trend = Trend.FLAT
    close: float | None = None
    ema: float | None = None


class SentimentReading(BaseModel):
    """Fear/greed index reading (0 = extreme fear, 100 = extreme greed)."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    value: float | None = Field(default=None, ge=0, le=100)
    classification: str | None = None


class MarketContext(BaseModel):
    """Broad market signals. Missing fields stay None, never defaulted."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    sentiment_value: float | None = Field(default=None, ge=0, le=100)
    sentiment_classification: str | None = None
    benchmark_daily_trend: Trend | None = None
    benchmark_daily_ema50: float | None = None
    benchmark_daily_close: float | None = None

    @property
    def benchmark_distance_pct(self) -> float | None:
        """How far the benchmark close sits from its daily EMA, in percent."""
        if self.benchmark_daily_close is None or not self.benchmark_daily_ema50:
            return None
        return (
            abs(self.benchmark_daily_close - self.benchmark_daily_ema50)
            / self.benchmark_daily_ema50
            * 100
        )
