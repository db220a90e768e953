"""Candle (OHLCV) data models."""

from pydantic import BaseModel, ConfigDict


class Candle(BaseModel):
    """Raw candlestick data.

    Timestamps are epoch milliseconds of the candle open, strictly
    increasing within a sequence. Non-finite prices are rejected.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    @property
    def is_bullish(self) -> bool:
        """Check if this is a bullish (green) candle."""
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        """Check if this is a bearish (red) candle."""
        return self.close < self.open

    @property
    def body_size(self) -> float:
        """Get the absolute size of the candle body."""
        return abs(self.close - self.open)

    @property
    def range_size(self) -> float:
        """Get the full range (high - low) of the candle."""
        return self.high - self.low

    @property
    def typical_price(self) -> float:
        """(high + low + close) / 3, the price used for VWAP."""
        return (self.high + self.low + self.close) / 3


# Names of the computed fields, in the order they appear on EnrichedCandle.
INDICATOR_FIELDS = (
    "ema5",
    "ema10",
    "ema15",
    "bb_upper",
    "bb_middle",
    "bb_lower",
    "stoch_k",
    "stoch_d",
    "vwap",
    "atr14",
    "vma20",
)


class EnrichedCandle(Candle):
    """Candle plus technical indicators.

    An indicator is None until its window has enough history.
    """

    ema5: float | None = None
    ema10: float | None = None
    ema15: float | None = None
    bb_upper: float | None = None
    bb_middle: float | None = None
    bb_lower: float | None = None
    stoch_k: float | None = None
    stoch_d: float | None = None
    vwap: float | None = None
    atr14: float | None = None
    vma20: float | None = None

    def raw(self) -> Candle:
        """Return the underlying raw candle."""
        return Candle(
            timestamp=self.timestamp,
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
            volume=self.volume,
        )

    def indicators(self) -> dict[str, float | None]:
        """Indicator values keyed by field name."""
        return {name: getattr(self, name) for name in INDICATOR_FIELDS}
