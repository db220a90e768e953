"""Open position snapshot models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from scalp_advisor.models.signal import Direction


class PositionState(str, Enum):
    """Position state the recommendation is keyed on."""

    FLAT = "flat"
    LONG = "long"
    SHORT = "short"

    @classmethod
    def of(cls, position: "PositionInfo | None") -> "PositionState":
        """Derive the state from an optional position (None means flat)."""
        if position is None:
            return cls.FLAT
        return cls.LONG if position.side == Direction.LONG else cls.SHORT


class PositionInfo(BaseModel):
    """An open position. Absent entirely when flat."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    side: Direction
    entry_price: float = Field(gt=0)
    liquidation_price: float | None = Field(default=None, gt=0)

    @property
    def sign(self) -> int:
        """+1 for long, -1 for short; multiplies price moves into PnL direction."""
        return 1 if self.side == Direction.LONG else -1

    def favorable_move_pct(self, price: float) -> float:
        """Signed move from entry in the position's favour, in percent."""
        return (price - self.entry_price) / self.entry_price * 100 * self.sign

    def liquidation_distance_pct(self, price: float) -> float | None:
        """
        Room left before liquidation as a percentage of price.

        Positive while the price is still on the safe side; zero or negative
        once it has reached or crossed the liquidation price.
        """
        if self.liquidation_price is None or price <= 0:
            return None
        return (price - self.liquidation_price) / price * 100 * self.sign
