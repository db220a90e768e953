"""Recommendation output models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Action(str, Enum):
    """Recommended action."""

    OPEN_LONG = "open_long"
    OPEN_SHORT = "open_short"
    HOLD = "hold"
    CLOSE = "close"
    WAIT = "wait"


class Recommendation(BaseModel):
    """A single action plus the reasons that led to it, in evaluation order."""

    model_config = ConfigDict(frozen=True)

    action: Action
    reasons: tuple[str, ...] = Field(min_length=1)
