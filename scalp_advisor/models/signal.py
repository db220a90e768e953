"""Scored signal models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Direction(str, Enum):
    """Entry direction."""

    LONG = "long"
    SHORT = "short"

    @property
    def opposite(self) -> "Direction":
        return Direction.SHORT if self is Direction.LONG else Direction.LONG


class ScoreGrade(str, Enum):
    """Coarse bucket of a rule score."""

    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


class ScoreDetail(BaseModel):
    """Outcome of a single rule evaluation.

    weight is what the rule contributed to the score, 0 when not met.
    Penalty rules subtract their weight when met.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    condition: str
    met: bool
    weight: float = 0.0
    penalty: bool = False


class DirectionalSignal(BaseModel):
    """Entry score for one direction."""

    model_config = ConfigDict(frozen=True)

    direction: Direction
    score: float = Field(default=0.0, ge=0)
    # set by the scorer from the configured cut-offs; None when built by hand
    grade: ScoreGrade | None = None
    reasons: tuple[str, ...] = ()
    types: frozenset[str] = frozenset()
    details: tuple[ScoreDetail, ...] = ()

    def is_met(self, key: str) -> bool:
        """Check whether the rule with the given key was met."""
        return any(d.met for d in self.details if d.key == key)


class HoldabilityResult(BaseModel):
    """How well an open position deserves to keep being held."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(default=0.0, ge=0)
    details: tuple[ScoreDetail, ...] = ()

    def is_met(self, key: str) -> bool:
        """Check whether the rule with the given key was met."""
        return any(d.met for d in self.details if d.key == key)

    @property
    def failed_conditions(self) -> list[str]:
        """Condition text of positive rules that were not met."""
        return [d.condition for d in self.details if not d.met and not d.penalty]
