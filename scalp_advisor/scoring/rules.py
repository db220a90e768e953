"""Table-driven rule evaluation shared by the entry and holdability scorers.

A rule is a record of key, condition text, category and predicate. Weights
are looked up by key at evaluation time so changing them is a config change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Sequence, TypeVar

from scalp_advisor.models.signal import ScoreDetail

C = TypeVar("C")


@dataclass(frozen=True)
class Rule(Generic[C]):
    """One boolean rule over an evaluation context."""

    key: str
    condition: str
    category: str
    predicate: Callable[[C], bool]
    # penalty rules subtract their weight when met
    penalty: bool = False


@dataclass
class RuleEvaluation:
    """Result of running a rule battery."""

    score: float = 0.0
    details: list[ScoreDetail] = field(default_factory=list)
    met: list[Rule] = field(default_factory=list)

    @property
    def reasons(self) -> list[str]:
        return [r.condition for r in self.met if not r.penalty]

    @property
    def categories(self) -> frozenset[str]:
        return frozenset(r.category for r in self.met if not r.penalty)


def evaluate_rules(
    rules: Sequence[Rule[C]],
    context: C,
    weight: Callable[[str], float],
) -> RuleEvaluation:
    """
    Evaluate every rule in order.

    Every rule produces a detail whether met or not. The returned score is
    the raw signed sum; callers decide whether to clamp it.
    """
    result = RuleEvaluation()
    for rule in rules:
        met = bool(rule.predicate(context))
        contributed = 0.0
        if met:
            contributed = -weight(rule.key) if rule.penalty else weight(rule.key)
            result.score += contributed
            result.met.append(rule)
        result.details.append(
            ScoreDetail(
                key=rule.key,
                condition=rule.condition,
                met=met,
                weight=contributed,
                penalty=rule.penalty,
            )
        )
    return result


def unmet_details(rules: Sequence[Rule]) -> tuple[ScoreDetail, ...]:
    """Details for a battery that could not be evaluated at all."""
    return tuple(
        ScoreDetail(key=r.key, condition=r.condition, met=False, penalty=r.penalty)
        for r in rules
    )


# ---------------------------------------------------------------------------
# Null-safe comparisons: an absent operand makes the comparison False
# ---------------------------------------------------------------------------

def gt(a: float | None, b: float | None) -> bool:
    return a is not None and b is not None and a > b


def lt(a: float | None, b: float | None) -> bool:
    return a is not None and b is not None and a < b


def ge(a: float | None, b: float | None) -> bool:
    return a is not None and b is not None and a >= b


def le(a: float | None, b: float | None) -> bool:
    return a is not None and b is not None and a <= b
