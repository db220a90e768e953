"""Rule-based scoring of entries and open positions."""

from scalp_advisor.scoring.grading import grade_score
from scalp_advisor.scoring.holdability import HOLD_RULES, HoldabilityScorer
from scalp_advisor.scoring.rules import Rule, RuleEvaluation, evaluate_rules
from scalp_advisor.scoring.signal_scorer import LONG_RULES, SHORT_RULES, SignalScorer

__all__ = [
    "grade_score",
    "HOLD_RULES",
    "HoldabilityScorer",
    "Rule",
    "RuleEvaluation",
    "evaluate_rules",
    "LONG_RULES",
    "SHORT_RULES",
    "SignalScorer",
]
