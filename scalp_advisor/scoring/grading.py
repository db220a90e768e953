"""Score grading."""

from scalp_advisor.models.config import RecommendationConfig
from scalp_advisor.models.signal import ScoreGrade


def grade_score(score: float, config: RecommendationConfig | None = None) -> ScoreGrade:
    """Bucket a score: >= strong_grade is STRONG, >= moderate_grade MODERATE, else WEAK."""
    config = config or RecommendationConfig()
    if score >= config.strong_grade:
        return ScoreGrade.STRONG
    if score >= config.moderate_grade:
        return ScoreGrade.MODERATE
    return ScoreGrade.WEAK
