"""Recommendation engine: ranked feature gaps with estimated impact.

Impact is expressed as a fraction of the remaining headroom on the affected
dimension, so gaps on different dimensions rank on one scale. Ties on impact
go to the category that is cheaper to fix.
"""

import logging
from dataclasses import dataclass

from models.responses import SuccessPrediction
from models.schemas.feature_vector import FeatureVector
from models.schemas.prediction import Dimension
from models.schemas.recommendation import Recommendation, RecommendationCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GapRule:
    feature: str  # "<sub_vector>.<field>"
    target: float
    category: RecommendationCategory
    dimension: Dimension
    max_impact: float
    higher_is_better: bool = True
    applies_when: str | None = None  # feature that must be positive for the gap to exist

    @property
    def sub_vector(self) -> str:
        return self.feature.split(".", 1)[0]

    @property
    def gap_id(self) -> str:
        return f"{self.feature}_{'below' if self.higher_is_better else 'above'}_target"


RULES: list[GapRule] = [
    GapRule("matching.skill_overlap", 0.7, RecommendationCategory.ADD_MISSING_KEYWORDS, Dimension.INTERVIEW, 0.15,
            applies_when="matching.required_skills_count"),
    GapRule("matching.experience_relevance", 0.6, RecommendationCategory.HIGHLIGHT_RELEVANT_EXPERIENCE, Dimension.INTERVIEW, 0.12),
    GapRule("matching.title_similarity", 0.3, RecommendationCategory.ALIGN_TITLE, Dimension.INTERVIEW, 0.06),
    GapRule("cv.completeness", 0.8, RecommendationCategory.COMPLETE_SECTIONS, Dimension.INTERVIEW, 0.08),
    GapRule("cv.readability", 0.7, RecommendationCategory.IMPROVE_READABILITY, Dimension.INTERVIEW, 0.04),
    GapRule("cv.quantified_achievement_ratio", 0.3, RecommendationCategory.QUANTIFY_ACHIEVEMENTS, Dimension.OFFER, 0.06),
    GapRule("cv.certifications_count", 1.0, RecommendationCategory.ADD_CERTIFICATION, Dimension.COMPETITIVENESS, 0.05),
    GapRule("behavior.cv_optimization_level", 0.5, RecommendationCategory.OPTIMIZE_CV, Dimension.INTERVIEW, 0.05),
    GapRule("behavior.days_since_posting", 14.0, RecommendationCategory.APPLY_EARLIER, Dimension.INTERVIEW, 0.05, higher_is_better=False),
    GapRule("derived.leadership_index", 0.4, RecommendationCategory.DEMONSTRATE_LEADERSHIP, Dimension.OFFER, 0.08),
    GapRule("matching.years_gap", 0.0, RecommendationCategory.GAIN_EXPERIENCE, Dimension.OFFER, 0.15),
]

YEARS_GAP_SCALE = 5.0  # a five-year shortfall is a full gap


def _feature_value(vector: FeatureVector, feature: str) -> float:
    sub_vector, field = feature.split(".", 1)
    return float(getattr(getattr(vector, sub_vector), field))


def _gap_ratio(rule: GapRule, value: float) -> float:
    """0 when the target is met, up to 1 for the largest gap."""
    if rule.higher_is_better:
        if value >= rule.target:
            return 0.0
        scale = rule.target if rule.target > 0 else YEARS_GAP_SCALE
        return min(1.0, (rule.target - value) / scale)
    if value <= rule.target:
        return 0.0
    return min(1.0, (value - rule.target) / rule.target)


def _headroom(prediction: SuccessPrediction, dimension: Dimension) -> float:
    if dimension is Dimension.INTERVIEW:
        return 1.0 - prediction.interview_probability
    if dimension is Dimension.OFFER:
        return 1.0 - prediction.offer_probability
    if dimension is Dimension.COMPETITIVENESS:
        return 1.0 - prediction.competitiveness_score / 100
    return 1.0


class RecommendationEngine:
    def __init__(self, rules: list[GapRule] | None = None, max_recommendations: int = 10) -> None:
        self._rules = RULES if rules is None else rules
        self._max = max_recommendations

    def recommend(self, vector: FeatureVector, prediction: SuccessPrediction) -> list[Recommendation]:
        candidates: list[Recommendation] = []
        for rule in self._rules:
            # defaults from a failed extractor are not real gaps
            if rule.sub_vector in vector.degraded_extractors:
                continue
            if rule.applies_when and _feature_value(vector, rule.applies_when) <= 0:
                continue
            value = _feature_value(vector, rule.feature)
            gap = _gap_ratio(rule, value)
            if gap <= 0:
                continue
            impact = rule.max_impact * gap * max(0.0, _headroom(prediction, rule.dimension))
            candidates.append(Recommendation(
                gap_id=rule.gap_id,
                category=rule.category,
                dimension=rule.dimension,
                feature=rule.feature,
                current_value=round(value, 4),
                target_value=rule.target,
                estimated_impact=round(impact, 4),
                effort=rule.category.effort,
            ))

        candidates.sort(key=lambda r: (-r.estimated_impact, r.effort, r.gap_id))
        ranked = [
            rec.model_copy(update={"priority": rank})
            for rank, rec in enumerate(candidates[: self._max], start=1)
        ]
        logger.debug("Generated %d recommendations (%d gaps found)", len(ranked), len(candidates))
        return ranked
