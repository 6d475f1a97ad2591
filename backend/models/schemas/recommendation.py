"""Structured improvement recommendations.

Copy is rendered by the presentation layer from ``gap_id``; nothing here is
user-facing text.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from models.schemas.prediction import Dimension


class RecommendationCategory(str, Enum):
    ADD_MISSING_KEYWORDS = "add_missing_keywords"
    COMPLETE_SECTIONS = "complete_sections"
    OPTIMIZE_CV = "optimize_cv"
    APPLY_EARLIER = "apply_earlier"
    QUANTIFY_ACHIEVEMENTS = "quantify_achievements"
    IMPROVE_READABILITY = "improve_readability"
    HIGHLIGHT_RELEVANT_EXPERIENCE = "highlight_relevant_experience"
    ALIGN_TITLE = "align_title"
    ADD_CERTIFICATION = "add_certification"
    DEMONSTRATE_LEADERSHIP = "demonstrate_leadership"
    GAIN_EXPERIENCE = "gain_experience"

    @property
    def effort(self) -> int:
        """Static effort-to-fix, 1 (minutes) .. 5 (years)."""
        return _EFFORT[self]


_EFFORT: dict[RecommendationCategory, int] = {
    RecommendationCategory.ADD_MISSING_KEYWORDS: 1,
    RecommendationCategory.COMPLETE_SECTIONS: 1,
    RecommendationCategory.OPTIMIZE_CV: 1,
    RecommendationCategory.APPLY_EARLIER: 1,
    RecommendationCategory.QUANTIFY_ACHIEVEMENTS: 2,
    RecommendationCategory.IMPROVE_READABILITY: 2,
    RecommendationCategory.HIGHLIGHT_RELEVANT_EXPERIENCE: 2,
    RecommendationCategory.ALIGN_TITLE: 2,
    RecommendationCategory.ADD_CERTIFICATION: 3,
    RecommendationCategory.DEMONSTRATE_LEADERSHIP: 4,
    RecommendationCategory.GAIN_EXPERIENCE: 5,
}


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    gap_id: str  # e.g. "matching.skill_overlap_below_target"
    category: RecommendationCategory
    dimension: Dimension
    feature: str
    current_value: float
    target_value: float
    estimated_impact: float  # expected gain on ``dimension`` if addressed
    effort: int
    priority: int = 0  # 1 = most important
