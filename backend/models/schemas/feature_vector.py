"""Feature vector: five named sub-vectors consumed by every predictor.

Each sub-vector's field defaults ARE its documented default: an extractor
that fails or times out contributes ``SubVector()`` unchanged.
"""

from pydantic import BaseModel, ConfigDict


class CVFeatures(BaseModel):
    """Structural quality of the CV document itself."""
    model_config = ConfigDict(frozen=True)

    word_count: float = 0.0
    section_count: float = 0.0
    completeness: float = 0.0  # 0.0-1.0 share of standard sections present
    skills_count: float = 0.0
    experience_years: float = 0.0
    education_level: float = 1.0  # 1 none/other .. 5 doctorate
    certifications_count: float = 0.0
    projects_count: float = 0.0
    readability: float = 0.5
    formatting_score: float = 0.5
    quantified_achievement_ratio: float = 0.0


class MatchingFeatures(BaseModel):
    """Alignment between CV content and the target job."""
    model_config = ConfigDict(frozen=True)

    skill_overlap: float = 0.0  # matched required / required; 0.5 when the job lists none
    required_skills_count: float = 0.0
    preferred_overlap: float = 0.0
    title_similarity: float = 0.0
    seniority_match: float = 0.5
    experience_relevance: float = 0.0
    education_match: float = 0.5
    industry_experience: float = 0.0
    years_gap: float = 0.0  # candidate years - required years


class MarketFeatures(BaseModel):
    """Role/location/industry market signal."""
    model_config = ConfigDict(frozen=True)

    demand_index: float = 0.5
    competition_level: float = 0.5
    growth_trend: float = 0.0
    salary_index: float = 1.0
    demand_supply_ratio: float = 1.0
    seasonality: float = 1.0
    source: str = "default"


class BehaviorFeatures(BaseModel):
    """Applicant-side signals."""
    model_config = ConfigDict(frozen=True)

    days_since_posting: float = 7.0
    weekday_application: float = 1.0
    hour_of_day: float = 12.0
    channel_score: float = 1.0
    cv_optimization_level: float = 0.0
    platform_engagement: float = 0.5
    previous_applications: float = 0.0


class DerivedFeatures(BaseModel):
    """Composites computed from the other four sub-vectors."""
    model_config = ConfigDict(frozen=True)

    career_trajectory_slope: float = 0.0
    leadership_index: float = 0.3
    stability_score: float = 0.5
    adaptability_score: float = 0.5
    innovation_index: float = 0.3
    overqualification: float = 0.3
    underqualification: float = 0.2


SUB_VECTOR_TYPES: dict[str, type[BaseModel]] = {
    "cv": CVFeatures,
    "matching": MatchingFeatures,
    "market": MarketFeatures,
    "behavior": BehaviorFeatures,
    "derived": DerivedFeatures,
}


class FeatureVector(BaseModel):
    """Merged output of the extraction subsystem.

    All five sub-vectors are always present; a failed extractor leaves its
    defaults in place and is listed in ``degraded_extractors``.
    """
    model_config = ConfigDict(frozen=True)

    cv: CVFeatures = CVFeatures()
    matching: MatchingFeatures = MatchingFeatures()
    market: MarketFeatures = MarketFeatures()
    behavior: BehaviorFeatures = BehaviorFeatures()
    derived: DerivedFeatures = DerivedFeatures()

    partially_degraded: bool = False
    degraded_extractors: list[str] = []

    def flatten(self) -> dict[str, float]:
        """Numeric ``{"<sub>.<feature>": value}`` mapping; categorical fields are skipped."""
        flat: dict[str, float] = {}
        for name in SUB_VECTOR_TYPES:
            for key, value in getattr(self, name).model_dump().items():
                if isinstance(value, (int, float)):
                    flat[f"{name}.{key}"] = float(value)
        return flat

    @classmethod
    def feature_names(cls) -> list[str]:
        return list(cls().flatten())
