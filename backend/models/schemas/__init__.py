"""Inter-component Pydantic contracts for the success-prediction engine."""

from models.schemas.feature_vector import (
    BehaviorFeatures,
    CVFeatures,
    DerivedFeatures,
    FeatureVector,
    MarketFeatures,
    MatchingFeatures,
)
from models.schemas.outcome import OutcomeRecord, OutcomeType
from models.schemas.prediction import (
    DegradationLevel,
    Dimension,
    DimensionResult,
    PredictorOutput,
    SalaryEstimate,
    StageBreakdown,
    Tier,
)
from models.schemas.recommendation import Recommendation, RecommendationCategory

__all__ = [
    "BehaviorFeatures",
    "CVFeatures",
    "DerivedFeatures",
    "FeatureVector",
    "MarketFeatures",
    "MatchingFeatures",
    "OutcomeRecord",
    "OutcomeType",
    "DegradationLevel",
    "Dimension",
    "DimensionResult",
    "PredictorOutput",
    "SalaryEstimate",
    "StageBreakdown",
    "Tier",
    "Recommendation",
    "RecommendationCategory",
]
