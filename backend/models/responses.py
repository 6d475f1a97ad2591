from datetime import datetime

from pydantic import BaseModel, ConfigDict

from models.schemas.prediction import DegradationLevel, Dimension, SalaryEstimate, StageBreakdown, Tier
from models.schemas.recommendation import Recommendation


class SuccessPrediction(BaseModel):
    """Result of one prediction cycle. Immutable and cached as-is."""
    model_config = ConfigDict(frozen=True)

    fingerprint: str
    interview_probability: float = 0.0
    offer_probability: float = 0.0
    hire_probability: float = 0.0
    salary: SalaryEstimate = SalaryEstimate()
    time_to_hire_days: int = 0
    time_to_hire_stages: StageBreakdown = StageBreakdown()
    competitiveness_score: float = 0.0  # 0-100

    confidence: dict[Dimension, float] = {}
    overall_confidence: float = 0.0
    tiers: dict[Dimension, Tier] = {}
    degradation: DegradationLevel = DegradationLevel.FULL
    features_partially_degraded: bool = False

    recommendations: list[Recommendation] = []
    created_at: datetime


class CalibrationStats(BaseModel):
    dimension: Dimension
    start: datetime | None = None
    end: datetime | None = None
    count: int = 0
    paired_count: int = 0  # outcomes with a registered prediction
    mean_actual: float | None = None
    mean_predicted: float | None = None
    mean_absolute_error: float | None = None
    brier_score: float | None = None  # probability dimensions only
