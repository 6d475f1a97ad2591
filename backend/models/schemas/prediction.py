"""Per-dimension predictor contracts."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Dimension(str, Enum):
    INTERVIEW = "interview_probability"
    OFFER = "offer_probability"
    SALARY = "salary"
    TIME_TO_HIRE = "time_to_hire"
    COMPETITIVENESS = "competitiveness"


class Tier(str, Enum):
    """Fallback chain level that served a dimension."""
    MODEL = "model"
    HEURISTIC = "heuristic"
    MINIMAL = "minimal"


class DegradationLevel(str, Enum):
    FULL = "full"
    PARTIAL = "partial"
    MINIMAL = "minimal"


class PredictorOutput(BaseModel):
    """What a single predictor returns for its dimension.

    ``low``/``high`` are only meaningful for range-valued dimensions (salary).
    """
    model_config = ConfigDict(frozen=True)

    value: float
    low: float | None = None
    high: float | None = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)


class DimensionResult(PredictorOutput):
    dimension: Dimension
    tier: Tier


class SalaryEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    low: float = 0.0
    median: float = 0.0
    high: float = 0.0
    currency: str = "USD"
    market_percentile: int = Field(50, ge=0, le=100)
    negotiation_potential: float = Field(0.3, ge=0.0, le=1.0)
    experience_premium: float = 0.0  # % of the median attributable to experience


class StageBreakdown(BaseModel):
    """Days per hiring stage; the stages sum to the time-to-hire estimate."""
    model_config = ConfigDict(frozen=True)

    application_review: int = 3
    initial_screening: int = 5
    interviews: int = 7
    decision_making: int = 4
    offer_negotiation: int = 2

    @property
    def total_days(self) -> int:
        return sum(self.model_dump().values())
