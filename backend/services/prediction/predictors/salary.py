"""Salary estimate: point estimate plus range."""

from models.schemas.prediction import Dimension, PredictorOutput
from services.prediction.predictors.base import ModelBackedPredictor, clamp_confidence

# Range used when the model only returns a point estimate
RANGE_LOW = 0.8
RANGE_HIGH = 1.3


def salary_output(median: float, low: float | None, high: float | None, confidence: float) -> PredictorOutput:
    median = max(0.0, median)
    low = median * RANGE_LOW if low is None else max(0.0, min(low, median))
    high = median * RANGE_HIGH if high is None else max(high, median)
    return PredictorOutput(
        value=round(median),
        low=round(low),
        high=round(high),
        confidence=clamp_confidence(confidence),
    )


class SalaryPredictor(ModelBackedPredictor):
    dimension = Dimension.SALARY

    def normalize(self, value: float, low: float | None, high: float | None, confidence: float) -> PredictorOutput:
        return salary_output(value, low, high, confidence)
