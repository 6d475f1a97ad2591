"""Time-to-hire: whole days from application to offer."""

from models.schemas.prediction import Dimension, PredictorOutput
from services.prediction.predictors.base import ModelBackedPredictor, clamp_confidence

MAX_DAYS = 365


class TimeToHirePredictor(ModelBackedPredictor):
    dimension = Dimension.TIME_TO_HIRE

    def normalize(self, value: float, low: float | None, high: float | None, confidence: float) -> PredictorOutput:
        days = max(1, min(MAX_DAYS, round(value)))
        return PredictorOutput(value=days, confidence=clamp_confidence(confidence))
