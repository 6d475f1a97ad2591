"""Interview probability: chance the application reaches an interview."""

from models.schemas.prediction import Dimension, PredictorOutput
from services.prediction.predictors.base import ModelBackedPredictor, clamp_confidence


class InterviewPredictor(ModelBackedPredictor):
    dimension = Dimension.INTERVIEW

    def normalize(self, value: float, low: float | None, high: float | None, confidence: float) -> PredictorOutput:
        return PredictorOutput(value=max(0.0, min(1.0, value)), confidence=clamp_confidence(confidence))
