"""Competitiveness: 0-100 standing against the likely applicant pool."""

from models.schemas.prediction import Dimension, PredictorOutput
from services.prediction.predictors.base import ModelBackedPredictor, clamp_confidence


class CompetitivenessPredictor(ModelBackedPredictor):
    dimension = Dimension.COMPETITIVENESS

    def normalize(self, value: float, low: float | None, high: float | None, confidence: float) -> PredictorOutput:
        return PredictorOutput(value=round(max(0.0, min(100.0, value)), 1), confidence=clamp_confidence(confidence))
