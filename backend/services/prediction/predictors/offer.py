"""Offer probability: chance the application ends in an offer."""

from models.schemas.prediction import Dimension, PredictorOutput
from services.prediction.predictors.base import ModelBackedPredictor, clamp_confidence


class OfferPredictor(ModelBackedPredictor):
    dimension = Dimension.OFFER

    def normalize(self, value: float, low: float | None, high: float | None, confidence: float) -> PredictorOutput:
        return PredictorOutput(value=max(0.0, min(1.0, value)), confidence=clamp_confidence(confidence))
