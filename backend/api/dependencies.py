"""Shared dependencies for API routes."""

from services.prediction.orchestrator import PredictionOrchestrator
from services.prediction.registry import get_orchestrator


def get_prediction_orchestrator() -> PredictionOrchestrator:
    return get_orchestrator()
