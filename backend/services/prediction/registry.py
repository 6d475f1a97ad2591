"""Fixed extractor/predictor registries and the lazily built orchestrator.

The orchestrator is a global singleton, created on first use, with
``clear()`` for tests. A sixth dimension is one more ``PREDICTORS`` entry
(and enum member).
"""

import logging

from config import Settings, settings as default_settings
from models.schemas.prediction import Dimension
from services.market_data import build_market_source
from services.ml_client import ModelServingClient
from services.prediction.cache import InMemoryPredictionCache, PredictionCache
from services.prediction.extractors.base import BaseFeatureExtractor
from services.prediction.extractors.behavior_features import BehaviorFeatureExtractor
from services.prediction.extractors.cv_features import CVFeatureExtractor
from services.prediction.extractors.derived_features import DerivedFeatureExtractor
from services.prediction.extractors.market_features import MarketFeatureExtractor
from services.prediction.extractors.matching_features import MatchingFeatureExtractor
from services.prediction.extractors.pipeline import FeatureExtractionPipeline
from services.prediction.fallback import FallbackManager
from services.prediction.orchestrator import PredictionOrchestrator
from services.prediction.outcomes import OutcomeTracker
from services.prediction.predictors.base import ModelBackedPredictor
from services.prediction.predictors.competitiveness import CompetitivenessPredictor
from services.prediction.predictors.interview import InterviewPredictor
from services.prediction.predictors.offer import OfferPredictor
from services.prediction.predictors.salary import SalaryPredictor
from services.prediction.predictors.time_to_hire import TimeToHirePredictor
from services.prediction.recommendations import RecommendationEngine

logger = logging.getLogger(__name__)

PREDICTORS: dict[Dimension, type[ModelBackedPredictor]] = {
    Dimension.INTERVIEW: InterviewPredictor,
    Dimension.OFFER: OfferPredictor,
    Dimension.SALARY: SalaryPredictor,
    Dimension.TIME_TO_HIRE: TimeToHirePredictor,
    Dimension.COMPETITIVENESS: CompetitivenessPredictor,
}

_orchestrator: PredictionOrchestrator | None = None


def build_extractors(settings: Settings) -> list[BaseFeatureExtractor]:
    return [
        CVFeatureExtractor(),
        MatchingFeatureExtractor(semantic=settings.use_semantic_similarity),
        MarketFeatureExtractor(build_market_source(settings)),
        BehaviorFeatureExtractor(),
        DerivedFeatureExtractor(),
    ]


def build_predictors(settings: Settings) -> list[ModelBackedPredictor]:
    client = ModelServingClient(settings.ml_api_endpoint, settings.ml_api_key, timeout=settings.model_timeout_seconds)
    return [
        cls(client=client, model_dir=settings.model_dir, local_confidence=settings.local_model_confidence)
        for cls in PREDICTORS.values()
    ]


def build_orchestrator(
    settings: Settings = default_settings,
    cache: PredictionCache | None = None,
    extractors: list[BaseFeatureExtractor] | None = None,
    predictors: list | None = None,
    tracker: OutcomeTracker | None = None,
    fallback: FallbackManager | None = None,
) -> PredictionOrchestrator:
    """Wire the engine from settings; any component can be swapped (tests, external cache)."""
    return PredictionOrchestrator(
        settings=settings,
        cache=cache or InMemoryPredictionCache.from_settings(settings),
        extraction=FeatureExtractionPipeline(
            extractors if extractors is not None else build_extractors(settings),
            timeout=settings.extractor_timeout_seconds,
        ),
        predictors=predictors if predictors is not None else build_predictors(settings),
        fallback=fallback or FallbackManager.from_settings(settings),
        recommender=RecommendationEngine(max_recommendations=settings.max_recommendations),
        tracker=tracker or OutcomeTracker(max_predictions=settings.prediction_index_max_entries),
    )


def get_orchestrator() -> PredictionOrchestrator:
    """Get the process-wide orchestrator, creating it on first access."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = build_orchestrator()
        logger.info("Prediction orchestrator initialized")
    return _orchestrator


def clear() -> None:
    """Drop the singleton. Useful for testing."""
    global _orchestrator
    _orchestrator = None
