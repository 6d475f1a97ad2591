"""Success-prediction orchestrator: the only entry point external callers use.

Flow:
    request ─ validate ─ fingerprint
      ├─ predictions cache hit? ───────────────────────────────→ return (stored recommendations)
      ├─ features cache hit? ─ refresh(behavior, derived) else extract(request)
      ├─ 5 predictors concurrently, each through FallbackManager.run()
      ├─ assemble SuccessPrediction (weighted confidence, degradation flag)
      ├─ RecommendationEngine.recommend(vector, prediction)
      ├─ store in both namespaces, register with OutcomeTracker
      └─ return

The whole cycle runs under ``request_budget_seconds``; if the budget runs out
the best partial result is returned flagged ``minimal`` and is not cached.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from config import Settings
from models.requests import OutcomeReport, PredictionRequest
from models.responses import CalibrationStats, SuccessPrediction
from models.schemas.feature_vector import FeatureVector
from models.schemas.outcome import OutcomeRecord
from models.schemas.prediction import DegradationLevel, Dimension, DimensionResult, SalaryEstimate, Tier
from services.prediction.cache import CacheNamespace, PredictionCache
from services.prediction.errors import PredictionValidationError
from services.prediction.extractors.pipeline import FeatureExtractionPipeline
from services.prediction.fallback import FallbackManager, aggregate_degradation
from services.prediction.fingerprint import feature_key, fingerprint
from services.prediction.heuristic import hire_probability, minimal_default, salary_insights, stage_breakdown
from services.prediction.outcomes import OutcomeTracker
from services.prediction.predictors.base import BasePredictor
from services.prediction.recommendations import RecommendationEngine

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _RequestState:
    """Progress of one request, readable after a budget timeout."""
    fingerprint: str
    vector: FeatureVector | None = None
    results: dict[Dimension, DimensionResult] = field(default_factory=dict)


class PredictionOrchestrator:
    def __init__(
        self,
        settings: Settings,
        cache: PredictionCache,
        extraction: FeatureExtractionPipeline,
        predictors: list[BasePredictor],
        fallback: FallbackManager,
        recommender: RecommendationEngine,
        tracker: OutcomeTracker,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._settings = settings
        self._cache = cache
        self._extraction = extraction
        self._predictors = predictors
        self._fallback = fallback
        self._recommender = recommender
        self._tracker = tracker
        self._clock = clock
        self._sweeper: asyncio.Task | None = None

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def predict_success(self, request: PredictionRequest | dict[str, Any]) -> SuccessPrediction:
        """Predict hiring outcomes. Raises only ``PredictionValidationError`` for bad input."""
        request = self.validate(request)
        fp = fingerprint(request)

        cached = self._cache.get(CacheNamespace.PREDICTIONS, fp)
        if cached is not None:
            logger.info("Prediction cache hit for %s", fp[:16])
            return cached

        state = _RequestState(fingerprint=fp)
        try:
            return await asyncio.wait_for(
                self._compute(request, state),
                timeout=self._settings.request_budget_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Request budget of %.1fs exhausted for %s with %d/%d dimensions done",
                self._settings.request_budget_seconds, fp[:16], len(state.results), len(self._predictors),
            )
            return self._assemble_exhausted(state)

    async def record_outcome(self, fingerprint: str, report: OutcomeReport) -> list[OutcomeRecord]:
        return await self._tracker.record_outcome(fingerprint, report)

    def invalidate(self, fingerprint: str) -> int:
        return self._cache.invalidate(fingerprint)

    def cache_stats(self) -> dict[str, int]:
        return self._cache.stats()

    def get_calibration_data(
        self,
        dimension: Dimension,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> CalibrationStats:
        return self._tracker.get_calibration_data(dimension, start, end)

    @staticmethod
    def validate(request: PredictionRequest | dict[str, Any]) -> PredictionRequest:
        if not isinstance(request, PredictionRequest):
            try:
                request = PredictionRequest.model_validate(request)
            except ValidationError as e:
                raise PredictionValidationError(str(e)) from e

        cv, job = request.cv, request.job
        if not (cv.skills or cv.experience or cv.summary.strip()):
            raise PredictionValidationError("CV has no skills, experience or summary")
        if not (job.title.strip() or job.description.strip()):
            raise PredictionValidationError("Job needs a title or description text")
        return request

    # ------------------------------------------------------------------
    # Background sweep
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the periodic cache sweep on the running event loop."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_loop())
            logger.info("Cache sweeper started (every %.0fs)", self._settings.cache_sweep_interval_seconds)

    async def stop(self) -> None:
        if self._sweeper is not None:
            self._sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sweeper
            self._sweeper = None

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._settings.cache_sweep_interval_seconds)
            try:
                self._cache.sweep()
            except Exception:
                logger.exception("Cache sweep failed")

    # ------------------------------------------------------------------
    # Request cycle
    # ------------------------------------------------------------------

    async def _compute(self, request: PredictionRequest, state: _RequestState) -> SuccessPrediction:
        fp = state.fingerprint
        fkey = feature_key(request)

        cached_vector = self._cache.get(CacheNamespace.FEATURES, fkey, fingerprint=fp)
        fresh_features = cached_vector is None
        if fresh_features:
            vector = await self._extraction.extract(request)
        else:
            logger.info("Feature cache hit for %s", fp[:16])
            vector = await self._extraction.refresh(request, cached_vector)
        state.vector = vector

        await asyncio.gather(*(self._predict_one(p, vector, state) for p in self._predictors))

        degradation = aggregate_degradation(
            {d: r.tier for d, r in state.results.items()},
            vector.partially_degraded,
        )
        prediction = self._assemble(state, degradation)
        prediction = prediction.model_copy(
            update={"recommendations": self._recommender.recommend(vector, prediction)}
        )

        # A degraded vector is not reused; the next request retries the failed extractors
        if fresh_features and not vector.partially_degraded:
            self._cache.set(CacheNamespace.FEATURES, fkey, vector, fingerprint=fp)
        self._cache.set(CacheNamespace.PREDICTIONS, fp, prediction, fingerprint=fp)
        self._tracker.register_prediction(prediction)
        return prediction

    async def _predict_one(self, predictor: BasePredictor, vector: FeatureVector, state: _RequestState) -> None:
        state.results[predictor.dimension] = await self._fallback.run(predictor, vector)

    def _minimal_result(self, dimension: Dimension) -> DimensionResult:
        output = minimal_default(dimension, self._settings.minimal_confidence)
        return DimensionResult(**output.model_dump(), dimension=dimension, tier=Tier.MINIMAL)

    def _assemble_exhausted(self, state: _RequestState) -> SuccessPrediction:
        prediction = self._assemble(state, DegradationLevel.MINIMAL)
        if state.vector is not None:
            prediction = prediction.model_copy(
                update={"recommendations": self._recommender.recommend(state.vector, prediction)}
            )
        return prediction

    def _overall_confidence(self, confidences: dict[Dimension, float], vector: FeatureVector | None) -> float:
        weights = self._settings.confidence_weights
        weighted = [
            (weights.get(d.value, 0.0) if weights else 1.0, c)
            for d, c in confidences.items()
        ]
        total = sum(w for w, _ in weighted)
        overall = sum(w * c for w, c in weighted) / total if total > 0 else 0.0

        if vector is not None and vector.partially_degraded:
            penalty = self._settings.feature_degradation_penalty * len(vector.degraded_extractors)
            overall *= max(0.0, 1.0 - penalty)
        return round(max(0.0, min(1.0, overall)), 4)

    def _assemble(self, state: _RequestState, degradation: DegradationLevel) -> SuccessPrediction:
        results = {
            d: state.results.get(d) or self._minimal_result(d)
            for d in Dimension
        }
        salary = results[Dimension.SALARY]
        days = int(round(results[Dimension.TIME_TO_HIRE].value))
        confidences = {d: r.confidence for d, r in results.items()}
        vector = state.vector or FeatureVector()

        return SuccessPrediction(
            fingerprint=state.fingerprint,
            interview_probability=results[Dimension.INTERVIEW].value,
            offer_probability=results[Dimension.OFFER].value,
            hire_probability=hire_probability(results[Dimension.OFFER].value),
            salary=SalaryEstimate(
                low=salary.low if salary.low is not None else salary.value,
                median=salary.value,
                high=salary.high if salary.high is not None else salary.value,
                **salary_insights(vector, salary.value),
            ),
            time_to_hire_days=days,
            time_to_hire_stages=stage_breakdown(days),
            competitiveness_score=results[Dimension.COMPETITIVENESS].value,
            confidence=confidences,
            overall_confidence=self._overall_confidence(confidences, state.vector),
            tiers={d: r.tier for d, r in results.items()},
            degradation=degradation,
            features_partially_degraded=bool(state.vector and state.vector.partially_degraded),
            created_at=self._clock(),
        )
