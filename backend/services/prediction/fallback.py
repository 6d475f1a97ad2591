"""Three-tier fallback chain: model-backed -> heuristic -> minimal default.

Each dimension is served by the first strategy that succeeds within its own
timeout. The minimal tier is context-free and has no timeout; if it fails
too, that is a configuration error and ``FallbackExhaustedError`` propagates.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from models.schemas.feature_vector import FeatureVector
from models.schemas.prediction import DegradationLevel, Dimension, DimensionResult, PredictorOutput, Tier
from services.prediction.errors import FallbackExhaustedError
from services.prediction.heuristic import HeuristicPredictor, minimal_default
from services.prediction.predictors.base import BasePredictor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FallbackStrategy:
    tier: Tier
    run: Callable[[FeatureVector], Awaitable[PredictorOutput]]
    timeout: float | None
    confidence: float | None = None  # fixed tier confidence; None = as reported


class FallbackManager:
    def __init__(
        self,
        heuristic: HeuristicPredictor,
        model_timeout: float,
        heuristic_timeout: float,
        minimal_confidence: float,
    ) -> None:
        self._heuristic = heuristic
        self._model_timeout = model_timeout
        self._heuristic_timeout = heuristic_timeout
        self._minimal_confidence = minimal_confidence

    @classmethod
    def from_settings(cls, settings) -> "FallbackManager":
        return cls(
            heuristic=HeuristicPredictor(confidence=settings.heuristic_confidence),
            model_timeout=settings.model_timeout_seconds,
            heuristic_timeout=settings.heuristic_timeout_seconds,
            minimal_confidence=settings.minimal_confidence,
        )

    def strategies(self, predictor: BasePredictor) -> list[FallbackStrategy]:
        dimension = predictor.dimension

        async def heuristic(vector: FeatureVector) -> PredictorOutput:
            return self._heuristic.predict(dimension, vector)

        async def minimal(vector: FeatureVector) -> PredictorOutput:
            return minimal_default(dimension)

        return [
            FallbackStrategy(Tier.MODEL, predictor.predict, self._model_timeout),
            FallbackStrategy(Tier.HEURISTIC, heuristic, self._heuristic_timeout, self._heuristic.confidence),
            FallbackStrategy(Tier.MINIMAL, minimal, None, self._minimal_confidence),
        ]

    async def run(self, predictor: BasePredictor, vector: FeatureVector) -> DimensionResult:
        dimension = predictor.dimension
        for strategy in self.strategies(predictor):
            try:
                if strategy.timeout is None:
                    output = await strategy.run(vector)
                else:
                    output = await asyncio.wait_for(strategy.run(vector), timeout=strategy.timeout)
            except asyncio.TimeoutError:
                logger.warning("%s tier timed out for %s", strategy.tier.value, dimension.value)
                continue
            except Exception as e:
                logger.warning("%s tier failed for %s: %s", strategy.tier.value, dimension.value, e)
                continue

            confidence = output.confidence if strategy.confidence is None else strategy.confidence
            if strategy.tier is not Tier.MODEL:
                logger.info("%s served by %s tier", dimension.value, strategy.tier.value)
            return DimensionResult(
                **output.model_dump(exclude={"confidence"}),
                confidence=confidence,
                dimension=dimension,
                tier=strategy.tier,
            )

        logger.error("Fallback chain exhausted for %s", dimension.value)
        raise FallbackExhaustedError(dimension.value)


def aggregate_degradation(tiers: dict[Dimension, Tier], features_degraded: bool = False) -> DegradationLevel:
    """full: every dimension model-served on a complete vector;
    minimal: every dimension fell to the minimal tier; partial otherwise.
    """
    if tiers and all(t is Tier.MINIMAL for t in tiers.values()):
        return DegradationLevel.MINIMAL
    if features_degraded or any(t is not Tier.MODEL for t in tiers.values()):
        return DegradationLevel.PARTIAL
    return DegradationLevel.FULL
