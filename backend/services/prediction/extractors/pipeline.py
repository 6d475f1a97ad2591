"""Feature extraction pipeline.

Flow:
    request
      ├─ cv        ┐
      ├─ matching  │ concurrent, each bounded by its own timeout,
      ├─ market    │ wait-for-all (never fail-fast)
      └─ behavior  ┘
              ↓
      derived(request, upstream={cv, matching, market, behavior})
              ↓
      FeatureVector (failed extractors -> default sub-vector, partially_degraded=True)

``refresh`` starts from a cached vector instead and reruns only the
request-scoped extractors (behavior) and then derived.
"""

import asyncio
import logging

from pydantic import BaseModel

from models.requests import PredictionRequest
from models.schemas.feature_vector import SUB_VECTOR_TYPES, FeatureVector
from services.prediction.extractors.base import BaseFeatureExtractor

logger = logging.getLogger(__name__)


class FeatureExtractionPipeline:
    def __init__(self, extractors: list[BaseFeatureExtractor], timeout: float) -> None:
        names = {e.name for e in extractors}
        if names != set(SUB_VECTOR_TYPES):
            raise ValueError(f"Extractors must cover exactly {sorted(SUB_VECTOR_TYPES)}, got {sorted(names)}")
        self._independent = [e for e in extractors if not e.depends_on_upstream]
        self._dependent = [e for e in extractors if e.depends_on_upstream]
        self._timeout = timeout

    async def _run_one(
        self,
        extractor: BaseFeatureExtractor,
        request: PredictionRequest,
        upstream: dict[str, BaseModel] | None,
    ) -> tuple[BaseModel, bool]:
        """Returns (sub_vector, degraded)."""
        try:
            extractor.ensure_loaded()
            result = await asyncio.wait_for(extractor.extract(request, upstream), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("Extractor '%s' timed out after %.1fs, using defaults", extractor.name, self._timeout)
            return extractor.default(), True
        except Exception as e:
            logger.warning("Extractor '%s' failed, using defaults: %s", extractor.name, e)
            return extractor.default(), True

        if not isinstance(result, extractor.sub_vector_type):
            logger.warning("Extractor '%s' returned %s, using defaults", extractor.name, type(result).__name__)
            return extractor.default(), True
        return result, False

    async def extract(self, request: PredictionRequest) -> FeatureVector:
        return await self._complete(request, self._independent, {}, set())

    async def refresh(self, request: PredictionRequest, cached: FeatureVector) -> FeatureVector:
        """Recompute the request-scoped and dependent sub-vectors of a cached vector."""
        scoped = [e for e in self._independent if e.request_scoped]
        rerun = {e.name for e in scoped} | {e.name for e in self._dependent}
        sub_vectors: dict[str, BaseModel] = {name: getattr(cached, name) for name in SUB_VECTOR_TYPES}
        degraded = set(cached.degraded_extractors) - rerun
        return await self._complete(request, scoped, sub_vectors, degraded)

    async def _complete(
        self,
        request: PredictionRequest,
        independent: list[BaseFeatureExtractor],
        sub_vectors: dict[str, BaseModel],
        degraded: set[str],
    ) -> FeatureVector:
        # --- Stage 1: independent extractors ---
        results = await asyncio.gather(
            *(self._run_one(e, request, None) for e in independent)
        )
        for extractor, (vector, failed) in zip(independent, results):
            sub_vectors[extractor.name] = vector
            if failed:
                degraded.add(extractor.name)

        # --- Stage 2: composites over stage 1 ---
        upstream = {k: v for k, v in sub_vectors.items() if k not in {e.name for e in self._dependent}}
        for extractor in self._dependent:
            vector, failed = await self._run_one(extractor, request, upstream)
            sub_vectors[extractor.name] = vector
            if failed:
                degraded.add(extractor.name)

        return FeatureVector(
            **sub_vectors,
            partially_degraded=bool(degraded),
            degraded_extractors=sorted(degraded),
        )
