"""Model-backed predictors: one per outcome dimension.

A predictor either evaluates a local LightGBM booster
(``<model_dir>/<dimension>/model.txt``) or calls the external model-serving
endpoint. When neither is available it raises ``ModelUnavailableError`` and
the fallback manager moves on to the heuristic tier.
"""

from abc import ABC, abstractmethod
import logging
from pathlib import Path

import numpy as np

from config import settings
from models.schemas.feature_vector import FeatureVector
from models.schemas.prediction import Dimension, PredictorOutput
from services.ml_client import ModelServingClient
from services.prediction.errors import ModelUnavailableError

logger = logging.getLogger(__name__)


class BasePredictor(ABC):
    """Subclasses must implement:
        - dimension: which outcome this predictor scores
        - predict(vector): async, returns PredictorOutput
    """

    dimension: Dimension
    _loaded: bool = False

    def load(self) -> None:
        """Load model artifacts. Called once before the first prediction."""

    @abstractmethod
    async def predict(self, vector: FeatureVector) -> PredictorOutput:
        """Score one feature vector."""

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def ensure_loaded(self) -> None:
        if not self._loaded:
            logger.info("Loading predictor: %s", self.dimension.value)
            self.load()
            self._loaded = True


class ModelBackedPredictor(BasePredictor):
    def __init__(
        self,
        client: ModelServingClient | None = None,
        model_dir: str | None = None,
        local_confidence: float | None = None,
    ) -> None:
        self._client = client
        self._model_dir = Path(model_dir or settings.model_dir)
        self._local_confidence = settings.local_model_confidence if local_confidence is None else local_confidence
        self._booster = None

    def load(self) -> None:
        model_path = self._model_dir / self.dimension.value / "model.txt"
        if model_path.exists():
            try:
                import lightgbm as lgb
                self._booster = lgb.Booster(model_file=str(model_path))
                logger.info("%s model loaded from %s", self.dimension.value, model_path)
                return
            except Exception as e:
                logger.warning("Failed to load %s model: %s", self.dimension.value, e)

        if self._client is not None and self._client.configured:
            logger.info("%s using remote model-serving endpoint", self.dimension.value)
        else:
            logger.info("%s has no model available, heuristic tier will serve", self.dimension.value)

    async def predict(self, vector: FeatureVector) -> PredictorOutput:
        self.ensure_loaded()
        features = vector.flatten()

        if self._booster is not None:
            return self.normalize(self._booster_predict(features), None, None, self._local_confidence)

        if self._client is None or not self._client.configured:
            raise ModelUnavailableError(f"No model for {self.dimension.value}")

        payload = await self._client.predict(self.dimension.value, features)
        try:
            value = float(payload["value"])
            low = float(payload["low"]) if payload.get("low") is not None else None
            high = float(payload["high"]) if payload.get("high") is not None else None
            confidence = float(payload.get("confidence", self._local_confidence))
        except (TypeError, ValueError) as e:
            raise ModelUnavailableError(f"Non-numeric model response for {self.dimension.value}") from e
        if not np.isfinite(value):
            raise ModelUnavailableError(f"Non-finite model output for {self.dimension.value}")
        return self.normalize(value, low, high, confidence)

    def _booster_predict(self, features: dict[str, float]) -> float:
        names = FeatureVector.feature_names()
        feature_vec = np.array([[features[name] for name in names]])
        return float(self._booster.predict(feature_vec)[0])

    @abstractmethod
    def normalize(self, value: float, low: float | None, high: float | None, confidence: float) -> PredictorOutput:
        """Clamp raw model output into this dimension's range."""


def clamp_confidence(confidence: float) -> float:
    return max(0.0, min(1.0, confidence))
