"""Abstract base class for feature extractors."""

from abc import ABC, abstractmethod
import logging

from pydantic import BaseModel

from models.requests import PredictionRequest

logger = logging.getLogger(__name__)


class BaseFeatureExtractor(ABC):
    """One extractor per feature-vector sub-vector.

    Subclasses must implement:
        - name: sub-vector name ("cv", "matching", ...)
        - sub_vector_type: the Pydantic sub-vector; ``sub_vector_type()`` is the default
        - extract(request, upstream): compute the sub-vector

    ``upstream`` carries the sub-vectors already extracted for this request;
    only extractors listed as dependent (``depends_on_upstream``) read it.
    Extractors that read the request context (``request_scoped``) are rerun
    even when the rest of the vector comes from the feature cache.
    """

    name: str = ""
    sub_vector_type: type[BaseModel] = BaseModel
    depends_on_upstream: bool = False
    request_scoped: bool = False
    _loaded: bool = False

    def load(self) -> None:
        """Load lookup tables or clients. Most extractors need nothing."""

    @abstractmethod
    async def extract(
        self,
        request: PredictionRequest,
        upstream: dict[str, BaseModel] | None = None,
    ) -> BaseModel:
        """Return this extractor's sub-vector."""

    def default(self) -> BaseModel:
        return self.sub_vector_type()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def ensure_loaded(self) -> None:
        if not self._loaded:
            logger.info("Loading extractor: %s", self.name)
            self.load()
            self._loaded = True
