"""Exception taxonomy for the success-prediction engine.

Only ``PredictionValidationError`` and ``FallbackExhaustedError`` ever reach
callers; everything else is recovered by a default or a fallback tier.
"""


class PredictionError(Exception):
    """Base class for prediction engine errors."""


class PredictionValidationError(PredictionError, ValueError):
    """Malformed request, rejected before any extraction runs."""


class ExtractorError(PredictionError):
    """A single feature extractor failed; its default sub-vector is used."""


class ModelUnavailableError(PredictionError):
    """The model-backed tier cannot serve (no artifact, no endpoint, bad response)."""


class FallbackExhaustedError(PredictionError):
    """Even the minimal-default tier failed. Configuration error, never degraded silently."""

    def __init__(self, dimension: str) -> None:
        super().__init__(f"All fallback tiers failed for dimension '{dimension}'")
        self.dimension = dimension
