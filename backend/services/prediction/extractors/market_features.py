"""Market features: external signal about role, location and industry.

The extractor most likely to take its default path: it depends on an
external market-data provider that may be slow or down.
"""

import logging
from datetime import date

from pydantic import BaseModel

from models.requests import PredictionRequest
from models.schemas.feature_vector import MarketFeatures
from services.market_data import MARKET_FIELDS, MarketDataError, MarketDataSource
from services.prediction.errors import ExtractorError
from services.prediction.extractors.base import BaseFeatureExtractor
from services.prediction.extractors.career import as_of

logger = logging.getLogger(__name__)

_BOUNDS: dict[str, tuple[float, float]] = {
    "demand_index": (0.0, 1.0),
    "competition_level": (0.0, 1.0),
    "growth_trend": (-1.0, 1.0),
    "salary_index": (0.2, 5.0),
    "demand_supply_ratio": (0.0, 10.0),
}


def seasonality(day: date) -> float:
    """Hiring slows in Q1 and late Q4."""
    if day.month <= 3 or day.month >= 11:
        return 0.8
    return 1.0


class MarketFeatureExtractor(BaseFeatureExtractor):
    name = "market"
    sub_vector_type = MarketFeatures

    def __init__(self, source: MarketDataSource) -> None:
        self._source = source

    async def extract(self, request: PredictionRequest, upstream: dict[str, BaseModel] | None = None) -> MarketFeatures:
        job = request.job
        location = request.context.location or job.location
        try:
            payload = await self._source.fetch(job.title, location, job.industry)
        except MarketDataError as e:
            raise ExtractorError(str(e)) from e

        values: dict[str, float] = {}
        for field in MARKET_FIELDS:
            if field not in payload:
                continue
            try:
                low, high = _BOUNDS[field]
                values[field] = max(low, min(high, float(payload[field])))
            except (TypeError, ValueError):
                logger.warning("Ignoring non-numeric market field %s=%r", field, payload[field])

        return MarketFeatures(
            **values,
            seasonality=seasonality(as_of(request)),
            source=self._source.name,
        )
