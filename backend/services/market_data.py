"""Market-data sources for the market feature extractor.

Resolution order when building the default source:
    1. HTTP provider (settings.market_data_endpoint)
    2. Gemini estimate (settings.gemini_api_key)
    3. Static industry baseline table (always available)

A source raises on failure; the extraction pipeline substitutes the market
sub-vector default.
"""

import logging
from abc import ABC, abstractmethod

import httpx

from services import gemini_client

logger = logging.getLogger(__name__)

MARKET_FIELDS = ("demand_index", "competition_level", "growth_trend", "salary_index", "demand_supply_ratio")

# Rough per-industry priors: demand, competition, growth, salary index, demand/supply
INDUSTRY_BASELINES: dict[str, dict[str, float]] = {
    "technology": {"demand_index": 0.75, "competition_level": 0.7, "growth_trend": 0.15, "salary_index": 1.2, "demand_supply_ratio": 1.2},
    "finance": {"demand_index": 0.6, "competition_level": 0.75, "growth_trend": 0.05, "salary_index": 1.25, "demand_supply_ratio": 0.9},
    "healthcare": {"demand_index": 0.8, "competition_level": 0.5, "growth_trend": 0.12, "salary_index": 1.05, "demand_supply_ratio": 1.4},
    "education": {"demand_index": 0.55, "competition_level": 0.5, "growth_trend": 0.03, "salary_index": 0.85, "demand_supply_ratio": 1.0},
    "retail": {"demand_index": 0.5, "competition_level": 0.6, "growth_trend": 0.01, "salary_index": 0.8, "demand_supply_ratio": 0.9},
    "manufacturing": {"demand_index": 0.55, "competition_level": 0.5, "growth_trend": 0.02, "salary_index": 0.95, "demand_supply_ratio": 1.0},
}
GENERIC_BASELINE: dict[str, float] = {"demand_index": 0.5, "competition_level": 0.5, "growth_trend": 0.0, "salary_index": 1.0, "demand_supply_ratio": 1.0}


class MarketDataError(Exception):
    """Market source unavailable or returned an unusable payload."""


class MarketDataSource(ABC):
    name: str = ""

    @abstractmethod
    async def fetch(self, role: str, location: str, industry: str) -> dict[str, float]:
        """Return a mapping with (a subset of) MARKET_FIELDS."""


class BaselineMarketDataSource(MarketDataSource):
    name = "baseline"

    async def fetch(self, role: str, location: str, industry: str) -> dict[str, float]:
        key = industry.lower().strip()
        for name, baseline in INDUSTRY_BASELINES.items():
            if name in key:
                return dict(baseline)
        return dict(GENERIC_BASELINE)


class HttpMarketDataSource(MarketDataSource):
    name = "http"

    def __init__(self, endpoint: str, api_key: str = "", timeout: float = 3.0) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout

    async def fetch(self, role: str, location: str, industry: str) -> dict[str, float]:
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        params = {"role": role, "location": location, "industry": industry}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, headers=headers) as client:
                response = await client.get(f"{self._endpoint}/market-signals", params=params)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise MarketDataError(f"Market data request failed: {e}") from e
        if not isinstance(payload, dict):
            raise MarketDataError("Market data payload is not an object")
        return payload


class GeminiMarketDataSource(MarketDataSource):
    name = "gemini"

    async def fetch(self, role: str, location: str, industry: str) -> dict[str, float]:
        prompt = (
            "Estimate current hiring-market signals as JSON with numeric keys "
            "demand_index (0-1), competition_level (0-1), growth_trend (-1 to 1), "
            "salary_index (relative to national median, 1.0 = median), "
            "demand_supply_ratio (open roles per qualified candidate). "
            f"Role: {role or 'unspecified'}. Location: {location or 'unspecified'}. "
            f"Industry: {industry or 'unspecified'}. Respond with JSON only."
        )
        data = await gemini_client.generate_json(prompt)
        if not data:
            raise MarketDataError("Gemini market estimate unavailable")
        return data


def build_market_source(settings) -> MarketDataSource:
    if settings.market_data_endpoint:
        return HttpMarketDataSource(
            settings.market_data_endpoint,
            settings.market_data_api_key,
            timeout=settings.extractor_timeout_seconds,
        )
    if settings.gemini_api_key:
        return GeminiMarketDataSource()
    return BaselineMarketDataSource()
