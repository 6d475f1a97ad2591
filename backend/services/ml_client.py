"""Async client for the external model-serving endpoint."""

import logging

import httpx

from services.prediction.errors import ModelUnavailableError

logger = logging.getLogger(__name__)


class ModelServingClient:
    """POST {endpoint}/predict/{dimension} with {"features": {...}}.

    Expected response: {"value": float, "low"?: float, "high"?: float, "confidence"?: float}
    """

    def __init__(self, endpoint: str, api_key: str = "", timeout: float = 5.0) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._endpoint)

    async def predict(self, dimension: str, features: dict[str, float]) -> dict:
        if not self.configured:
            raise ModelUnavailableError("No model-serving endpoint configured")

        headers = {"X-Service": "success-prediction"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            async with httpx.AsyncClient(timeout=self._timeout, headers=headers) as client:
                response = await client.post(
                    f"{self._endpoint}/predict/{dimension}",
                    json={"features": features},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            raise ModelUnavailableError(f"Model service returned {e.response.status_code} for {dimension}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise ModelUnavailableError(f"Model service call failed for {dimension}: {e}") from e

        if not isinstance(payload, dict) or "value" not in payload:
            raise ModelUnavailableError(f"Malformed model response for {dimension}")
        return payload

