import pytest

from services import gemini_client
from services.market_data import (
    GENERIC_BASELINE,
    BaselineMarketDataSource,
    GeminiMarketDataSource,
    HttpMarketDataSource,
    MarketDataError,
)


class TestBaselineSource:
    @pytest.mark.asyncio
    async def test_industry_substring_match(self):
        data = await BaselineMarketDataSource().fetch("Nurse", "Leeds", "Healthcare services")
        assert data["demand_index"] == 0.8

    @pytest.mark.asyncio
    async def test_generic_fallback_is_a_copy(self):
        data = await BaselineMarketDataSource().fetch("Clerk", "", "")
        data["demand_index"] = 0.0
        assert GENERIC_BASELINE["demand_index"] == 0.5


class TestRemoteSources:
    @pytest.mark.asyncio
    async def test_unreachable_http_provider_raises(self):
        source = HttpMarketDataSource("http://127.0.0.1:9", timeout=0.5)
        with pytest.raises(MarketDataError):
            await source.fetch("Engineer", "Berlin", "technology")

    @pytest.mark.asyncio
    async def test_gemini_without_answer_raises(self, monkeypatch):
        async def no_answer(prompt, max_output_tokens=512):
            return None

        monkeypatch.setattr(gemini_client, "generate_json", no_answer)
        with pytest.raises(MarketDataError):
            await GeminiMarketDataSource().fetch("Engineer", "Berlin", "technology")

    @pytest.mark.asyncio
    async def test_gemini_estimate_passed_through(self, monkeypatch):
        async def estimate(prompt, max_output_tokens=512):
            assert "Berlin" in prompt
            return {"demand_index": 0.66}

        monkeypatch.setattr(gemini_client, "generate_json", estimate)
        assert await GeminiMarketDataSource().fetch("Engineer", "Berlin", "technology") == {"demand_index": 0.66}


class TestGeminiClient:
    @pytest.mark.asyncio
    async def test_no_key_returns_none(self, monkeypatch):
        monkeypatch.setattr(gemini_client.settings, "gemini_api_key", "")
        assert await gemini_client.generate_json("anything") is None

    def test_strip_code_fences(self):
        assert gemini_client._strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert gemini_client._strip_code_fences(' {"a": 1} ') == '{"a": 1}'
