"""Gemini JSON estimates, used as a secondary market-signal source."""

import json
import logging

from google import genai
from google.genai import types

from config import settings

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def get_client() -> genai.Client | None:
    """Shared client, or None when no API key is configured."""
    global _client
    if not settings.gemini_api_key:
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if not text.startswith("```"):
        return text
    body = text.split("\n", 1)[1] if "\n" in text else text[3:]
    return body.removesuffix("```").strip()


async def generate_json(prompt: str, max_output_tokens: int = 512) -> dict | None:
    """One JSON object from Gemini, or None on any failure (caller falls back)."""
    client = get_client()
    if client is None:
        return None

    config = types.GenerateContentConfig(
        temperature=0.1,
        max_output_tokens=max_output_tokens,
        response_mime_type="application/json",
    )
    try:
        response = await client.aio.models.generate_content(
            model=settings.gemini_model, contents=prompt, config=config,
        )
        data = json.loads(_strip_code_fences(response.text or ""))
    except json.JSONDecodeError as e:
        logger.warning("Gemini returned non-JSON output: %s", e)
        return None
    except Exception as e:
        logger.warning("Gemini request failed: %s", e)
        return None

    if not isinstance(data, dict):
        logger.warning("Gemini returned %s instead of an object", type(data).__name__)
        return None
    return data
