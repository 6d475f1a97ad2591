import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False
    rate_limit: str = "30/minute"

    # Cache: predictions outlive features (model calls are the expensive step)
    prediction_ttl_seconds: float = 24 * 60 * 60
    feature_ttl_seconds: float = 6 * 60 * 60
    cache_max_entries: int = 1000  # per namespace
    cache_evict_fraction: float = 0.1
    cache_sweep_interval_seconds: float = 10 * 60

    # Timeouts
    extractor_timeout_seconds: float = 3.0
    model_timeout_seconds: float = 5.0
    heuristic_timeout_seconds: float = 1.0
    request_budget_seconds: float = 30.0

    # Confidence
    heuristic_confidence: float = 0.5
    minimal_confidence: float = 0.2
    local_model_confidence: float = 0.8
    confidence_weights: dict[str, float] = {}  # empty -> equal weights
    feature_degradation_penalty: float = 0.15  # per degraded sub-vector

    max_recommendations: int = 10
    prediction_index_max_entries: int = 10_000  # issued predictions kept for calibration pairing

    # External collaborators
    ml_api_endpoint: str = ""
    ml_api_key: str = ""
    market_data_endpoint: str = ""
    market_data_api_key: str = ""
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    model_dir: str = "models/artifacts"  # <model_dir>/<dimension>/model.txt
    use_semantic_similarity: bool = False
    semantic_model: str = "TechWolf/JobBERT-v2"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "protected_namespaces": ("settings_",)}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
