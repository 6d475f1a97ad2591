"""Deterministic request fingerprints used as cache and outcome keys."""

import hashlib
import json
from typing import Any

from models.requests import PredictionRequest

# Volatile fields that must not split the cache
_VOLATILE_CONTEXT = {"timestamp"}
# Behavior sub-vectors are recomputed on every feature-cache hit, so these
# may differ between requests sharing a feature entry
_FEATURE_KEY_EXCLUDED_CONTEXT = {"timestamp", "application_channel", "engagement_score", "previous_applications"}
# Order and repeats carry no meaning in these lists
_SET_LIKE_LISTS = {"skills", "required_skills", "preferred_skills"}


def _normalize(value: Any, key: str | None = None) -> Any:
    if isinstance(value, str):
        return " ".join(value.lower().split())
    if isinstance(value, dict):
        return {k: _normalize(v, k) for k, v in value.items()}
    if isinstance(value, list):
        items = [_normalize(v) for v in value]
        if key in _SET_LIKE_LISTS:
            return sorted(set(items))
        return items
    return value


def _digest(payload: dict) -> str:
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def fingerprint(request: PredictionRequest) -> str:
    """Stable hash of the normalized request (excluding its timestamp)."""
    payload = request.model_dump(mode="json", exclude={"context": _VOLATILE_CONTEXT})
    return _digest(_normalize(payload))


def feature_key(request: PredictionRequest) -> str:
    """Coarser CV + job + location signature for the features namespace."""
    payload = request.model_dump(mode="json", exclude={"context": _FEATURE_KEY_EXCLUDED_CONTEXT})
    return "features:" + _digest(_normalize(payload))
