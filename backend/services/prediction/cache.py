"""Two-namespace prediction cache.

``predictions`` entries live longer than ``features`` entries: the model
invocation is the expensive step being amortized, while market signal inside
the feature vector goes stale sooner.

The orchestrator depends only on ``PredictionCache``; ``InMemoryPredictionCache``
is the in-process implementation.
"""

import logging
import math
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel

from models.responses import SuccessPrediction
from models.schemas.feature_vector import FeatureVector

logger = logging.getLogger(__name__)


class CacheNamespace(str, Enum):
    PREDICTIONS = "predictions"
    FEATURES = "features"


_PAYLOAD_TYPES: dict[CacheNamespace, type[BaseModel]] = {
    CacheNamespace.PREDICTIONS: SuccessPrediction,
    CacheNamespace.FEATURES: FeatureVector,
}


@dataclass
class CacheEntry:
    payload: BaseModel
    created_at: float
    ttl_class: CacheNamespace
    fingerprints: set[str] = field(default_factory=set)


class PredictionCache(ABC):
    """Interface the orchestrator talks to."""

    @abstractmethod
    def get(self, namespace: CacheNamespace, key: str, fingerprint: str | None = None) -> BaseModel | None:
        """Return the live payload or None. ``fingerprint`` tags the entry for invalidation."""

    @abstractmethod
    def set(self, namespace: CacheNamespace, key: str, payload: BaseModel, fingerprint: str | None = None) -> None:
        """Insert or replace (last write wins)."""

    @abstractmethod
    def invalidate(self, fingerprint: str) -> int:
        """Drop every entry keyed by or tagged with ``fingerprint`` in both namespaces."""

    @abstractmethod
    def sweep(self) -> int:
        """Purge expired entries. Returns the number removed."""

    @abstractmethod
    def stats(self) -> dict[str, int]:
        """Live entry counts per namespace."""


class InMemoryPredictionCache(PredictionCache):
    def __init__(
        self,
        prediction_ttl: float,
        feature_ttl: float,
        max_entries: int = 1000,
        evict_fraction: float = 0.1,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl = {
            CacheNamespace.PREDICTIONS: prediction_ttl,
            CacheNamespace.FEATURES: feature_ttl,
        }
        self._max_entries = max_entries
        self._evict_fraction = evict_fraction
        self._clock = clock
        self._lock = threading.Lock()
        # dicts keep insertion order, which doubles as eviction order
        self._stores: dict[CacheNamespace, dict[str, CacheEntry]] = {ns: {} for ns in CacheNamespace}

    @classmethod
    def from_settings(cls, settings) -> "InMemoryPredictionCache":
        return cls(
            prediction_ttl=settings.prediction_ttl_seconds,
            feature_ttl=settings.feature_ttl_seconds,
            max_entries=settings.cache_max_entries,
            evict_fraction=settings.cache_evict_fraction,
        )

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at > self._ttl[entry.ttl_class]

    def get(self, namespace: CacheNamespace, key: str, fingerprint: str | None = None) -> BaseModel | None:
        with self._lock:
            store = self._stores[namespace]
            entry = store.get(key)
            if entry is None:
                return None
            if self._is_expired(entry, self._clock()):
                del store[key]
                return None
            if not isinstance(entry.payload, _PAYLOAD_TYPES[namespace]):
                logger.warning("Malformed %s cache entry for %s, treating as miss", namespace.value, key[:16])
                del store[key]
                return None
            if fingerprint is not None:
                entry.fingerprints.add(fingerprint)
            return entry.payload

    def set(self, namespace: CacheNamespace, key: str, payload: BaseModel, fingerprint: str | None = None) -> None:
        entry = CacheEntry(
            payload=payload,
            created_at=self._clock(),
            ttl_class=namespace,
            fingerprints={fingerprint} if fingerprint else set(),
        )
        with self._lock:
            store = self._stores[namespace]
            store.pop(key, None)  # re-insert at the young end
            store[key] = entry
            if len(store) > self._max_entries:
                self._evict_oldest(namespace)

    def _evict_oldest(self, namespace: CacheNamespace) -> None:
        store = self._stores[namespace]
        n_evict = max(1, math.ceil(len(store) * self._evict_fraction))
        for key in list(store)[:n_evict]:
            del store[key]
        logger.info("Evicted %d oldest %s cache entries", n_evict, namespace.value)

    def invalidate(self, fingerprint: str) -> int:
        removed = 0
        with self._lock:
            for store in self._stores.values():
                stale = [
                    key for key, entry in store.items()
                    if key == fingerprint or fingerprint in entry.fingerprints
                ]
                for key in stale:
                    del store[key]
                removed += len(stale)
        if removed:
            logger.info("Invalidated %d cache entries for %s", removed, fingerprint[:16])
        return removed

    def sweep(self) -> int:
        removed = 0
        with self._lock:
            now = self._clock()
            for store in self._stores.values():
                expired = [key for key, entry in store.items() if self._is_expired(entry, now)]
                for key in expired:
                    del store[key]
                removed += len(expired)
        if removed:
            logger.debug("Cache sweep purged %d expired entries", removed)
        return removed

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {ns.value: len(store) for ns, store in self._stores.items()}

    def clear(self) -> None:
        with self._lock:
            for store in self._stores.values():
                store.clear()
