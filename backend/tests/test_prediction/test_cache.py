"""Tests for the two-namespace prediction cache."""

from datetime import datetime, timezone

import pytest

from models.responses import SuccessPrediction
from models.schemas.feature_vector import FeatureVector
from services.prediction.cache import CacheNamespace, InMemoryPredictionCache
from stubs import FakeClock

P = CacheNamespace.PREDICTIONS
F = CacheNamespace.FEATURES


def _prediction(fp: str) -> SuccessPrediction:
    return SuccessPrediction(fingerprint=fp, created_at=datetime(2024, 6, 12, tzinfo=timezone.utc))


@pytest.fixture
def small_cache():
    clock = FakeClock()
    cache = InMemoryPredictionCache(prediction_ttl=100, feature_ttl=10, max_entries=10, clock=clock)
    return cache, clock


class TestGetSet:
    def test_miss_returns_none(self, small_cache):
        cache, _ = small_cache
        assert cache.get(P, "nope") is None

    def test_hit_returns_stored_object(self, small_cache):
        cache, _ = small_cache
        prediction = _prediction("fp1")
        cache.set(P, "fp1", prediction)
        assert cache.get(P, "fp1") is prediction

    def test_namespaces_are_separate(self, small_cache):
        cache, _ = small_cache
        cache.set(F, "k", FeatureVector())
        assert cache.get(P, "k") is None
        assert cache.get(F, "k") is not None

    def test_last_write_wins(self, small_cache):
        cache, _ = small_cache
        first, second = _prediction("fp1"), _prediction("fp1")
        cache.set(P, "fp1", first)
        cache.set(P, "fp1", second)
        assert cache.get(P, "fp1") is second
        assert cache.stats() == {"predictions": 1, "features": 0}

    def test_wrong_payload_type_is_a_miss(self, small_cache):
        cache, _ = small_cache
        cache.set(P, "fp1", FeatureVector())
        assert cache.get(P, "fp1") is None
        assert cache.stats()["predictions"] == 0


class TestExpiry:
    def test_alive_at_exact_ttl(self, small_cache):
        cache, clock = small_cache
        cache.set(P, "fp1", _prediction("fp1"))
        clock.advance(100)
        assert cache.get(P, "fp1") is not None

    def test_expired_just_past_ttl(self, small_cache):
        cache, clock = small_cache
        cache.set(P, "fp1", _prediction("fp1"))
        clock.advance(100.001)
        assert cache.get(P, "fp1") is None

    def test_features_expire_before_predictions(self, small_cache):
        cache, clock = small_cache
        cache.set(P, "fp1", _prediction("fp1"))
        cache.set(F, "features:abc", FeatureVector())
        clock.advance(50)
        assert cache.get(F, "features:abc") is None
        assert cache.get(P, "fp1") is not None

    def test_sweep_purges_only_expired(self, small_cache):
        cache, clock = small_cache
        cache.set(P, "old", _prediction("old"))
        cache.set(F, "features:old", FeatureVector())
        clock.advance(60)
        cache.set(P, "new", _prediction("new"))

        removed = cache.sweep()
        assert removed == 1  # the feature entry; "old" prediction still has 40s
        assert cache.stats() == {"predictions": 2, "features": 0}

        clock.advance(45)
        assert cache.sweep() == 1
        assert cache.get(P, "new") is not None

    def test_default_ttls_from_settings(self, test_settings):
        cache = InMemoryPredictionCache.from_settings(test_settings)
        assert cache._ttl[P] == 24 * 60 * 60
        assert cache._ttl[F] == 6 * 60 * 60


class TestEviction:
    def test_oldest_tenth_evicted_when_over_capacity(self, small_cache):
        cache, _ = small_cache
        for i in range(11):
            cache.set(P, f"fp{i}", _prediction(f"fp{i}"))

        # 11 entries > 10: ceil(11 * 0.1) = 2 oldest go
        assert cache.stats()["predictions"] == 9
        assert cache.get(P, "fp0") is None
        assert cache.get(P, "fp1") is None
        assert all(cache.get(P, f"fp{i}") is not None for i in range(2, 11))

    def test_rewrite_moves_entry_to_young_end(self, small_cache):
        cache, _ = small_cache
        for i in range(10):
            cache.set(P, f"fp{i}", _prediction(f"fp{i}"))
        cache.set(P, "fp0", _prediction("fp0"))
        cache.set(P, "fp10", _prediction("fp10"))

        assert cache.get(P, "fp0") is not None
        assert cache.get(P, "fp1") is None
        assert cache.get(P, "fp2") is None

    def test_eviction_is_per_namespace(self, small_cache):
        cache, _ = small_cache
        cache.set(F, "features:keep", FeatureVector())
        for i in range(11):
            cache.set(P, f"fp{i}", _prediction(f"fp{i}"))
        assert cache.get(F, "features:keep") is not None


class TestInvalidate:
    def test_removes_prediction_and_tagged_features(self, small_cache):
        cache, _ = small_cache
        cache.set(P, "fp1", _prediction("fp1"), fingerprint="fp1")
        cache.set(F, "features:shared", FeatureVector(), fingerprint="fp1")
        cache.set(P, "fp2", _prediction("fp2"), fingerprint="fp2")

        assert cache.invalidate("fp1") == 2
        assert cache.get(P, "fp1") is None
        assert cache.get(F, "features:shared") is None
        assert cache.get(P, "fp2") is not None

    def test_get_with_fingerprint_tags_entry(self, small_cache):
        cache, _ = small_cache
        cache.set(F, "features:shared", FeatureVector(), fingerprint="fp1")
        assert cache.get(F, "features:shared", fingerprint="fp2") is not None

        assert cache.invalidate("fp2") == 1
        assert cache.get(F, "features:shared") is None

    def test_unknown_fingerprint_is_noop(self, small_cache):
        cache, _ = small_cache
        cache.set(P, "fp1", _prediction("fp1"), fingerprint="fp1")
        assert cache.invalidate("other") == 0
        assert cache.stats()["predictions"] == 1

    def test_clear(self, small_cache):
        cache, _ = small_cache
        cache.set(P, "fp1", _prediction("fp1"))
        cache.set(F, "features:x", FeatureVector())
        cache.clear()
        assert cache.stats() == {"predictions": 0, "features": 0}
