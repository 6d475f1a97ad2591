"""Fixtures for engine tests."""

import pytest

from models.schemas.prediction import Dimension
from services.prediction.cache import InMemoryPredictionCache
from stubs import FakeClock, FakeDatetimeClock, StubPredictor


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def datetime_clock() -> FakeDatetimeClock:
    return FakeDatetimeClock()


@pytest.fixture
def stub_predictors() -> list[StubPredictor]:
    return [StubPredictor(d) for d in Dimension]


@pytest.fixture
def cache(test_settings, clock) -> InMemoryPredictionCache:
    return InMemoryPredictionCache(
        prediction_ttl=test_settings.prediction_ttl_seconds,
        feature_ttl=test_settings.feature_ttl_seconds,
        max_entries=test_settings.cache_max_entries,
        clock=clock,
    )
