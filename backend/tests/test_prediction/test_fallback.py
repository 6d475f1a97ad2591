"""Tests for the model -> heuristic -> minimal fallback chain."""

import pytest

from models.schemas.feature_vector import FeatureVector
from models.schemas.prediction import DegradationLevel, Dimension, PredictorOutput, Tier
from services.prediction import fallback as fallback_module
from services.prediction.errors import FallbackExhaustedError, ModelUnavailableError
from services.prediction.fallback import FallbackManager, aggregate_degradation
from services.prediction.heuristic import HeuristicPredictor
from stubs import StubPredictor


class BrokenHeuristic(HeuristicPredictor):
    def predict(self, dimension, vector):
        raise ZeroDivisionError("bad weights")


def _manager(heuristic=None, model_timeout=0.2) -> FallbackManager:
    return FallbackManager(
        heuristic=heuristic or HeuristicPredictor(confidence=0.5),
        model_timeout=model_timeout,
        heuristic_timeout=0.2,
        minimal_confidence=0.2,
    )


class TestFallbackManager:
    @pytest.mark.asyncio
    async def test_model_tier_serves_with_reported_confidence(self):
        result = await _manager().run(StubPredictor(Dimension.INTERVIEW), FeatureVector())
        assert result.tier is Tier.MODEL
        assert result.dimension is Dimension.INTERVIEW
        assert result.value == 0.4
        assert result.confidence == 0.9

    @pytest.mark.asyncio
    async def test_model_failure_falls_to_heuristic(self):
        predictor = StubPredictor(Dimension.INTERVIEW, error=ModelUnavailableError("no endpoint"))
        result = await _manager().run(predictor, FeatureVector())
        assert result.tier is Tier.HEURISTIC
        assert result.confidence == 0.5
        assert result.value == pytest.approx(0.225)

    @pytest.mark.asyncio
    async def test_model_timeout_falls_to_heuristic(self):
        predictor = StubPredictor(Dimension.OFFER, delay=2.0)
        result = await _manager(model_timeout=0.1).run(predictor, FeatureVector())
        assert result.tier is Tier.HEURISTIC

    @pytest.mark.asyncio
    async def test_heuristic_failure_falls_to_minimal(self):
        predictor = StubPredictor(Dimension.SALARY, error=RuntimeError("down"))
        result = await _manager(heuristic=BrokenHeuristic()).run(predictor, FeatureVector())
        assert result.tier is Tier.MINIMAL
        assert result.confidence == 0.2
        assert (result.low, result.value, result.high) == (56000, 70000, 91000)

    @pytest.mark.asyncio
    async def test_exhausted_chain_raises(self, monkeypatch):
        def broken_minimal(dimension, confidence=0.2):
            raise KeyError(dimension)

        monkeypatch.setattr(fallback_module, "minimal_default", broken_minimal)
        predictor = StubPredictor(Dimension.TIME_TO_HIRE, error=RuntimeError("down"))
        with pytest.raises(FallbackExhaustedError) as exc_info:
            await _manager(heuristic=BrokenHeuristic()).run(predictor, FeatureVector())
        assert exc_info.value.dimension == Dimension.TIME_TO_HIRE.value

    def test_from_settings(self, test_settings):
        manager = FallbackManager.from_settings(test_settings)
        tiers = [s.tier for s in manager.strategies(StubPredictor(Dimension.INTERVIEW))]
        assert tiers == [Tier.MODEL, Tier.HEURISTIC, Tier.MINIMAL]
        minimal = manager.strategies(StubPredictor(Dimension.INTERVIEW))[-1]
        assert minimal.timeout is None
        assert minimal.confidence == test_settings.minimal_confidence


class TestAggregateDegradation:
    def test_full(self):
        assert aggregate_degradation({d: Tier.MODEL for d in Dimension}) is DegradationLevel.FULL

    def test_any_heuristic_is_partial(self):
        tiers = {d: Tier.MODEL for d in Dimension}
        tiers[Dimension.SALARY] = Tier.HEURISTIC
        assert aggregate_degradation(tiers) is DegradationLevel.PARTIAL

    def test_degraded_features_is_partial(self):
        tiers = {d: Tier.MODEL for d in Dimension}
        assert aggregate_degradation(tiers, features_degraded=True) is DegradationLevel.PARTIAL

    def test_all_minimal(self):
        assert aggregate_degradation({d: Tier.MINIMAL for d in Dimension}) is DegradationLevel.MINIMAL

    def test_mixed_minimal_is_partial(self):
        tiers = {d: Tier.MINIMAL for d in Dimension}
        tiers[Dimension.INTERVIEW] = Tier.HEURISTIC
        assert aggregate_degradation(tiers) is DegradationLevel.PARTIAL
