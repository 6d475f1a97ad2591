"""Tests for request fingerprints and feature-cache keys."""

from datetime import datetime, timezone

from models.requests import PredictionRequest
from services.prediction.fingerprint import feature_key, fingerprint


def _variant(request: PredictionRequest, **context) -> PredictionRequest:
    return request.model_copy(update={"context": request.context.model_copy(update=context)})


class TestFingerprint:
    def test_is_sha256_hex(self, sample_request):
        fp = fingerprint(sample_request)
        assert len(fp) == 64
        int(fp, 16)

    def test_deterministic(self, sample_request):
        assert fingerprint(sample_request) == fingerprint(sample_request)

    def test_timestamp_does_not_change_fingerprint(self, sample_request):
        later = _variant(sample_request, timestamp=datetime(2025, 1, 1, tzinfo=timezone.utc))
        assert fingerprint(later) == fingerprint(sample_request)

    def test_case_whitespace_and_skill_order_normalized(self, sample_request):
        cv = sample_request.cv.model_copy(update={
            "skills": ["redis", "  docker", "POSTGRESQL", "fastapi", "Python", "python"],
            "summary": "  backend   engineer building data-heavy web services in python. focused on reliable APIs.",
        })
        variant = sample_request.model_copy(update={"cv": cv})
        assert fingerprint(variant) == fingerprint(sample_request)

    def test_different_skills_change_fingerprint(self, sample_request):
        cv = sample_request.cv.model_copy(update={"skills": ["Python", "Go"]})
        variant = sample_request.model_copy(update={"cv": cv})
        assert fingerprint(variant) != fingerprint(sample_request)

    def test_duplicated_achievements_change_fingerprint(self, sample_request):
        cv = sample_request.cv.model_copy(update={
            "achievements": sample_request.cv.achievements * 2,
        })
        variant = sample_request.model_copy(update={"cv": cv})
        assert fingerprint(variant) != fingerprint(sample_request)

    def test_project_order_changes_fingerprint(self, sample_request):
        first = sample_request.cv.model_copy(update={"projects": ["CLI tool", "Rate limiter"]})
        second = sample_request.cv.model_copy(update={"projects": ["Rate limiter", "CLI tool"]})
        assert (
            fingerprint(sample_request.model_copy(update={"cv": first}))
            != fingerprint(sample_request.model_copy(update={"cv": second}))
        )

    def test_job_skill_order_normalized(self, sample_request):
        job = sample_request.job.model_copy(update={
            "required_skills": list(reversed(sample_request.job.required_skills)),
        })
        variant = sample_request.model_copy(update={"job": job})
        assert fingerprint(variant) == fingerprint(sample_request)

    def test_channel_is_part_of_fingerprint(self, sample_request):
        direct = _variant(sample_request, application_channel="direct")
        assert fingerprint(direct) != fingerprint(sample_request)


class TestFeatureKey:
    def test_prefixed_and_distinct_from_fingerprint(self, sample_request):
        key = feature_key(sample_request)
        assert key.startswith("features:")
        assert key != fingerprint(sample_request)

    def test_shared_across_behavior_only_differences(self, sample_request):
        variant = _variant(
            sample_request,
            application_channel="job_board",
            engagement_score=0.1,
            previous_applications=4,
            timestamp=datetime(2024, 7, 1, tzinfo=timezone.utc),
        )
        assert feature_key(variant) == feature_key(sample_request)
        assert fingerprint(variant) != fingerprint(sample_request)

    def test_location_splits_feature_key(self, sample_request):
        variant = _variant(sample_request, location="Lisbon")
        assert feature_key(variant) != feature_key(sample_request)
