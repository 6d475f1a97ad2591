"""Shared test configuration, pytest markers and sample requests."""

from datetime import date, datetime, timezone

import pytest

from config import Settings
from models.requests import (
    CVData,
    EducationEntry,
    ExperienceEntry,
    JobDescription,
    PredictionRequest,
    RequestContext,
)

# A Wednesday in June (no seasonal slowdown)
APPLIED_AT = datetime(2024, 6, 12, 10, 30, tzinfo=timezone.utc)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: loads real ML models (slow, needs GPU/CPU)"
    )


@pytest.fixture
def sample_cv() -> CVData:
    return CVData(
        summary="Backend engineer building data-heavy web services in Python. Focused on reliable APIs.",
        skills=["Python", "FastAPI", "PostgreSQL", "Docker", "Redis"],
        experience=[
            ExperienceEntry(
                title="Senior Software Engineer",
                company="Acme",
                start_date=date(2019, 1, 1),
                description=(
                    "Led a team of 4 engineers building Python microservices with FastAPI and PostgreSQL. "
                    "Cut API latency by 40% across the platform."
                ),
                industry="Technology",
            ),
            ExperienceEntry(
                title="Software Engineer",
                company="Globex",
                start_date=date(2016, 6, 1),
                end_date=date(2018, 12, 31),
                description="Built Django REST APIs and Docker based deployment tooling for the billing team.",
                industry="Technology",
            ),
        ],
        education=[
            EducationEntry(degree="BSc Computer Science", field="Computer Science", institution="State University", year=2016),
        ],
        certifications=["AWS Certified Developer"],
        projects=["Open-source rate limiter for async Python services"],
        achievements=["Reduced cloud spend by $20k per year"],
        edit_count=3,
    )


@pytest.fixture
def sample_job() -> JobDescription:
    return JobDescription(
        title="Senior Python Developer",
        description=(
            "We are hiring a Senior Python Developer. Requirements: 5+ years of experience with Python, "
            "FastAPI and PostgreSQL. Kubernetes and Kafka in production. Bachelor degree in Computer Science."
        ),
        required_skills=["Python", "FastAPI", "PostgreSQL", "Kubernetes", "Kafka"],
        preferred_skills=["AWS"],
        seniority="senior",
        industry="technology",
        location="Berlin",
        posted_at=datetime(2024, 6, 5, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_context() -> RequestContext:
    return RequestContext(
        location="Berlin",
        application_channel="referral",
        timestamp=APPLIED_AT,
        engagement_score=0.7,
    )


@pytest.fixture
def sample_request(sample_cv, sample_job, sample_context) -> PredictionRequest:
    return PredictionRequest(cv=sample_cv, job=sample_job, context=sample_context)


@pytest.fixture
def request_payload(sample_request) -> dict:
    """The sample request as JSON-ready data, the way API clients send it."""
    return sample_request.model_dump(mode="json")


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Short timeouts, no external collaborators."""
    return Settings(
        extractor_timeout_seconds=0.5,
        model_timeout_seconds=0.5,
        heuristic_timeout_seconds=0.5,
        request_budget_seconds=5.0,
        ml_api_endpoint="",
        market_data_endpoint="",
        gemini_api_key="",
        model_dir=str(tmp_path / "artifacts"),
        use_semantic_similarity=False,
        confidence_weights={},
    )
