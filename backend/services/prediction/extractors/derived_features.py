"""Derived features: composites over the other four sub-vectors.

Runs strictly after the cv/matching/market/behavior extractors and reads
their output through ``upstream`` (defaults when one of them failed).
"""

import logging
import re

import numpy as np
from pydantic import BaseModel

from models.requests import PredictionRequest
from models.schemas.feature_vector import CVFeatures, DerivedFeatures, MatchingFeatures
from services.prediction.extractors.base import BaseFeatureExtractor
from services.prediction.extractors.career import (
    LEADERSHIP_TITLE_WORDS,
    LEADERSHIP_VERBS,
    as_of,
    chronological,
    required_years,
    seniority_level,
    tenure_years,
)

logger = logging.getLogger(__name__)

INNOVATION_WORDS = ("innovat", "created", "developed", "designed")
RESEARCH_PATTERN = re.compile(r"\b(patent|research|algorithm|ai|machine learning)\b")
QUANTIFIED_GAIN_PATTERN = re.compile(r"\b(improved|increased|reduced)\b.*\d+%")


def trajectory_slope(request: PredictionRequest) -> float:
    """Least-squares slope of seniority level over time (levels per year)."""
    history = chronological(request.cv.experience)
    if len(history) < 2:
        return 0.0
    levels = np.array([seniority_level(e.title) for e in history], dtype=float)
    if all(e.start_date is not None for e in history):
        xs = np.array([e.start_date.toordinal() / 365.25 for e in history])
    else:
        xs = np.arange(len(history), dtype=float)
    if np.ptp(xs) == 0:
        return 0.0
    slope = np.polyfit(xs, levels, 1)[0]
    return float(np.clip(slope, -1.0, 1.0))


def leadership_index(request: PredictionRequest) -> float:
    score = 0.3
    for entry in request.cv.experience:
        title = entry.title.lower()
        description = entry.description.lower()
        if any(w in title.split() for w in LEADERSHIP_TITLE_WORDS):
            score += 0.3
        if any(v in description for v in LEADERSHIP_VERBS):
            score += 0.1
    return min(1.0, score)


def stability_score(request: PredictionRequest) -> float:
    experience = request.cv.experience
    if not experience:
        return 0.5
    today = as_of(request)
    tenures = [tenure_years(e, today) for e in experience]
    average = float(np.mean([t if t is not None else 2.0 for t in tenures]))
    if average >= 3:
        return 0.9
    if average >= 2:
        return 0.7
    if average >= 1:
        return 0.5
    return 0.3


def innovation_index(request: PredictionRequest) -> float:
    score = 0.3
    for entry in request.cv.experience:
        description = entry.description.lower()
        if any(w in description for w in INNOVATION_WORDS):
            score += 0.1
        if RESEARCH_PATTERN.search(description):
            score += 0.2
        if QUANTIFIED_GAIN_PATTERN.search(description):
            score += 0.1
    return min(1.0, score)


def adaptability_score(request: PredictionRequest) -> float:
    cv = request.cv
    score = 0.5
    companies = {e.company.lower().strip() for e in cv.experience if e.company.strip()}
    industries = {e.industry.lower().strip() for e in cv.experience if e.industry.strip()}
    if len(companies) >= 3:
        score += 0.2
    if len(industries) >= 2:
        score += 0.2
    if cv.certifications or len(cv.education) > 1:
        score += 0.1
    return min(1.0, score)


class DerivedFeatureExtractor(BaseFeatureExtractor):
    name = "derived"
    sub_vector_type = DerivedFeatures
    depends_on_upstream = True

    async def extract(self, request: PredictionRequest, upstream: dict[str, BaseModel] | None = None) -> DerivedFeatures:
        upstream = upstream or {}
        cv_features = upstream.get("cv") or CVFeatures()
        matching = upstream.get("matching") or MatchingFeatures()

        over = 0.3
        if matching.years_gap > 10:
            over = 0.9
        elif matching.years_gap > 5 and cv_features.education_level >= 4:
            over = 0.7

        under = 0.2
        needed = required_years(request)
        if needed > 0 and cv_features.experience_years < needed * 0.7:
            under = 0.8
        elif matching.skill_overlap < 0.4:
            under = 0.6

        return DerivedFeatures(
            career_trajectory_slope=round(trajectory_slope(request), 4),
            leadership_index=round(leadership_index(request), 3),
            stability_score=stability_score(request),
            adaptability_score=round(adaptability_score(request), 3),
            innovation_index=round(innovation_index(request), 3),
            overqualification=over,
            underqualification=under,
        )
