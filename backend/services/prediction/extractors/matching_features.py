"""Matching features: alignment between CV content and the target job."""

import logging

from pydantic import BaseModel

from config import settings
from models.requests import PredictionRequest
from models.schemas.feature_vector import MatchingFeatures
from services.prediction.extractors.base import BaseFeatureExtractor
from services.prediction.extractors.career import (
    as_of,
    chronological,
    education_level,
    job_text,
    required_years,
    seniority_level,
    tenure_years,
    total_experience_years,
)
from services.similarity import text_similarity, tfidf_similarity_matrix
from services.skill_matching import extract_skills, overlap_ratio

logger = logging.getLogger(__name__)

RELEVANCE_THRESHOLD = 0.1  # TF-IDF cosine above which an experience entry counts as relevant


def job_skill_lists(request: PredictionRequest) -> tuple[list[str], list[str]]:
    """(required, preferred) skills; required are mined from text for free-text jobs."""
    job = request.job
    required = list(job.required_skills)
    if not required:
        required = sorted(extract_skills(f"{job.title}\n{job.description}") - set(job.preferred_skills))
    return required, list(job.preferred_skills)


class MatchingFeatureExtractor(BaseFeatureExtractor):
    name = "matching"
    sub_vector_type = MatchingFeatures

    def __init__(self, semantic: bool | None = None) -> None:
        self._semantic = settings.use_semantic_similarity if semantic is None else semantic

    async def extract(self, request: PredictionRequest, upstream: dict[str, BaseModel] | None = None) -> MatchingFeatures:
        cv, job = request.cv, request.job
        required, preferred = job_skill_lists(request)
        today = as_of(request)
        history = chronological(cv.experience)
        latest_title = history[-1].title if history else ""

        job_title = job.title or job.description[:200]
        title_similarity = text_similarity(latest_title, job_title, semantic=self._semantic) if latest_title else 0.0

        job_level = seniority_level(job.seniority or job.title)
        cv_level = seniority_level(latest_title) if latest_title else 1
        seniority_match = 1.0 - min(abs(job_level - cv_level), 5) / 5

        candidate_years = total_experience_years(cv.experience, today)

        return MatchingFeatures(
            skill_overlap=round(overlap_ratio(cv.skills, required, empty=0.5), 3),
            required_skills_count=float(len(required)),
            preferred_overlap=round(overlap_ratio(cv.skills, preferred, empty=0.5), 3),
            title_similarity=round(title_similarity, 3),
            seniority_match=round(seniority_match, 3),
            experience_relevance=round(self._experience_relevance(request), 3),
            education_match=round(self._education_match(request), 3),
            industry_experience=round(self._industry_experience(request), 3),
            years_gap=round(candidate_years - required_years(request), 1),
        )

    def _experience_relevance(self, request: PredictionRequest) -> float:
        """Share of experience (tenure-weighted) that reads as relevant to the job."""
        experience = request.cv.experience
        if not experience:
            return 0.0
        today = as_of(request)
        texts = [f"{e.title}. {e.description}" for e in experience]
        sims = tfidf_similarity_matrix(texts, job_text(request))
        weights = [tenure_years(e, today) or 1.0 for e in experience]
        total = sum(weights)
        relevant = sum(w for w, s in zip(weights, sims) if s >= RELEVANCE_THRESHOLD)
        return relevant / total if total > 0 else 0.0

    def _education_match(self, request: PredictionRequest) -> float:
        education = request.cv.education
        if not education:
            return 0.5  # neutral when nothing is listed
        text = job_text(request).lower()
        match = 0.5
        if any(e.field and e.field.lower() in text for e in education):
            match += 0.3
        wants_degree = any(w in text for w in ("degree", "bachelor", "master", "phd"))
        if wants_degree and education_level(education) >= 3:
            match += 0.2
        return min(1.0, match)

    def _industry_experience(self, request: PredictionRequest) -> float:
        industry = request.job.industry.lower().strip()
        experience = request.cv.experience
        if not industry or not experience:
            return 0.0
        hits = sum(
            1 for e in experience
            if industry in e.industry.lower() or industry in e.description.lower()
        )
        return hits / len(experience)
