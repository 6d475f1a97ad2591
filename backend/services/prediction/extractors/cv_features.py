"""CV features: structural quality of the CV document itself."""

import logging
import re

from pydantic import BaseModel

from models.requests import CVData, PredictionRequest
from models.schemas.feature_vector import CVFeatures
from services.prediction.extractors.base import BaseFeatureExtractor
from services.prediction.extractors.career import as_of, education_level, total_experience_years

logger = logging.getLogger(__name__)

STANDARD_SECTIONS = ("summary", "experience", "education", "skills", "certifications_or_projects")

_QUANTIFIED_RE = re.compile(r"\d+\s*%|\d+\+|[$€£]\s*\d+|\b\d+(?:\.\d+)?\s*(?:x|k|m|million|users|customers|hours)\b", re.IGNORECASE)
_SENTENCE_END_RE = re.compile(r"[.!?]+")


def _sections_present(cv: CVData) -> list[str]:
    present = []
    if cv.summary.strip():
        present.append("summary")
    if cv.experience:
        present.append("experience")
    if cv.education:
        present.append("education")
    if cv.skills:
        present.append("skills")
    if cv.certifications or cv.projects:
        present.append("certifications_or_projects")
    return present


def _prose(cv: CVData) -> list[str]:
    return [cv.summary] + [e.description for e in cv.experience] + list(cv.achievements)


def readability_score(texts: list[str]) -> float:
    """Average-sentence-length proxy: 15-20 words per sentence reads best."""
    text = " ".join(t for t in texts if t.strip())
    words = len(text.split())
    if words == 0:
        return 0.5
    sentences = max(1, len(_SENTENCE_END_RE.findall(text)))
    avg = words / sentences
    if 15 <= avg <= 20:
        return 0.9
    if 10 <= avg <= 25:
        return 0.7
    return 0.5


def formatting_score(cv: CVData) -> float:
    score = 0.5
    if cv.experience and all(e.start_date is not None for e in cv.experience):
        score += 0.2
    if len(_sections_present(cv)) >= 4:
        score += 0.2
    if any(_QUANTIFIED_RE.search(e.description) for e in cv.experience):
        score += 0.1
    return min(score, 1.0)


def quantified_ratio(cv: CVData) -> float:
    bullets = [e.description for e in cv.experience if e.description.strip()] + list(cv.achievements)
    if not bullets:
        return 0.0
    return sum(1 for b in bullets if _QUANTIFIED_RE.search(b)) / len(bullets)


class CVFeatureExtractor(BaseFeatureExtractor):
    name = "cv"
    sub_vector_type = CVFeatures

    async def extract(self, request: PredictionRequest, upstream: dict[str, BaseModel] | None = None) -> CVFeatures:
        cv = request.cv
        sections = _sections_present(cv)

        return CVFeatures(
            word_count=float(sum(len(t.split()) for t in _prose(cv))),
            section_count=float(len(sections)),
            completeness=round(len(sections) / len(STANDARD_SECTIONS), 3),
            skills_count=float(len({s.lower().strip() for s in cv.skills if s.strip()})),
            experience_years=total_experience_years(cv.experience, as_of(request)),
            education_level=float(education_level(cv.education)),
            certifications_count=float(len(cv.certifications)),
            projects_count=float(len(cv.projects)),
            readability=readability_score(_prose(cv)),
            formatting_score=round(formatting_score(cv), 3),
            quantified_achievement_ratio=round(quantified_ratio(cv), 3),
        )
