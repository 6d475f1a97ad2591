"""Career-history helpers shared by the CV, matching and derived extractors."""

import re
from datetime import date, datetime, timezone

from models.requests import EducationEntry, ExperienceEntry, PredictionRequest

# Seniority ladder; higher index = more senior. Checked most-senior first.
SENIORITY_LEVELS: list[tuple[int, tuple[str, ...]]] = [
    (6, ("chief", "cto", "ceo", "cfo", "vp", "vice president")),
    (5, ("director", "head of")),
    (4, ("principal", "staff", "manager")),
    (3, ("lead", "senior", "sr")),
    (1, ("junior", "jr", "intern", "trainee", "graduate", "entry")),
]
DEFAULT_SENIORITY = 2  # mid-level

EDUCATION_LEVELS: list[tuple[int, tuple[str, ...]]] = [
    (5, ("phd", "ph.d", "doctorate", "doctor of")),
    (4, ("master", "msc", "m.sc", "mba", "m.s.", "meng")),
    (3, ("bachelor", "bsc", "b.sc", "b.s.", "ba ", "b.a.", "beng", "undergraduate")),
    (2, ("associate", "diploma", "hnd")),
]

LEADERSHIP_TITLE_WORDS = ("lead", "manager", "director", "head", "chief", "vp")
LEADERSHIP_VERBS = ("led", "managed", "mentored", "team", "supervised", "coached")

_REQUIRED_YEARS_RE = re.compile(r"(\d+)\+?\s*(?:-\s*\d+\s*)?years?\s*(?:of\s*)?(?:\w+\s+){0,3}experience", re.IGNORECASE)


def as_of(request: PredictionRequest) -> date:
    """Reference date for open-ended positions."""
    ts = request.context.timestamp
    if ts is not None:
        return ts.date()
    return datetime.now(timezone.utc).date()


def tenure_years(entry: ExperienceEntry, today: date) -> float | None:
    if entry.start_date is None:
        return None
    end = entry.end_date or today
    days = (end - entry.start_date).days
    return max(0.0, days / 365.25)


def total_experience_years(experience: list[ExperienceEntry], today: date) -> float:
    total = sum(t for t in (tenure_years(e, today) for e in experience) if t is not None)
    return round(total, 1)


def education_level(education: list[EducationEntry]) -> int:
    """1 (none/other) .. 5 (doctorate)."""
    best = 1
    for entry in education:
        degree = f" {entry.degree.lower()} "
        for level, markers in EDUCATION_LEVELS:
            if level > best and any(m in degree for m in markers):
                best = level
    return best


def seniority_level(title: str) -> int:
    words = re.sub(r"[^a-z ]", " ", title.lower()).split()
    text = " " + " ".join(words) + " "
    for level, markers in SENIORITY_LEVELS:
        if any(f" {m} " in text for m in markers):
            return level
    return DEFAULT_SENIORITY


def chronological(experience: list[ExperienceEntry]) -> list[ExperienceEntry]:
    """Oldest first; entries without a start date keep their relative order at the front."""
    return sorted(experience, key=lambda e: e.start_date or date.min)


def required_years(request: PredictionRequest) -> float:
    """Years the job asks for; parsed from the description when not structured."""
    if request.job.min_years_experience is not None:
        return request.job.min_years_experience
    match = _REQUIRED_YEARS_RE.search(request.job.description)
    return float(match.group(1)) if match else 0.0


def job_text(request: PredictionRequest) -> str:
    job = request.job
    return " ".join(part for part in (job.title, job.description, " ".join(job.required_skills)) if part)
