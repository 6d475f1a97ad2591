"""Skill vocabulary, synonym resolution and fuzzy skill matching.

Used by the matching extractor to compare CV skills against a job's
required/preferred skills, and to pull skills out of free-text job
descriptions that arrive without a structured skill list.
"""

import logging
import re

from rapidfuzz import fuzz

logger = logging.getLogger(__name__)

# Canonical forms for common aliases
SKILL_SYNONYMS: dict[str, str] = {
    # JavaScript ecosystem
    "js": "javascript", "es6": "javascript",
    "ts": "typescript",
    "react.js": "react", "reactjs": "react",
    "vue.js": "vue", "vuejs": "vue",
    "angular.js": "angular", "angularjs": "angular",
    "node": "node.js", "nodejs": "node.js",
    "nextjs": "next.js",
    # Python ecosystem
    "py": "python", "python3": "python",
    "sklearn": "scikit-learn",
    "torch": "pytorch",
    "fast api": "fastapi",
    # Cloud & DevOps
    "k8s": "kubernetes", "kube": "kubernetes",
    "amazon web services": "aws",
    "google cloud": "gcp", "google cloud platform": "gcp",
    "microsoft azure": "azure",
    "cicd": "ci/cd",
    "docker compose": "docker",
    # Databases
    "postgres": "postgresql", "pg": "postgresql",
    "mongo": "mongodb",
    "mssql": "sql server", "ms sql": "sql server",
    # Languages
    "c sharp": "c#", "csharp": "c#",
    "cpp": "c++",
    "golang": "go",
    # AI/ML
    "ml": "machine learning",
    "dl": "deep learning",
    "nlp": "natural language processing",
    "genai": "generative ai",
    "large language models": "llm",
    # Methodologies
    "pm": "project management",
    "agile/scrum": "agile",
}

# Known skill vocabulary, used to find skills in unstructured job text
SKILL_VOCABULARY: frozenset[str] = frozenset({
    # Languages
    "python", "javascript", "typescript", "java", "c++", "c#", "go", "rust",
    "ruby", "php", "swift", "kotlin", "scala", "r", "sql", "bash",
    # Frontend
    "react", "angular", "vue", "svelte", "next.js", "html", "css", "tailwind",
    # Backend
    "node.js", "express", "fastapi", "django", "flask", "spring", "rails",
    ".net", "graphql", "rest", "grpc",
    # Cloud & DevOps
    "aws", "azure", "gcp", "docker", "kubernetes", "terraform", "ansible",
    "jenkins", "github actions", "ci/cd", "linux", "nginx",
    # Data
    "postgresql", "mysql", "mongodb", "redis", "elasticsearch", "kafka",
    "spark", "hadoop", "airflow", "snowflake", "bigquery", "pandas", "numpy",
    "tableau", "power bi",
    # ML/AI
    "machine learning", "deep learning", "tensorflow", "pytorch",
    "natural language processing", "computer vision", "scikit-learn",
    "llm", "generative ai",
    # Soft skills & methodologies
    "agile", "scrum", "leadership", "communication", "project management",
    "stakeholder management", "mentoring",
})

# 0-100; 85+ catches "Postgre SQL" -> "postgresql" without merging distinct tools
FUZZY_THRESHOLD = 85


def normalize_skill(skill: str) -> str:
    """Lower-case, collapse whitespace and strip trailing punctuation."""
    return re.sub(r"\s+", " ", skill.lower().strip().rstrip(".,:;"))


def canonicalize(skill: str) -> str:
    norm = normalize_skill(skill)
    return SKILL_SYNONYMS.get(norm, norm)


def extract_skills(text: str) -> set[str]:
    """Find vocabulary skills in free text (word-boundary matched, canonical forms)."""
    text_lower = text.lower()
    found: set[str] = set()

    for skill in SKILL_VOCABULARY:
        escaped = re.escape(skill)
        # "java" must not match inside "javascript", "go" not inside "google"
        if re.search(rf"(?<![a-zA-Z0-9.#]){escaped}(?![a-zA-Z0-9+#])", text_lower):
            found.add(skill)

    for alias, canonical in SKILL_SYNONYMS.items():
        if len(alias) > 3 and re.search(rf"(?<![a-z0-9]){re.escape(alias)}(?![a-z0-9])", text_lower):
            found.add(canonical)

    return found


def skill_matches(job_skill: str, cv_skills: set[str]) -> bool:
    """Exact, synonym, or fuzzy match of one job skill against canonical CV skills."""
    canon = canonicalize(job_skill)
    if canon in cv_skills:
        return True

    # Don't fuzzy match very short terms ("r", "go", "c#")
    if len(canon) >= 4:
        for skill in cv_skills:
            if len(skill) >= 4 and fuzz.ratio(canon, skill) >= FUZZY_THRESHOLD:
                return True
    return False


def match_skills(cv_skills: list[str] | set[str], job_skills: list[str] | set[str]) -> tuple[list[str], list[str]]:
    """Split job skills into (matched, missing) against the CV's skills."""
    canonical_cv = {canonicalize(s) for s in cv_skills if s.strip()}
    matched: list[str] = []
    missing: list[str] = []
    for skill in sorted({canonicalize(s) for s in job_skills if s.strip()}):
        if skill_matches(skill, canonical_cv):
            matched.append(skill)
        else:
            missing.append(skill)
    return matched, missing


def overlap_ratio(cv_skills: list[str] | set[str], job_skills: list[str] | set[str], empty: float = 0.0) -> float:
    """Matched / total job skills; ``empty`` when the job lists none."""
    matched, missing = match_skills(cv_skills, job_skills)
    total = len(matched) + len(missing)
    if total == 0:
        return empty
    return len(matched) / total
