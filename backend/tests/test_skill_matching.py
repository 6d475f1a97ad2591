from services.skill_matching import (
    canonicalize,
    extract_skills,
    match_skills,
    normalize_skill,
    overlap_ratio,
    skill_matches,
)


class TestNormalization:
    def test_normalize(self):
        assert normalize_skill("  Machine   Learning. ") == "machine learning"

    def test_synonyms(self):
        assert canonicalize("K8s") == "kubernetes"
        assert canonicalize("Postgres") == "postgresql"
        assert canonicalize("golang") == "go"
        assert canonicalize("Rust") == "rust"


class TestExtractSkills:
    def test_word_boundaries(self):
        found = extract_skills("We use JavaScript and Google Cloud, no Java here... just kidding, Java too.")
        assert "javascript" in found
        assert "java" in found
        assert "gcp" in found
        assert "go" not in found

    def test_java_not_inside_javascript(self):
        assert "java" not in extract_skills("Frontend role: JavaScript and TypeScript")

    def test_empty(self):
        assert extract_skills("") == set()


class TestMatching:
    def test_fuzzy_match(self):
        assert skill_matches("Postgre SQL", {"postgresql"})

    def test_short_terms_not_fuzzy(self):
        assert not skill_matches("r", {"rust"})
        assert not skill_matches("go", {"goal"})

    def test_match_skills_split(self):
        matched, missing = match_skills(
            ["Python", "FastAPI", "PostgreSQL", "Docker", "Redis"],
            ["Python", "FastAPI", "PostgreSQL", "Kubernetes", "Kafka"],
        )
        assert matched == ["fastapi", "postgresql", "python"]
        assert missing == ["kafka", "kubernetes"]

    def test_overlap_ratio(self):
        assert overlap_ratio(["python", "sql"], ["python", "sql", "go", "rust"]) == 0.5
        assert overlap_ratio(["python"], []) == 0.0
        assert overlap_ratio(["python"], [], empty=0.5) == 0.5
