import numpy as np
import pytest

from services.similarity import (
    semantic_similarity,
    text_similarity,
    tfidf_cosine_similarity,
    tfidf_similarity_matrix,
)


def test_tfidf_cosine_similarity_identical():
    text = "Python developer with FastAPI and PostgreSQL experience"
    score = tfidf_cosine_similarity(text, text)
    assert score == pytest.approx(1.0, abs=0.01)


def test_tfidf_cosine_similarity_different():
    a = "Python developer with FastAPI and Docker experience in web development"
    b = "Marketing manager with expertise in social media and brand strategy"
    score = tfidf_cosine_similarity(a, b)
    assert score < 0.3  # Very different texts


def test_tfidf_cosine_similarity_empty():
    assert tfidf_cosine_similarity("", "some text") == 0.0
    assert tfidf_cosine_similarity("some text", "") == 0.0


def test_tfidf_cosine_similarity_stop_words_only():
    assert tfidf_cosine_similarity("the and of", "a the to") == 0.0


def test_similarity_matrix_ranks_relevant_entry_first():
    job = "Senior Python developer building FastAPI services on PostgreSQL"
    entries = [
        "Built Python services with FastAPI and PostgreSQL",
        "Managed retail store staff rotas",
    ]
    sims = tfidf_similarity_matrix(entries, job)
    assert sims.shape == (2,)
    assert sims[0] > sims[1]


def test_similarity_matrix_empty_reference():
    sims = tfidf_similarity_matrix(["anything"], "")
    assert np.array_equal(sims, np.zeros(1))


def test_text_similarity_bounded():
    score = text_similarity("Senior Software Engineer", "Senior Python Developer")
    assert 0.0 <= score <= 1.0


@pytest.mark.integration
def test_semantic_similarity_related_titles():
    score = semantic_similarity("Backend Engineer", "Python Developer")
    assert score is not None
    assert score > 0.3


def test_semantic_request_falls_back_to_tfidf(monkeypatch):
    from services import similarity

    monkeypatch.setattr(similarity, "_get_encoder", lambda: None)
    assert semantic_similarity("Data Engineer", "Data Engineer") is None
    assert text_similarity("Data Engineer", "Data Engineer", semantic=True) == pytest.approx(1.0, abs=0.01)
