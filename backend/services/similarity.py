"""Text similarity for CV-to-job matching.

TF-IDF cosine is the default. When ``use_semantic_similarity`` is on, titles
are compared with a sentence-transformers job-title encoder instead, falling
back to TF-IDF if the encoder cannot be loaded.
"""

import logging

import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from config import settings

logger = logging.getLogger(__name__)

# Loaded on first semantic comparison (several hundred MB)
_encoder = None
_encoder_failed = False


def _get_encoder():
    global _encoder, _encoder_failed
    if _encoder is None and not _encoder_failed:
        try:
            from sentence_transformers import SentenceTransformer

            _encoder = SentenceTransformer(settings.semantic_model)
            logger.info("Semantic encoder %s loaded", settings.semantic_model)
        except Exception as e:
            _encoder_failed = True
            logger.warning("Semantic encoder unavailable, using TF-IDF: %s", e)
    return _encoder


def tfidf_cosine_similarity(text_a: str, text_b: str) -> float:
    if not text_a.strip() or not text_b.strip():
        return 0.0
    vectorizer = TfidfVectorizer(stop_words="english", sublinear_tf=True, ngram_range=(1, 2))
    try:
        matrix = vectorizer.fit_transform([text_a, text_b])
    except ValueError:
        # only stop words
        return 0.0
    return float(cosine_similarity(matrix[0:1], matrix[1:2])[0][0])


def tfidf_similarity_matrix(queries: list[str], reference: str) -> np.ndarray:
    """Similarity of each query text to one reference text, fitted on a shared vocabulary."""
    if not queries or not reference.strip():
        return np.zeros(len(queries))
    vectorizer = TfidfVectorizer(stop_words="english", sublinear_tf=True)
    try:
        matrix = vectorizer.fit_transform([reference] + queries)
    except ValueError:
        return np.zeros(len(queries))
    return cosine_similarity(matrix[1:], matrix[0:1]).flatten()


def semantic_similarity(text_a: str, text_b: str) -> float | None:
    """Embedding cosine, or None when the encoder is unavailable."""
    encoder = _get_encoder()
    if encoder is None:
        return None
    if not text_a.strip() or not text_b.strip():
        return 0.0
    try:
        embeddings = encoder.encode([text_a, text_b], convert_to_numpy=True)
    except Exception as e:
        logger.warning("Semantic encoding failed: %s", e)
        return None
    return float(cosine_similarity(embeddings[0:1], embeddings[1:2])[0][0])


def text_similarity(text_a: str, text_b: str, semantic: bool = False) -> float:
    """Similarity clamped to [0, 1]."""
    score = semantic_similarity(text_a, text_b) if semantic else None
    if score is None:
        score = tfidf_cosine_similarity(text_a, text_b)
    return max(0.0, min(1.0, score))
