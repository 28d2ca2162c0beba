"""
Relevance scoring functions.

Pure functions with no store state, so ranking behavior can be tested
directly.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from fides_vera.errors import LengthMismatchError

MIN_KEYWORD_LENGTH = 3


def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """
    Cosine similarity of two equal-length vectors.

    Returns 0.0 when either vector has zero norm. The result is in [-1, 1];
    callers that need a relevance score clamp it with `to_relevance_score`.

    Raises:
        LengthMismatchError: if the vectors differ in length.
    """
    vec_a = np.asarray(a, dtype=np.float64).ravel()
    vec_b = np.asarray(b, dtype=np.float64).ravel()

    if vec_a.shape[0] != vec_b.shape[0]:
        raise LengthMismatchError(vec_a.shape[0], vec_b.shape[0])

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(vec_a, vec_b) / (norm_a * norm_b))


def to_relevance_score(similarity: float) -> float:
    """Clamp a cosine similarity into [0, 1]; opposed vectors score 0."""
    return min(1.0, max(0.0, similarity))


def extract_keywords(query: str) -> set[str]:
    """Lower-cased whitespace-separated terms, dropping terms of length <= 2."""
    return {term for term in query.lower().split() if len(term) >= MIN_KEYWORD_LENGTH}


def keyword_score(keywords: set[str], text: str) -> float:
    """
    Fraction of keywords that occur in `text`.

    Matching is substring containment on the lower-cased text, so "faith"
    matches "faithful". Returns 0.0 for an empty keyword set.
    """
    if not keywords:
        return 0.0
    haystack = text.lower()
    matches = sum(1 for term in keywords if term in haystack)
    return matches / len(keywords)
