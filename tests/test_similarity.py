"""
Unit Tests for Relevance Scoring

Tests cosine similarity and keyword scoring as pure functions.
"""

import numpy as np
import pytest

from fides_vera.errors import LengthMismatchError
from fides_vera.retrieval.similarity import (
    cosine_similarity,
    extract_keywords,
    keyword_score,
    to_relevance_score,
)


# ---------------------------------------------------------------------------
# COSINE SIMILARITY
# ---------------------------------------------------------------------------


class TestCosineSimilarity:
    """Test cosine similarity properties."""

    @pytest.mark.parametrize(
        "a, b",
        [
            ([1.0, 2.0, 3.0], [4.0, 5.0, 6.0]),
            ([0.5, -1.0], [2.0, 0.25]),
            ([1.0, 0.0, 0.0, 1.0], [0.0, 1.0, 1.0, 0.0]),
        ],
    )
    def test_symmetric(self, a, b):
        """cos(A, B) should equal cos(B, A)."""
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    @pytest.mark.parametrize("a", [[1.0, 2.0, 3.0], [-4.0, 0.5], [7.0]])
    def test_self_similarity_is_one(self, a):
        """A non-zero vector should be fully similar to itself."""
        assert cosine_similarity(a, a) == pytest.approx(1.0)

    def test_zero_vector_scores_zero(self):
        """Either vector being zero should give 0, not NaN."""
        assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0
        assert cosine_similarity([1.0, 2.0], [0.0, 0.0]) == 0.0
        assert cosine_similarity([0.0, 0.0], [0.0, 0.0]) == 0.0

    def test_orthogonal_vectors_score_zero(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite_vectors_score_minus_one(self):
        assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)

    def test_accepts_numpy_arrays(self):
        a = np.array([1.0, 1.0], dtype=np.float32)
        b = np.array([1.0, 0.0], dtype=np.float32)
        assert cosine_similarity(a, b) == pytest.approx(1 / np.sqrt(2))

    def test_length_mismatch_raises(self):
        """Mismatched dimensions should raise, never return a number."""
        with pytest.raises(LengthMismatchError) as exc_info:
            cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0])

        assert exc_info.value.left == 3
        assert exc_info.value.right == 2


class TestRelevanceScore:
    """Test clamping similarity into a relevance score."""

    def test_negative_clamps_to_zero(self):
        assert to_relevance_score(-0.7) == 0.0

    def test_in_range_unchanged(self):
        assert to_relevance_score(0.42) == 0.42

    def test_rounding_overshoot_clamps_to_one(self):
        assert to_relevance_score(1.0000001) == 1.0


# ---------------------------------------------------------------------------
# KEYWORD SCORING
# ---------------------------------------------------------------------------


class TestKeywords:
    """Test keyword extraction and scoring."""

    def test_extract_lowercases_and_dedupes(self):
        assert extract_keywords("Faith FAITH hope") == {"faith", "hope"}

    def test_extract_drops_short_terms(self):
        """Terms of length two or less should be discarded."""
        assert extract_keywords("is it a sin to lie") == {"sin", "lie"}

    def test_extract_blank_query(self):
        assert extract_keywords("   ") == set()

    def test_score_is_match_ratio(self):
        keywords = {"faith", "hope", "charity"}
        assert keyword_score(keywords, "Faith and hope") == pytest.approx(2 / 3)

    def test_score_matches_substrings(self):
        """'faith' should match inside 'faithful'."""
        assert keyword_score({"faith"}, "The faithful gather") == 1.0

    def test_score_without_keywords_is_zero(self):
        assert keyword_score(set(), "anything") == 0.0
