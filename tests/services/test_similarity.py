"""Tests for cosine similarity and the match rule."""
import numpy as np
import pytest

from faceproof.core.exceptions import DimensionMismatchError
from faceproof.services.similarity import SimilarityEngine, cosine_similarity


def test_self_similarity_is_one(face):
    assert cosine_similarity(face, face) == pytest.approx(1.0)


def test_similarity_is_symmetric(rng):
    a = rng.uniform(-1.0, 1.0, size=16)
    b = rng.uniform(-1.0, 1.0, size=16)

    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_scale_does_not_change_similarity(face):
    assert cosine_similarity(face, face * 7.5) == pytest.approx(1.0)


def test_opposite_vectors_clamp_to_zero(face):
    assert cosine_similarity(face, -face) == 0.0


def test_zero_vector_scores_zero(face):
    assert cosine_similarity(np.zeros(8), face) == 0.0
    assert cosine_similarity(np.zeros(8), np.zeros(8)) == 0.0


def test_orthogonal_vectors_score_zero():
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)


def test_dimension_mismatch_raises():
    with pytest.raises(DimensionMismatchError) as exc_info:
        cosine_similarity([0.1, 0.2, 0.3], [0.1, 0.2])

    assert exc_info.value.left == 3
    assert exc_info.value.right == 2


class TestSimilarityEngine:

    def test_score_equal_to_threshold_is_not_a_match(self):
        engine = SimilarityEngine(threshold=0.6)

        assert not engine.is_match(0.6)
        assert engine.is_match(0.6000001)
        assert not engine.is_match(0.59)

    @pytest.mark.parametrize("threshold", [0.0, 1.0, -0.2, 1.5])
    def test_threshold_outside_open_interval_is_rejected(self, threshold):
        with pytest.raises(ValueError):
            SimilarityEngine(threshold=threshold)

    def test_similarity_delegates_to_cosine(self, face):
        engine = SimilarityEngine(threshold=0.6)

        assert engine.similarity(face, face) == pytest.approx(1.0)
