"""Cosine similarity scoring and the match decision rule."""
import numpy as np

from faceproof.core.exceptions import DimensionMismatchError
from faceproof.domain.entities.embedding import EmbeddingLike


def cosine_similarity(a: EmbeddingLike, b: EmbeddingLike) -> float:
    """Cosine similarity of two embeddings, clamped to [0, 1].

    A zero vector has no direction, so any comparison involving one scores 0.

    Raises:
        DimensionMismatchError: If the embeddings differ in length
    """
    left = np.asarray(a, dtype=np.float64)
    right = np.asarray(b, dtype=np.float64)
    if left.shape != right.shape:
        raise DimensionMismatchError(int(left.size), int(right.size))

    left_norm = float(np.linalg.norm(left))
    right_norm = float(np.linalg.norm(right))
    if left_norm == 0.0 or right_norm == 0.0:
        return 0.0

    score = float(np.dot(left, right)) / (left_norm * right_norm)
    return min(max(score, 0.0), 1.0)


class SimilarityEngine:
    """Scores embedding pairs and applies the deployment's match threshold.

    A pair matches only when its score is strictly greater than the
    threshold; a score exactly equal to it does not match.
    """

    def __init__(self, threshold: float) -> None:
        if not 0.0 < threshold < 1.0:
            raise ValueError("threshold must be in the open interval (0, 1)")
        self.threshold = threshold

    def similarity(self, a: EmbeddingLike, b: EmbeddingLike) -> float:
        return cosine_similarity(a, b)

    def is_match(self, score: float) -> bool:
        return score > self.threshold
