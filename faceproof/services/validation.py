"""Statistical sanity checks for face embeddings."""
from typing import Optional

import numpy as np

from faceproof.core.exceptions import InvalidEmbeddingError
from faceproof.core.logging import get_logger
from faceproof.domain.entities.embedding import EmbeddingLike, as_embedding
from faceproof.domain.value_objects.verdicts import ValidationVerdict

logger = get_logger(__name__)


class EmbeddingValidator:
    """Rejects degenerate embeddings before they are uploaded or compared.

    An extractor that found no face, crashed, or was fed synthetic input tends
    to emit vectors that are mostly zero, constant, or numerically collapsed.
    Such vectors carry no identity signal and would make similarity scores
    meaningless, so they are rejected upstream.

    Checks run in order and the first failure wins:
        1. dimension (only when an expected dimension is configured)
        2. non-zero ratio: at least min_nonzero_ratio * D entries differ from 0
        3. non-zero spread: population std of the non-zero entries > min_nonzero_std
        4. non-zero magnitude: max(|min|, |max|) of the non-zero entries > min_nonzero_magnitude

    Example:
        ```python
        validator = EmbeddingValidator(expected_dimension=512)
        verdict = validator.validate(embedding)
        if not verdict.is_valid:
            print(verdict.reason)
        ```
    """

    def __init__(
        self,
        expected_dimension: Optional[int] = None,
        min_nonzero_ratio: float = 0.05,
        min_nonzero_std: float = 0.001,
        min_nonzero_magnitude: float = 0.01,
    ) -> None:
        self.expected_dimension = expected_dimension
        self.min_nonzero_ratio = min_nonzero_ratio
        self.min_nonzero_std = min_nonzero_std
        self.min_nonzero_magnitude = min_nonzero_magnitude

    def validate(self, embedding: EmbeddingLike) -> ValidationVerdict:
        """Validate an embedding.

        Args:
            embedding: Raw embedding vector

        Returns:
            ValidationVerdict with the first failing reason, if any
        """
        try:
            vector = as_embedding(embedding)
        except InvalidEmbeddingError as e:
            return ValidationVerdict(is_valid=False, reason=e.message)

        dimension = int(vector.size)
        if dimension == 0:
            return ValidationVerdict(is_valid=False, reason="Embedding is empty")

        if not np.all(np.isfinite(vector)):
            return ValidationVerdict(
                is_valid=False,
                reason="Embedding contains non-finite values",
                dimension=dimension,
            )

        if self.expected_dimension is not None and dimension != self.expected_dimension:
            return ValidationVerdict(
                is_valid=False,
                reason=f"Embedding has {dimension} values, expected {self.expected_dimension}",
                dimension=dimension,
            )

        non_zero = vector[vector != 0]
        non_zero_count = int(non_zero.size)
        if non_zero_count:
            mean = float(non_zero.mean())
            std = float(non_zero.std())
            magnitude = float(max(abs(non_zero.min()), abs(non_zero.max())))
        else:
            mean = std = magnitude = 0.0

        stats = {
            "dimension": dimension,
            "non_zero_count": non_zero_count,
            "non_zero_mean": mean,
            "non_zero_std": std,
            "max_magnitude": magnitude,
        }

        reason = None
        if non_zero_count < self.min_nonzero_ratio * dimension:
            reason = (
                f"Embedding has only {non_zero_count}/{dimension} non-zero values; "
                "no usable face was extracted"
            )
        elif std <= self.min_nonzero_std:
            reason = "Embedding values are constant or near-constant"
        elif magnitude <= self.min_nonzero_magnitude:
            reason = "Embedding values are too small to discriminate between faces"

        if reason:
            logger.info("Embedding rejected", reason=reason, **stats)
            return ValidationVerdict(is_valid=False, reason=reason, **stats)

        logger.debug("Embedding accepted", **stats)
        return ValidationVerdict(is_valid=True, **stats)

    def ensure_valid(self, embedding: EmbeddingLike) -> np.ndarray:
        """Validate and return the embedding as an array.

        Raises:
            InvalidEmbeddingError: If the embedding fails validation
        """
        verdict = self.validate(embedding)
        if not verdict.is_valid:
            raise InvalidEmbeddingError(verdict.reason, details=verdict.model_dump())
        return as_embedding(embedding)
