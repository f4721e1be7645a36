"""Embedding extractor interface."""
from abc import ABC, abstractmethod

import numpy as np


class EmbeddingExtractor(ABC):
    """Interface for the external face-to-embedding oracle."""

    @abstractmethod
    async def extract(self, image_bytes: bytes) -> np.ndarray:
        """
        Extract a face embedding from an image.

        Args:
            image_bytes: Raw image data

        Returns:
            Embedding vector as a 1-D array

        Raises:
            ExtractionError: If the oracle fails or returns no embedding
        """
        pass
