"""Embedding domain entities."""
import time
from typing import Sequence, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from faceproof.core.exceptions import InvalidEmbeddingError

EmbeddingLike = Union[np.ndarray, Sequence[float]]


def as_embedding(values: EmbeddingLike) -> np.ndarray:
    """Convert a raw vector to a read-only 1-D float64 array.

    Raises:
        InvalidEmbeddingError: If the values are not a flat numeric sequence
    """
    try:
        array = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidEmbeddingError(f"Embedding is not numeric: {e}") from e
    if array.ndim != 1:
        raise InvalidEmbeddingError(
            "Embedding must be a flat vector", details={"shape": list(array.shape)}
        )
    array.setflags(write=False)
    return array


class EmbeddingPayload(BaseModel):
    """Document stored in the content-addressed store for one registration."""
    embedding: np.ndarray = Field(..., description="Face embedding vector")
    timestamp: int = Field(..., description="Upload time in milliseconds since the epoch")
    version: str = Field("1.0", description="Payload format version")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("embedding", mode="before")
    @classmethod
    def validate_embedding(cls, v: EmbeddingLike) -> np.ndarray:
        """Convert embedding lists to numpy arrays."""
        try:
            return as_embedding(v)
        except InvalidEmbeddingError as e:
            raise ValueError(e.message) from e

    @classmethod
    def create(cls, embedding: EmbeddingLike, version: str = "1.0") -> "EmbeddingPayload":
        """Build a payload stamped with the current time.

        Two uploads of the same embedding therefore carry different timestamps
        and resolve to different content addresses.
        """
        return cls(embedding=embedding, timestamp=int(time.time() * 1000), version=version)

    def to_document(self) -> dict:
        """Render the payload as a JSON-serializable dict."""
        return {
            "embedding": self.embedding.tolist(),
            "timestamp": self.timestamp,
            "version": self.version,
        }
