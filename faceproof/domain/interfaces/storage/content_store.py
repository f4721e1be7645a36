"""Content-addressed store interface for embedding payloads."""
from abc import ABC, abstractmethod

from ...entities.embedding import EmbeddingPayload


class ContentStore(ABC):
    """Interface for storing and fetching embedding payloads by content address."""

    @abstractmethod
    async def put(self, payload: EmbeddingPayload) -> str:
        """
        Upload a payload to the single authoritative write endpoint.

        Args:
            payload: Embedding payload to store

        Returns:
            The content address assigned by the store

        Raises:
            StoreUnavailableError: If the write endpoint rejects or cannot be reached
        """
        pass

    @abstractmethod
    async def get(self, address: str) -> EmbeddingPayload:
        """
        Fetch a payload, falling back across read endpoints.

        Args:
            address: Content address returned by a previous put

        Returns:
            The stored payload

        Raises:
            ContentUnavailableError: If every read endpoint failed
        """
        pass
