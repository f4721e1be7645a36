"""Domain entities package."""
from .embedding import EmbeddingPayload, as_embedding
from .registry import RegistryEntry, ZERO_ADDRESS, same_identity

__all__ = ["EmbeddingPayload", "as_embedding", "RegistryEntry", "ZERO_ADDRESS", "same_identity"]
