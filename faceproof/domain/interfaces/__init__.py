"""Service interfaces package."""
from .extraction import EmbeddingExtractor
from .registry import Registry
from .storage import ContentStore

__all__ = ["ContentStore", "EmbeddingExtractor", "Registry"]
