"""Extraction interfaces."""
from .extractor import EmbeddingExtractor

__all__ = ["EmbeddingExtractor"]
