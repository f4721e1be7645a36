"""Clients for external face APIs."""
from .comparison_oracle import ComparisonOracleClient
from .extractor import HttpEmbeddingExtractor

__all__ = ["ComparisonOracleClient", "HttpEmbeddingExtractor"]
