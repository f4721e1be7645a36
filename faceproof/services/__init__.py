"""Domain services."""
from .registration import RegistrationCommitter, RegistrationService
from .registry_reader import RegistryReader, RegistryScan
from .similarity import SimilarityEngine, cosine_similarity
from .uniqueness import UniquenessCoordinator
from .validation import EmbeddingValidator

__all__ = [
    "EmbeddingValidator",
    "RegistrationCommitter",
    "RegistrationService",
    "RegistryReader",
    "RegistryScan",
    "SimilarityEngine",
    "UniquenessCoordinator",
    "cosine_similarity",
]
