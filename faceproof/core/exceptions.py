"""Custom exceptions for the face registration service."""
from typing import Optional


class FaceProofError(Exception):
    """Base exception for face registration operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize face registration error.

        Args:
            message: Error description
            details: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidEmbeddingError(FaceProofError):
    """Raised when an embedding fails statistical validation."""
    pass


class DimensionMismatchError(FaceProofError):
    """Raised when two embeddings of different lengths are compared."""

    def __init__(self, left: int, right: int):
        super().__init__(
            f"Embedding dimension mismatch: {left} vs {right}",
            details={"left": left, "right": right},
        )
        self.left = left
        self.right = right


class StoreError(FaceProofError):
    """Base exception for content-addressed store operations."""
    pass


class StoreUnavailableError(StoreError):
    """Raised when the write endpoint of the store cannot accept an upload."""
    pass


class ContentUnavailableError(StoreError):
    """Raised when no read gateway could return a stored payload."""
    pass


class RegistryError(FaceProofError):
    """Base exception for registry operations."""
    pass


class RegistryReadError(RegistryError):
    """Raised when the registry cannot be read."""
    pass


class RegistryWriteError(RegistryError):
    """Raised when a registration transaction fails for reasons other than a duplicate."""
    pass


class AlreadyRegisteredError(RegistryError):
    """Raised when an identity already has a registry entry."""

    def __init__(self, identity: str):
        super().__init__(
            f"Identity {identity} is already registered",
            details={"identity": identity},
        )
        self.identity = identity


class RegistrationError(FaceProofError):
    """Raised when a commit is attempted without a unique verdict."""
    pass


class ExtractionError(FaceProofError):
    """Raised when the external extractor does not return a usable embedding."""
    pass


class ComparisonOracleError(FaceProofError):
    """Raised when the external comparison oracle cannot be reached."""
    pass


class ServiceNotInitializedError(FaceProofError):
    """Raised when a service is requested before the container is initialized."""
    pass
