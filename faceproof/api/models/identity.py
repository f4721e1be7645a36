"""API specific identity models."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from faceproof.domain.value_objects.verdicts import UniquenessVerdict, ValidationVerdict
from faceproof.services.models import RegistrationOutcome

ADDRESS_PATTERN = "^0x[0-9a-fA-F]{40}$"
HEX_PATTERN = "^(0x)?[0-9a-fA-F]+$"


class EmbeddingRequest(BaseModel):
    """Request model for the /validate endpoint."""
    embedding: List[float] = Field(..., description="Face embedding vector", min_length=1)


class UniquenessRequest(BaseModel):
    """Request model for the /uniqueness endpoint."""
    embedding: List[float] = Field(..., description="Face embedding vector", min_length=1)
    identity: Optional[str] = Field(
        None,
        description="Wallet of the caller; its own entry is not compared",
        pattern=ADDRESS_PATTERN,
    )
    exclude_content_address: Optional[str] = Field(
        None,
        description="Content address of the caller's own uploaded payload",
        min_length=1,
    )


class RegistrationRequest(BaseModel):
    """Request model for the /register endpoint."""
    identity: str = Field(..., description="Wallet address to bind", pattern=ADDRESS_PATTERN)
    embedding: List[float] = Field(..., description="Face embedding vector", min_length=1)
    public_key: str = Field(..., description="Hex encoded public key material", pattern=HEX_PATTERN)


class ValidationResponse(BaseModel):
    """Response model for the /validate endpoint."""
    is_valid: bool = Field(..., description="Whether the embedding passed every check")
    reason: Optional[str] = Field(None, description="Message of the first failing check")
    dimension: int = Field(..., description="Length of the embedding")
    non_zero_count: int = Field(..., description="Number of entries not exactly zero")
    non_zero_std: float = Field(..., description="Spread of the non-zero entries")
    max_magnitude: float = Field(..., description="Largest absolute non-zero value")

    @classmethod
    def from_verdict(cls, verdict: ValidationVerdict) -> "ValidationResponse":
        return cls(
            is_valid=verdict.is_valid,
            reason=verdict.reason,
            dimension=verdict.dimension,
            non_zero_count=verdict.non_zero_count,
            non_zero_std=verdict.non_zero_std,
            max_magnitude=verdict.max_magnitude,
        )


class UniquenessResponse(BaseModel):
    """Response model for the /uniqueness endpoint."""
    status: str = Field(..., description="unique, duplicate, indeterminate or invalid")
    best_score: float = Field(..., description="Highest similarity found", ge=0.0, le=1.0)
    matched_identity: Optional[str] = Field(None, description="Owner of the matching registration")
    matched_content_address: Optional[str] = Field(None, description="Payload address of the match")
    reason: Optional[str] = Field(None, description="Why the check was invalid or indeterminate")
    entries_total: int = Field(..., description="Prior registrations at the start of the check")
    entries_compared: int = Field(..., description="Prior registrations actually compared")
    entries_skipped: int = Field(..., description="Prior registrations whose payload was unavailable")
    coverage: float = Field(..., description="Fraction of comparable registrations compared")

    @classmethod
    def from_verdict(cls, verdict: UniquenessVerdict) -> "UniquenessResponse":
        """Convert the service verdict to the API response model."""
        return cls(
            status=verdict.status.value,
            best_score=verdict.best_score,
            matched_identity=verdict.matched_identity,
            matched_content_address=verdict.matched_content_address,
            reason=verdict.reason,
            entries_total=verdict.entries_total,
            entries_compared=verdict.entries_compared,
            entries_skipped=verdict.entries_skipped + verdict.registry_read_errors + verdict.integrity_errors,
            coverage=verdict.coverage,
        )


class RegistrationResponse(BaseModel):
    """Response model for the /register endpoint."""
    identity: str = Field(..., description="Wallet address bound to the face")
    face_hash: str = Field(..., description="0x-prefixed 32-byte face hash")
    content_address: str = Field(..., description="Content address of the stored embedding")
    created_at: Optional[datetime] = Field(None, description="Time the entry was committed")
    best_score: float = Field(..., description="Highest similarity to any prior registration")

    @classmethod
    def from_outcome(cls, outcome: RegistrationOutcome) -> "RegistrationResponse":
        """Convert a successful registration outcome to the API response model."""
        entry = outcome.entry
        return cls(
            identity=entry.identity,
            face_hash=entry.face_hash,
            content_address=entry.content_address,
            created_at=entry.created_at,
            best_score=outcome.verdict.best_score if outcome.verdict else 0.0,
        )
