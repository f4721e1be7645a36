"""Verdict value objects produced by validation and uniqueness checks."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ValidationVerdict(BaseModel):
    """Result of statistical validation of one embedding."""
    is_valid: bool = Field(..., description="Whether the embedding passed every check")
    reason: Optional[str] = Field(None, description="Message of the first failing check")
    dimension: int = Field(0, description="Length of the embedding")
    non_zero_count: int = Field(0, description="Number of entries not exactly zero")
    non_zero_mean: float = Field(0.0, description="Mean of the non-zero entries")
    non_zero_std: float = Field(0.0, description="Population standard deviation of the non-zero entries")
    max_magnitude: float = Field(0.0, description="Largest absolute value among non-zero entries")


class UniquenessStatus(str, Enum):
    """Discriminates the outcomes of a uniqueness check."""
    UNIQUE = "unique"
    DUPLICATE = "duplicate"
    INDETERMINATE = "indeterminate"
    INVALID = "invalid"


class UniquenessVerdict(BaseModel):
    """Result of comparing a candidate against every reachable registry entry.

    The counters make coverage observable: entries_skipped counts prior
    registrations whose payload could not be fetched, so a UNIQUE verdict with
    skipped entries is weaker than one without.
    """
    status: UniquenessStatus = Field(..., description="Outcome of the check")
    best_score: float = Field(0.0, description="Highest similarity found", ge=0.0, le=1.0)
    matched_identity: Optional[str] = Field(None, description="Owner of the best match when duplicate")
    matched_content_address: Optional[str] = Field(None, description="Payload address of the best match when duplicate")
    reason: Optional[str] = Field(None, description="Why the check was invalid or indeterminate")
    entries_total: int = Field(0, description="Registry count read at the start of the check")
    entries_compared: int = Field(0, description="Entries actually scored")
    entries_excluded: int = Field(0, description="Entries that are the caller's own or empty")
    entries_skipped: int = Field(0, description="Entries whose payload was unavailable")
    registry_read_errors: int = Field(0, description="Registry indices that could not be read")
    integrity_errors: int = Field(0, description="Stored payloads with a mismatched dimension")

    @property
    def is_unique(self) -> bool:
        return self.status == UniquenessStatus.UNIQUE

    @property
    def coverage(self) -> float:
        """Fraction of comparable entries that were actually scored."""
        comparable = self.entries_total - self.entries_excluded
        if comparable <= 0:
            return 1.0
        return self.entries_compared / comparable


class OracleComparison(BaseModel):
    """Raw answer of the external comparison oracle for one stored payload."""
    similarity: float = Field(0.0, description="Similarity reported by the oracle")
    success: bool = Field(False, description="Whether the oracle completed the comparison")
    error: Optional[str] = Field(None, description="Error reported by the oracle")
