"""Service-specific models.

This module contains models used by services that are independent of the API layer.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from faceproof.domain.entities.registry import RegistryEntry
from faceproof.domain.value_objects.verdicts import UniquenessVerdict


class RegistrationStatus(str, Enum):
    """Discriminates the outcomes of a registration attempt."""
    REGISTERED = "registered"
    DUPLICATE = "duplicate"
    ALREADY_REGISTERED = "already_registered"
    INVALID = "invalid"
    INDETERMINATE = "indeterminate"
    FAILED = "failed"


class RegistrationOutcome(BaseModel):
    """Result of one end-to-end registration attempt."""
    status: RegistrationStatus = Field(..., description="Outcome of the attempt")
    entry: Optional[RegistryEntry] = Field(None, description="Committed entry when registered")
    verdict: Optional[UniquenessVerdict] = Field(None, description="Uniqueness verdict, when a check ran")
    content_address: Optional[str] = Field(None, description="Address of the uploaded payload, if any")
    reason: Optional[str] = Field(None, description="Human-readable reason for any non-registered status")

    @property
    def registered(self) -> bool:
        return self.status == RegistrationStatus.REGISTERED
