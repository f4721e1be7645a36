"""Registry domain entities."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def normalize_identity(identity: str) -> str:
    """Normalize an identity for comparison (wallet addresses are case-insensitive hex)."""
    return identity.strip().lower()


def same_identity(left: Optional[str], right: Optional[str]) -> bool:
    """Check whether two identities refer to the same wallet."""
    if not left or not right:
        return False
    return normalize_identity(left) == normalize_identity(right)


class RegistryEntry(BaseModel):
    """One committed registration in the append-only registry."""
    identity: str = Field(..., description="Wallet address bound to the face")
    face_hash: str = Field(..., description="0x-prefixed 32-byte face hash")
    content_address: str = Field(..., description="Content address of the stored embedding payload")
    public_key: Optional[str] = Field(None, description="0x-prefixed public key material of the identity")
    created_at: Optional[datetime] = Field(None, description="Time the entry was committed")
    index: Optional[int] = Field(None, description="Position in the registry when enumerated")

    @property
    def is_empty(self) -> bool:
        """True for the registry's 'no entry' sentinel."""
        return not self.identity or normalize_identity(self.identity) == ZERO_ADDRESS
