"""Registry interface for the external append-only ledger."""
from abc import ABC, abstractmethod
from typing import Optional

from ...entities.registry import RegistryEntry


class Registry(ABC):
    """Interface for reading and appending identity registrations.

    The ledger is a structure of arrays indexed 0..N-1. Implementations make no
    promise that count() and entry_at() observe the same ledger state.
    """

    @abstractmethod
    async def count(self) -> int:
        """
        Return the number of registrations at call time.

        Raises:
            RegistryReadError: If the ledger cannot be read
        """
        pass

    @abstractmethod
    async def entry_at(self, index: int) -> RegistryEntry:
        """
        Return the registration at a ledger index.

        Raises:
            RegistryReadError: If the entry cannot be read
        """
        pass

    @abstractmethod
    async def entry_for(self, identity: str) -> Optional[RegistryEntry]:
        """
        Return the registration bound to an identity, or None.

        Raises:
            RegistryReadError: If the lookup fails
        """
        pass

    @abstractmethod
    async def commit(
        self,
        identity: str,
        face_hash: bytes,
        content_address: str,
        public_key: bytes,
    ) -> str:
        """
        Append a registration.

        Args:
            identity: Wallet address to bind
            face_hash: 32-byte canonical face hash
            content_address: Address of the uploaded embedding payload
            public_key: Public key material of the identity

        Returns:
            Transaction receipt identifier

        Raises:
            AlreadyRegisteredError: If the ledger already binds the identity
            RegistryWriteError: If the write fails for any other reason
        """
        pass
