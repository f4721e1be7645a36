"""In-memory fakes of the store and registry interfaces."""
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

import numpy as np

from faceproof.core.exceptions import (
    AlreadyRegisteredError,
    ContentUnavailableError,
    RegistryReadError,
    StoreUnavailableError,
)
from faceproof.domain.entities.embedding import EmbeddingPayload
from faceproof.domain.entities.registry import RegistryEntry, same_identity
from faceproof.domain.interfaces.registry.registry import Registry
from faceproof.domain.interfaces.storage.content_store import ContentStore
from faceproof.core.utils.encoding import to_hex

IDENTITY_A = "0x1111111111111111111111111111111111111111"
IDENTITY_B = "0x2222222222222222222222222222222222222222"
IDENTITY_C = "0x3333333333333333333333333333333333333333"
PUBLIC_KEY = "0x04" + "ab" * 32


class InMemoryContentStore(ContentStore):
    """Content store keeping payloads in a dict."""

    def __init__(self) -> None:
        self.payloads: Dict[str, EmbeddingPayload] = {}
        self.unavailable: Set[str] = set()
        self.fail_writes = False
        self.reads: List[str] = []

    async def put(self, payload: EmbeddingPayload) -> str:
        if self.fail_writes:
            raise StoreUnavailableError("Store is down")
        address = f"bafy{len(self.payloads):04d}"
        self.payloads[address] = payload
        return address

    async def get(self, address: str) -> EmbeddingPayload:
        self.reads.append(address)
        if address in self.unavailable or address not in self.payloads:
            raise ContentUnavailableError(f"Content {address} unavailable")
        return self.payloads[address]

    def add(self, embedding) -> str:
        address = f"bafy{len(self.payloads):04d}"
        self.payloads[address] = EmbeddingPayload.create(embedding)
        return address


class InMemoryRegistry(Registry):
    """Append-only registry held in a list."""

    def __init__(self) -> None:
        self.entries: List[RegistryEntry] = []
        self.unreadable: Set[int] = set()
        self.count_fails = False
        self.reject_commits = False

    async def count(self) -> int:
        if self.count_fails:
            raise RegistryReadError("Node unreachable")
        return len(self.entries)

    async def entry_at(self, index: int) -> RegistryEntry:
        if index in self.unreadable:
            raise RegistryReadError(f"Entry {index} unreadable")
        return self.entries[index]

    async def entry_for(self, identity: str) -> Optional[RegistryEntry]:
        for entry in self.entries:
            if same_identity(entry.identity, identity):
                return entry
        return None

    async def commit(self, identity: str, face_hash: bytes, content_address: str, public_key: bytes) -> str:
        if self.reject_commits or await self.entry_for(identity) is not None:
            raise AlreadyRegisteredError(identity)
        self.add(identity, content_address, face_hash=face_hash, public_key=public_key)
        return f"0x{len(self.entries):064x}"

    def add(
        self,
        identity: str,
        content_address: str,
        face_hash: bytes = b"\x00" * 32,
        public_key: bytes = b"\x04",
    ) -> RegistryEntry:
        entry = RegistryEntry(
            identity=identity,
            face_hash=to_hex(face_hash),
            content_address=content_address,
            public_key=to_hex(public_key),
            created_at=datetime.now(timezone.utc),
        )
        self.entries.append(entry)
        return entry


def unit(values) -> np.ndarray:
    vector = np.asarray(values, dtype=np.float64)
    return vector / np.linalg.norm(vector)
