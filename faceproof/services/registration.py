"""Committing unique faces to the registry."""
from datetime import datetime, timezone
from typing import Optional

import numpy as np

from faceproof.core.exceptions import (
    AlreadyRegisteredError,
    FaceProofError,
    InvalidEmbeddingError,
    RegistrationError,
    RegistryReadError,
    StoreUnavailableError,
)
from faceproof.core.logging import get_logger
from faceproof.core.utils.encoding import face_hash, parse_hex, to_bytes32, to_hex
from faceproof.domain.entities.embedding import EmbeddingLike, EmbeddingPayload
from faceproof.domain.entities.registry import RegistryEntry
from faceproof.domain.interfaces.registry.registry import Registry
from faceproof.domain.interfaces.storage.content_store import ContentStore
from faceproof.domain.value_objects.verdicts import UniquenessStatus, UniquenessVerdict
from faceproof.services.models import RegistrationOutcome, RegistrationStatus
from faceproof.services.uniqueness import UniquenessCoordinator
from faceproof.services.validation import EmbeddingValidator

logger = get_logger(__name__)


class RegistrationCommitter:
    """Writes a registry entry for an identity, at most once.

    The not-registered precondition is re-read immediately before the write,
    but check-then-act is still racy against concurrent registrations of the
    same identity. The registry rejects the second write; that rejection
    surfaces as AlreadyRegisteredError, the same as the local re-check.
    """

    def __init__(self, registry: Registry, content_store: ContentStore, payload_version: str = "1.0") -> None:
        self.registry = registry
        self.content_store = content_store
        self.payload_version = payload_version

    async def commit(
        self,
        identity: str,
        embedding: EmbeddingLike,
        verdict: UniquenessVerdict,
        public_key: str,
        content_address: Optional[str] = None,
    ) -> RegistryEntry:
        """Commit a registration.

        Args:
            identity: Wallet address to bind
            embedding: Validated embedding of the face
            verdict: Uniqueness verdict from this same attempt
            public_key: Hex public key material of the identity
            content_address: Address of an already uploaded payload, if any

        Returns:
            The committed RegistryEntry

        Raises:
            RegistrationError: If the verdict is not UNIQUE or the key is malformed
            AlreadyRegisteredError: If the identity is already bound
            StoreUnavailableError: If the payload upload fails
            RegistryWriteError: If the registry write fails
        """
        if verdict.status != UniquenessStatus.UNIQUE:
            raise RegistrationError(
                f"Cannot register without a unique verdict (got {verdict.status.value})",
                details={"status": verdict.status.value},
            )
        try:
            public_key_bytes = parse_hex(public_key)
        except ValueError as e:
            raise RegistrationError(f"Invalid public key: {e}") from e
        if not public_key_bytes:
            raise RegistrationError("Public key is empty")

        await self.ensure_unregistered(identity)

        vector = np.asarray(embedding, dtype=np.float64)
        if content_address is None:
            content_address = await self.content_store.put(
                EmbeddingPayload.create(vector, version=self.payload_version)
            )

        hash_bytes = to_bytes32(face_hash(vector))
        receipt = await self.registry.commit(identity, hash_bytes, content_address, public_key_bytes)

        entry = RegistryEntry(
            identity=identity,
            face_hash=to_hex(hash_bytes),
            content_address=content_address,
            public_key=to_hex(public_key_bytes),
            created_at=datetime.now(timezone.utc),
        )
        logger.info(
            "Registered identity",
            identity=identity,
            content_address=content_address,
            receipt=receipt,
        )
        return entry

    async def ensure_unregistered(self, identity: str) -> None:
        """Raise AlreadyRegisteredError if the identity is already bound."""
        existing = await self.registry.entry_for(identity)
        if existing is not None and not existing.is_empty:
            logger.info("Identity already registered", identity=identity)
            raise AlreadyRegisteredError(identity)


class RegistrationService:
    """Runs a full registration attempt.

    Steps:
    1. Validate the embedding
    2. Stop early if the identity is already bound
    3. Upload its payload to the content-addressed store
    4. Check uniqueness, excluding the fresh upload and the caller's identity
    5. Commit when the verdict is UNIQUE, re-checking the binding first

    Every domain failure becomes a RegistrationOutcome status.

    Example:
        ```python
        outcome = await service.register(wallet, embedding, public_key)
        if outcome.status == RegistrationStatus.DUPLICATE:
            print(outcome.verdict.matched_identity)
        ```
    """

    def __init__(
        self,
        validator: EmbeddingValidator,
        content_store: ContentStore,
        coordinator: UniquenessCoordinator,
        committer: RegistrationCommitter,
        payload_version: str = "1.0",
    ) -> None:
        self.validator = validator
        self.content_store = content_store
        self.coordinator = coordinator
        self.committer = committer
        self.payload_version = payload_version

    async def register(self, identity: str, embedding: EmbeddingLike, public_key: str) -> RegistrationOutcome:
        """Register a face for an identity if it is unique."""
        try:
            vector = self.validator.ensure_valid(embedding)
        except InvalidEmbeddingError as e:
            return RegistrationOutcome(status=RegistrationStatus.INVALID, reason=e.message)

        try:
            await self.committer.ensure_unregistered(identity)
        except AlreadyRegisteredError as e:
            return RegistrationOutcome(status=RegistrationStatus.ALREADY_REGISTERED, reason=e.message)
        except RegistryReadError as e:
            logger.error("Registration aborted, registry unavailable", identity=identity, error=e.message)
            return RegistrationOutcome(
                status=RegistrationStatus.INDETERMINATE,
                reason=f"Registry unavailable: {e.message}",
            )

        try:
            content_address = await self.content_store.put(
                EmbeddingPayload.create(vector, version=self.payload_version)
            )
        except StoreUnavailableError as e:
            logger.error("Registration aborted, payload upload failed", identity=identity, error=e.message)
            return RegistrationOutcome(status=RegistrationStatus.FAILED, reason=e.message)

        verdict = await self.coordinator.check_uniqueness(
            vector,
            identity=identity,
            exclude_content_address=content_address,
        )
        if verdict.status == UniquenessStatus.DUPLICATE:
            return RegistrationOutcome(
                status=RegistrationStatus.DUPLICATE,
                verdict=verdict,
                content_address=content_address,
                reason="A similar face is already registered",
            )
        if verdict.status != UniquenessStatus.UNIQUE:
            status = (
                RegistrationStatus.INVALID
                if verdict.status == UniquenessStatus.INVALID
                else RegistrationStatus.INDETERMINATE
            )
            return RegistrationOutcome(
                status=status,
                verdict=verdict,
                content_address=content_address,
                reason=verdict.reason,
            )

        try:
            entry = await self.committer.commit(
                identity,
                vector,
                verdict,
                public_key,
                content_address=content_address,
            )
        except AlreadyRegisteredError as e:
            return RegistrationOutcome(
                status=RegistrationStatus.ALREADY_REGISTERED,
                verdict=verdict,
                content_address=content_address,
                reason=e.message,
            )
        except FaceProofError as e:
            logger.error("Registration commit failed", identity=identity, error=e.message)
            return RegistrationOutcome(
                status=RegistrationStatus.FAILED,
                verdict=verdict,
                content_address=content_address,
                reason=e.message,
            )

        return RegistrationOutcome(
            status=RegistrationStatus.REGISTERED,
            entry=entry,
            verdict=verdict,
            content_address=content_address,
        )
