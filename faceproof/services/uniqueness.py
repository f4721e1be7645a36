"""Uniqueness checks of a candidate face against every prior registration."""
import asyncio
import math
from typing import Awaitable, Callable, List, Optional, Tuple

from faceproof.core.exceptions import (
    ComparisonOracleError,
    ContentUnavailableError,
    DimensionMismatchError,
    FaceProofError,
    RegistryReadError,
)
from faceproof.core.logging import get_logger
from faceproof.domain.entities.embedding import EmbeddingLike, as_embedding
from faceproof.domain.entities.registry import RegistryEntry, same_identity
from faceproof.domain.interfaces.storage.content_store import ContentStore
from faceproof.domain.value_objects.verdicts import UniquenessStatus, UniquenessVerdict
from faceproof.infrastructure.storage.ipfs import clean_address
from faceproof.services.external.comparison_oracle import ComparisonOracleClient
from faceproof.services.registry_reader import RegistryReader
from faceproof.services.similarity import SimilarityEngine
from faceproof.services.validation import EmbeddingValidator

logger = get_logger(__name__)

SCORED = "scored"
SKIPPED = "skipped"
INTEGRITY = "integrity"

EntryScorer = Callable[[RegistryEntry], Awaitable[float]]
EntryOutcome = Tuple[str, RegistryEntry, float]


class UniquenessCoordinator:
    """Decides whether a face is already registered.

    For every registry entry other than the caller's own, the stored embedding
    is fetched and scored against the candidate. The best score across all
    entries decides the verdict: strictly above the threshold is a duplicate,
    anything else is unique.

    Partial failure degrades coverage instead of failing the check: an entry
    whose payload cannot be fetched is logged and counted in
    entries_skipped. Failure to enumerate the registry at all yields an
    INDETERMINATE verdict, never UNIQUE.

    No lock is held between a check and the subsequent commit. A similar face
    registered concurrently by another identity can slip through; the
    registry's one-registration-per-identity rule is the only final arbiter.

    Example:
        ```python
        coordinator = UniquenessCoordinator(validator, engine, store, reader)
        verdict = await coordinator.check_uniqueness(
            embedding,
            identity="0xabc...",
            exclude_content_address=cid,
        )
        ```
    """

    def __init__(
        self,
        validator: EmbeddingValidator,
        similarity_engine: SimilarityEngine,
        content_store: ContentStore,
        registry_reader: RegistryReader,
        comparison_oracle: Optional[ComparisonOracleClient] = None,
        concurrency: int = 4,
        min_coverage: float = 0.0,
    ) -> None:
        """Initialize the coordinator.

        Args:
            validator: Validator applied to the candidate before any fetch
            similarity_engine: Scoring and threshold policy
            content_store: Store holding prior embedding payloads
            registry_reader: Enumerates prior registrations
            comparison_oracle: Optional server-side image comparison
            concurrency: Maximum number of entries fetched and scored at once
            min_coverage: Fraction of comparable entries that must be scored
                for a UNIQUE verdict to stand
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.validator = validator
        self.similarity_engine = similarity_engine
        self.content_store = content_store
        self.registry_reader = registry_reader
        self.comparison_oracle = comparison_oracle
        self.concurrency = concurrency
        self.min_coverage = min_coverage

    @property
    def threshold(self) -> float:
        return self.similarity_engine.threshold

    async def check_uniqueness(
        self,
        candidate: EmbeddingLike,
        identity: Optional[str] = None,
        exclude_content_address: Optional[str] = None,
    ) -> UniquenessVerdict:
        """Check a candidate embedding against every prior registration.

        Args:
            candidate: Embedding of the face being registered
            identity: Wallet of the caller; its own entry is never compared
            exclude_content_address: Address of the caller's just-uploaded payload

        Returns:
            UniquenessVerdict; never raises for domain failures
        """
        verdict = self.validator.validate(candidate)
        if not verdict.is_valid:
            logger.info("Uniqueness check rejected invalid candidate", reason=verdict.reason)
            return UniquenessVerdict(status=UniquenessStatus.INVALID, reason=verdict.reason)

        vector = as_embedding(candidate)

        async def score_entry(entry: RegistryEntry) -> float:
            payload = await self.content_store.get(entry.content_address)
            return self.similarity_engine.similarity(vector, payload.embedding)

        return await self._guarded_check(score_entry, identity, exclude_content_address)

    async def check_uniqueness_with_oracle(
        self,
        image_bytes: bytes,
        identity: Optional[str] = None,
        exclude_content_address: Optional[str] = None,
    ) -> UniquenessVerdict:
        """Check a face image using the external comparison oracle.

        The oracle only supplies similarity scores. Any match decision it
        returns is ignored; threshold and tie-break are applied here.
        """
        if self.comparison_oracle is None:
            return UniquenessVerdict(
                status=UniquenessStatus.INDETERMINATE,
                reason="Comparison oracle is not configured",
            )
        oracle = self.comparison_oracle

        async def score_entry(entry: RegistryEntry) -> float:
            result = await oracle.compare(image_bytes, entry.content_address)
            if not result.success:
                raise ComparisonOracleError(
                    result.error or "Oracle comparison failed",
                    details={"content_address": entry.content_address},
                )
            score = float(result.similarity)
            # non-finite scores are left for _score to reject
            return min(max(score, 0.0), 1.0) if math.isfinite(score) else score

        return await self._guarded_check(score_entry, identity, exclude_content_address)

    async def _guarded_check(
        self,
        score_entry: EntryScorer,
        identity: Optional[str],
        exclude_content_address: Optional[str],
    ) -> UniquenessVerdict:
        """Run a check, converting every failure into an INDETERMINATE verdict."""
        try:
            return await self._check(score_entry, identity, exclude_content_address)
        except RegistryReadError as e:
            logger.error("Registry could not be enumerated", error=e.message)
            return UniquenessVerdict(
                status=UniquenessStatus.INDETERMINATE,
                reason=f"Registry unavailable: {e.message}",
            )
        except FaceProofError as e:
            logger.error("Uniqueness check failed", error=e.message, details=e.details)
            return UniquenessVerdict(status=UniquenessStatus.INDETERMINATE, reason=e.message)
        except Exception as e:
            logger.error("Unexpected error during uniqueness check", error=str(e), exc_info=True)
            return UniquenessVerdict(
                status=UniquenessStatus.INDETERMINATE,
                reason="Unexpected error during uniqueness check",
            )

    async def _check(
        self,
        score_entry: EntryScorer,
        identity: Optional[str],
        exclude_content_address: Optional[str],
    ) -> UniquenessVerdict:
        excluded_address = clean_address(exclude_content_address) if exclude_content_address else None
        semaphore = asyncio.Semaphore(self.concurrency)
        tasks: List["asyncio.Task[EntryOutcome]"] = []
        excluded = 0

        scan = self.registry_reader.list_entries()
        try:
            async for entry in scan:
                if same_identity(entry.identity, identity) or (
                    excluded_address and clean_address(entry.content_address) == excluded_address
                ):
                    logger.debug("Skipping caller's own entry", index=entry.index, identity=entry.identity)
                    excluded += 1
                    continue
                tasks.append(asyncio.create_task(self._score(entry, score_entry, semaphore)))
            outcomes = await asyncio.gather(*tasks)
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                # wait for cancelled fetches to unwind before leaving
                await asyncio.gather(*pending, return_exceptions=True)

        total = scan.total or 0
        excluded += len(scan.empty_indices)
        read_errors = len(scan.skipped_indices)

        if total == 0:
            logger.info("Registry is empty, candidate is unique")
            return UniquenessVerdict(status=UniquenessStatus.UNIQUE, best_score=0.0)

        best_score = 0.0
        best_entry: Optional[RegistryEntry] = None
        compared = skipped = integrity = 0
        # outcomes follow ledger order, so ties keep the lowest index
        for kind, entry, score in outcomes:
            if kind == SCORED:
                compared += 1
                if best_entry is None or score > best_score:
                    best_score = score
                    best_entry = entry
            elif kind == INTEGRITY:
                integrity += 1
            else:
                skipped += 1

        counters = {
            "entries_total": total,
            "entries_compared": compared,
            "entries_excluded": excluded,
            "entries_skipped": skipped,
            "registry_read_errors": read_errors,
            "integrity_errors": integrity,
        }

        if best_entry is not None and self.similarity_engine.is_match(best_score):
            logger.info(
                "Duplicate face found",
                best_score=best_score,
                matched_identity=best_entry.identity,
                threshold=self.threshold,
                **counters,
            )
            return UniquenessVerdict(
                status=UniquenessStatus.DUPLICATE,
                best_score=best_score,
                matched_identity=best_entry.identity,
                matched_content_address=best_entry.content_address,
                **counters,
            )

        comparable = total - excluded
        coverage = compared / comparable if comparable > 0 else 1.0
        if comparable > 0 and (compared == 0 or coverage < self.min_coverage):
            logger.warning(
                "Too few prior registrations could be compared",
                coverage=coverage,
                min_coverage=self.min_coverage,
                **counters,
            )
            return UniquenessVerdict(
                status=UniquenessStatus.INDETERMINATE,
                best_score=best_score,
                reason=f"Only {compared} of {comparable} prior registrations could be compared",
                **counters,
            )

        if skipped or read_errors or integrity:
            logger.warning(
                "Uniqueness check completed with coverage gaps",
                best_score=best_score,
                coverage=coverage,
                **counters,
            )
        else:
            logger.info("Candidate is unique", best_score=best_score, threshold=self.threshold, **counters)

        return UniquenessVerdict(status=UniquenessStatus.UNIQUE, best_score=best_score, **counters)

    async def _score(
        self,
        entry: RegistryEntry,
        score_entry: EntryScorer,
        semaphore: asyncio.Semaphore,
    ) -> EntryOutcome:
        """Score one entry, classifying per-entry failures."""
        if not entry.content_address:
            logger.warning("Registry entry has no content address", index=entry.index, identity=entry.identity)
            return SKIPPED, entry, 0.0

        async with semaphore:
            try:
                score = await score_entry(entry)
            except (ContentUnavailableError, ComparisonOracleError) as e:
                logger.warning(
                    "Prior registration not compared, coverage gap",
                    index=entry.index,
                    identity=entry.identity,
                    content_address=entry.content_address,
                    error=e.message,
                )
                return SKIPPED, entry, 0.0
            except DimensionMismatchError as e:
                logger.error(
                    "Stored embedding has a different dimension than the candidate",
                    index=entry.index,
                    identity=entry.identity,
                    content_address=entry.content_address,
                    stored_dimension=e.right,
                    candidate_dimension=e.left,
                )
                return INTEGRITY, entry, 0.0

        if not math.isfinite(score):
            logger.error(
                "Prior registration scored a non-finite similarity",
                index=entry.index,
                identity=entry.identity,
                content_address=entry.content_address,
            )
            return INTEGRITY, entry, 0.0

        logger.debug("Scored prior registration", index=entry.index, score=score)
        return SCORED, entry, score
