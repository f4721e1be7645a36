"""Lazy enumeration of registry entries."""
from typing import AsyncIterator, List, Optional

from faceproof.core.exceptions import RegistryReadError
from faceproof.core.logging import get_logger
from faceproof.domain.entities.registry import RegistryEntry
from faceproof.domain.interfaces.registry.registry import Registry

logger = get_logger(__name__)


class RegistryScan:
    """One pass over the registry, restartable by iterating again.

    The count is read when iteration starts; entries appended afterwards are
    not seen by this pass. A failing index is logged and skipped, a failing
    count propagates as RegistryReadError.

    Attributes:
        total: Count read at the start of the most recent pass
        skipped_indices: Indices that could not be read during that pass
        empty_indices: Indices holding the registry's empty sentinel
    """

    def __init__(self, registry: Registry) -> None:
        self._registry = registry
        self.total: Optional[int] = None
        self.skipped_indices: List[int] = []
        self.empty_indices: List[int] = []

    def __aiter__(self) -> AsyncIterator[RegistryEntry]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[RegistryEntry]:
        self.total = None
        self.skipped_indices = []
        self.empty_indices = []

        total = await self._registry.count()
        self.total = total
        logger.debug("Enumerating registry", total=total)

        for index in range(total):
            try:
                entry = await self._registry.entry_at(index)
            except RegistryReadError as e:
                logger.warning("Skipping unreadable registry entry", index=index, error=e.message)
                self.skipped_indices.append(index)
                continue

            if entry.is_empty:
                logger.debug("Skipping empty registry entry", index=index)
                self.empty_indices.append(index)
                continue

            if entry.index is None:
                entry = entry.model_copy(update={"index": index})
            yield entry


class RegistryReader:
    """Enumerates the committed (identity, content address) pairs of a registry."""

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def list_entries(self) -> RegistryScan:
        """Start a lazy enumeration over the registry."""
        return RegistryScan(self.registry)
