"""Tests for registry enumeration."""
import pytest

from faceproof.core.exceptions import RegistryReadError
from faceproof.domain.entities.registry import ZERO_ADDRESS
from faceproof.services.registry_reader import RegistryReader

from tests.fakes import IDENTITY_A, IDENTITY_B, IDENTITY_C


async def collect(scan):
    return [entry async for entry in scan]


@pytest.mark.asyncio
async def test_enumerates_entries_in_ledger_order(registry):
    registry.add(IDENTITY_A, "bafyA")
    registry.add(IDENTITY_B, "bafyB")
    registry.add(IDENTITY_C, "bafyC")

    scan = RegistryReader(registry).list_entries()
    entries = await collect(scan)

    assert [entry.identity for entry in entries] == [IDENTITY_A, IDENTITY_B, IDENTITY_C]
    assert [entry.index for entry in entries] == [0, 1, 2]
    assert scan.total == 3
    assert scan.skipped_indices == []


@pytest.mark.asyncio
async def test_unreadable_index_is_skipped(registry):
    registry.add(IDENTITY_A, "bafyA")
    registry.add(IDENTITY_B, "bafyB")
    registry.add(IDENTITY_C, "bafyC")
    registry.unreadable.add(1)

    scan = RegistryReader(registry).list_entries()
    entries = await collect(scan)

    assert [entry.index for entry in entries] == [0, 2]
    assert scan.skipped_indices == [1]


@pytest.mark.asyncio
async def test_empty_entries_are_not_yielded(registry):
    registry.add(IDENTITY_A, "bafyA")
    registry.add(ZERO_ADDRESS, "")

    scan = RegistryReader(registry).list_entries()
    entries = await collect(scan)

    assert len(entries) == 1
    assert scan.empty_indices == [1]


@pytest.mark.asyncio
async def test_count_failure_propagates(registry):
    registry.count_fails = True

    with pytest.raises(RegistryReadError):
        await collect(RegistryReader(registry).list_entries())


@pytest.mark.asyncio
async def test_scan_restarts_on_each_iteration(registry):
    registry.add(IDENTITY_A, "bafyA")
    scan = RegistryReader(registry).list_entries()

    first = await collect(scan)
    registry.add(IDENTITY_B, "bafyB")
    second = await collect(scan)

    assert len(first) == 1
    assert len(second) == 2
    assert scan.total == 2
