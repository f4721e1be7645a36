"""Tests for the service container."""
import httpx
import pytest

from faceproof.core.container import ServiceContainer
from faceproof.core.exceptions import ServiceNotInitializedError
from faceproof.infrastructure.registry.contract import ContractRegistry
from faceproof.infrastructure.storage.ipfs import IpfsContentStore
from faceproof.services.external import ComparisonOracleClient, HttpEmbeddingExtractor


@pytest.mark.asyncio
async def test_initialize_builds_configured_implementations(settings):
    container = ServiceContainer(settings)

    await container.initialize()

    assert isinstance(container.content_store, IpfsContentStore)
    assert isinstance(container.registry, ContractRegistry)
    assert container.extractor is None
    assert container.comparison_oracle is None
    assert container.uniqueness_coordinator.threshold == settings.SIMILARITY_THRESHOLD
    assert container.initialized

    await container.cleanup()

    assert not container.initialized
    assert container.http_client is None


@pytest.mark.asyncio
async def test_optional_clients_follow_configuration(settings, content_store, registry):
    configured = settings.model_copy(
        update={
            "EXTRACTOR_URL": "https://extractor.test/extract-embedding",
            "COMPARISON_ORACLE_URL": "https://oracle.test/compare-face",
        }
    )
    container = ServiceContainer(configured)

    await container.initialize(content_store=content_store, registry=registry)

    assert isinstance(container.extractor, HttpEmbeddingExtractor)
    assert isinstance(container.comparison_oracle, ComparisonOracleClient)
    assert container.uniqueness_coordinator.comparison_oracle is container.comparison_oracle
    assert container.content_store is content_store

    await container.cleanup()


@pytest.mark.asyncio
async def test_missing_contract_address_fails_initialization(settings):
    container = ServiceContainer(settings.model_copy(update={"CONTRACT_ADDRESS": ""}))

    with pytest.raises(ServiceNotInitializedError):
        await container.initialize()

    assert container.http_client is None
    assert not container.initialized


@pytest.mark.asyncio
async def test_injected_client_is_left_open(settings, content_store, registry):
    client = httpx.AsyncClient()
    container = ServiceContainer(settings)

    await container.initialize(content_store=content_store, registry=registry, http_client=client)
    await container.cleanup()

    assert container.http_client is None
    assert not client.is_closed
    await client.aclose()


@pytest.mark.asyncio
async def test_owned_client_is_closed_on_cleanup(settings, content_store, registry):
    container = ServiceContainer(settings)
    await container.initialize(content_store=content_store, registry=registry)
    client = container.http_client

    await container.cleanup()

    assert client.is_closed
