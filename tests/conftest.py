"""Shared fixtures."""
import numpy as np
import pytest

from faceproof.core.config import Settings

from tests.fakes import InMemoryContentStore, InMemoryRegistry, unit


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        SIMILARITY_THRESHOLD=0.6,
        EMBEDDING_DIMENSION=8,
        PINATA_JWT="test-jwt",
        CONTRACT_ADDRESS="0x5FbDB2315678afecb367f032d93F642f64180aa3",
    )


@pytest.fixture
def content_store() -> InMemoryContentStore:
    return InMemoryContentStore()


@pytest.fixture
def registry() -> InMemoryRegistry:
    return InMemoryRegistry()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def face(rng) -> np.ndarray:
    """A plausible 8-dimensional face embedding."""
    return unit(rng.uniform(-1.0, 1.0, size=8))
