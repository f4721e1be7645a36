"""FastAPI dependency providers."""
from typing import AsyncGenerator

from fastapi import Depends, Request

from faceproof.core.container import ServiceContainer
from faceproof.core.exceptions import ServiceNotInitializedError
from faceproof.services.registration import RegistrationService
from faceproof.services.uniqueness import UniquenessCoordinator
from faceproof.services.validation import EmbeddingValidator


async def get_container(request: Request) -> ServiceContainer:
    """Dependency provider for the ServiceContainer owned by the running app."""
    container = getattr(request.app.state, "container", None)
    if container is None or not container.initialized:
        raise ServiceNotInitializedError("Service container is not initialized")
    return container


async def get_validator(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[EmbeddingValidator, None]:
    """Provide the embedding validator.

    Raises:
        ServiceNotInitializedError: If the validator is not initialized
    """
    if container.validator is None:
        raise ServiceNotInitializedError("Embedding validator not initialized")
    yield container.validator


async def get_uniqueness_coordinator(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[UniquenessCoordinator, None]:
    """Provide the uniqueness coordinator.

    Raises:
        ServiceNotInitializedError: If the coordinator is not initialized
    """
    if container.uniqueness_coordinator is None:
        raise ServiceNotInitializedError("Uniqueness coordinator not initialized")
    yield container.uniqueness_coordinator


async def get_registration_service(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[RegistrationService, None]:
    """Dependency provider for RegistrationService."""
    if container.registration_service is None:
        raise ServiceNotInitializedError("RegistrationService not found in initialized container")
    yield container.registration_service
