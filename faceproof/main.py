"""Main application module for the face registration service."""
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from faceproof.api import router as api_v1_router
from faceproof.core.config import Settings
from faceproof.core.container import ServiceContainer
from faceproof.core.exceptions import ServiceNotInitializedError
from faceproof.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[Any, None]:
    """Handle application startup and shutdown events.

    Args:
        app: FastAPI application instance

    Returns:
        AsyncGenerator[Any, None]: Async context manager for app lifecycle
    """
    container: ServiceContainer = app.state.container
    settings = container.settings
    logger.info(
        "Starting up face registration service",
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
    )

    if not container.initialized:
        await container.initialize()
        logger.info("Initialized application services")

    yield

    logger.info("Shutting down face registration service")
    await container.cleanup()
    logger.info("Cleaned up application resources")


async def service_not_initialized_handler(request: Request, exc: ServiceNotInitializedError) -> JSONResponse:
    logger.error("Service not available", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=503, content={"detail": "Service is not initialized"})


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use; loaded from the environment when omitted
        container: Container to serve from; built from the settings when omitted.
            A container that is already initialized is used as is.

    Returns:
        FastAPI: Configured application
    """
    if settings is None:
        settings = container.settings if container is not None else Settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
        lifespan=lifespan,
    )
    app.state.container = container or ServiceContainer(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ServiceNotInitializedError, service_not_initialized_handler)

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.get("/health")
    async def health_check() -> dict:
        """Basic health check endpoint.

        Returns:
            dict: Health status
        """
        logger.info("Health check requested")
        return {"status": "healthy", "version": settings.VERSION}

    return app


def main() -> None:
    """Run the API server with uvicorn."""
    settings = Settings()
    uvicorn.run(
        "faceproof.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
