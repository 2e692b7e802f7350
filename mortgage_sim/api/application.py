"""FastAPI application factory for the virtual service gateway.

The application lifespan owns the orchestrator: services are constructed on
startup and released on shutdown.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from mortgage_sim.config import AppSettings
from mortgage_sim.orchestrator import ServiceOrchestratorPort

from .routers import api_create_gateway_router, api_create_health_router, api_create_system_router


def create_api_application(settings: AppSettings, orchestrator: ServiceOrchestratorPort) -> FastAPI:
    """Create the FastAPI application instance for the gateway.

    Args:
        settings: Validated application settings used for runtime metadata.
        orchestrator: Orchestrator started and stopped by the application lifespan.

    Returns:
        FastAPI: Framework application instance with gateway, health and system routes.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if orchestrator is None:
        raise ValueError("orchestrator must not be None")

    @asynccontextmanager
    async def api_lifespan(application: FastAPI) -> AsyncIterator[None]:
        await orchestrator.orchestrator_start()
        try:
            yield
        finally:
            await orchestrator.orchestrator_shutdown()

    application = FastAPI(title="Mortgage Service Virtualization", lifespan=api_lifespan)

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal foundation response for bootstrap verification."""

        return {
            "service": "mortgage-service-virtualization",
            "status": "foundation-ready",
            "environment": settings.environment_name,
            "version": settings.service_version,
        }

    application.include_router(api_create_health_router(orchestrator=orchestrator))
    application.include_router(api_create_system_router(orchestrator=orchestrator))
    application.include_router(api_create_gateway_router(orchestrator=orchestrator))

    return application
