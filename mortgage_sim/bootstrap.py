"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from mortgage_sim.api import create_api_application
from mortgage_sim.config import AppSettings, config_configure_logging, config_load_settings
from mortgage_sim.orchestrator import OrchestratorConfig, ServiceOrchestrator


def bootstrap_create_orchestrator(settings: AppSettings) -> ServiceOrchestrator:
    """Build an unstarted orchestrator from validated settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        ServiceOrchestrator: Orchestrator ready for `orchestrator_start`.

    Raises:
        ValueError: Raised when settings is None.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    return ServiceOrchestrator(
        config=OrchestratorConfig(
            health_poll_interval_seconds=settings.health_poll_interval_seconds,
            latency_scale=settings.latency_scale,
            service_version=settings.service_version,
            random_seed=settings.random_seed,
        )
    )


def bootstrap_create_application() -> FastAPI:
    """Assemble the gateway application after validating startup configuration.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    settings = config_load_settings()
    config_configure_logging(settings)
    return create_api_application(settings=settings, orchestrator=bootstrap_create_orchestrator(settings))
