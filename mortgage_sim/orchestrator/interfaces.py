"""Typed interfaces for orchestrator-layer responsibilities."""

from dataclasses import dataclass
from typing import Any, Protocol

from mortgage_sim.domain import HealthRecord
from mortgage_sim.routing import RequestDispatcher


@dataclass(frozen=True)
class OrchestratorConfig:
    """Configuration values for service orchestration.

    Attributes:
        health_poll_interval_seconds: Delay between background health polls.
        latency_scale: Multiplier applied to every simulated handler delay.
        service_version: Version reported by service health payloads.
        random_seed: Optional seed for reproducible randomized fields.
    """

    health_poll_interval_seconds: float = 30.0
    latency_scale: float = 1.0
    service_version: str = "1.0.0"
    random_seed: int | None = None


class ServiceOrchestratorPort(Protocol):
    """Port definition for the lifecycle owner of all virtual services."""

    @property
    def orchestrator_dispatcher(self) -> RequestDispatcher:
        """Return the dispatcher routing traffic to the started services.

        Raises:
            OrchestratorNotStartedError: Raised before start or after shutdown.
        """

    async def orchestrator_start(self) -> None:
        """Construct all services and start periodic health polling."""

    async def orchestrator_shutdown(self) -> None:
        """Stop polling and release all services."""

    async def orchestrator_poll_health(self) -> list[HealthRecord]:
        """Poll every service health route once.

        Returns:
            list[HealthRecord]: One record per registered service.

        Raises:
            OrchestratorNotStartedError: Raised before start.
        """

    def orchestrator_get_status(self) -> dict[str, str]:
        """Return `{service_name: "running"}` for every registered service."""

    def orchestrator_reset_all(self) -> None:
        """Restore every fixture collection to its seed contents."""

    def orchestrator_get_metrics(self) -> dict[str, Any]:
        """Return orchestrator runtime metrics."""

    def orchestrator_get_endpoints(self) -> dict[str, list[dict[str, str]]]:
        """Return registered method and pattern pairs per service."""

    def orchestrator_last_health(self) -> list[HealthRecord]:
        """Return the records of the most recent health poll."""
