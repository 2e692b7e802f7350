"""Health endpoint router composition for aggregated virtual service health."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from mortgage_sim.orchestrator import OrchestratorNotStartedError, ServiceOrchestratorPort


def api_create_health_router(orchestrator: ServiceOrchestratorPort) -> APIRouter:
    """Create health-check router reporting one fresh poll of every virtual service.

    Args:
        orchestrator: Orchestrator owning the virtual services.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when orchestrator is invalid.
    """

    if orchestrator is None:
        raise ValueError("orchestrator must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    async def api_health_status() -> JSONResponse:
        """Return gateway and per-service health state.

        Returns:
            JSONResponse: 200 `ok` when every service is healthy, 503 `degraded` otherwise.

        Raises:
            RuntimeError: This handler does not raise runtime errors.
        """

        try:
            health_records = await orchestrator.orchestrator_poll_health()
        except OrchestratorNotStartedError as error:
            payload = {"status": "degraded", "app": "up", "services": {}, "detail": str(error)}
            return JSONResponse(content=payload, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

        services = {record.service_name: record.status for record in health_records}
        all_healthy = bool(health_records) and all(record.health_is_healthy() for record in health_records)
        payload = {
            "status": "ok" if all_healthy else "degraded",
            "app": "up",
            "services": services,
        }
        status_code = status.HTTP_200_OK if all_healthy else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(content=payload, status_code=status_code)

    return router
