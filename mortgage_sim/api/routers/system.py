"""System API router composition for orchestrator status, metrics and fixture reset."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from mortgage_sim.orchestrator import OrchestratorNotStartedError, ServiceOrchestratorPort


def api_create_system_router(orchestrator: ServiceOrchestratorPort) -> APIRouter:
    """Create system router exposing orchestrator operations.

    Args:
        orchestrator: Orchestrator owning the virtual services.

    Returns:
        APIRouter: Router exposing `/system/*` endpoints.

    Raises:
        ValueError: Raised when orchestrator is invalid.
    """

    if orchestrator is None:
        raise ValueError("orchestrator must not be None")

    router = APIRouter(prefix="/system", tags=["system"])

    @router.get("/status")
    def api_system_status() -> JSONResponse:
        last_health = {record.service_name: record.status for record in orchestrator.orchestrator_last_health()}
        payload = {
            "services": orchestrator.orchestrator_get_status(),
            "lastHealth": last_health,
            "endpoints": orchestrator.orchestrator_get_endpoints(),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/metrics")
    def api_system_metrics() -> JSONResponse:
        return JSONResponse(content=orchestrator.orchestrator_get_metrics(), status_code=status.HTTP_200_OK)

    @router.post("/reset")
    def api_system_reset() -> JSONResponse:
        """Restore every fixture collection to seed data.

        Returns:
            JSONResponse: Reset confirmation, or 409 when services are not running.

        Raises:
            RuntimeError: This handler does not raise runtime errors.
        """

        try:
            orchestrator.orchestrator_reset_all()
        except OrchestratorNotStartedError as error:
            payload = {"status": "error", "message": str(error)}
            return JSONResponse(content=payload, status_code=status.HTTP_409_CONFLICT)
        return JSONResponse(content={"status": "reset"}, status_code=status.HTTP_200_OK)

    return router
