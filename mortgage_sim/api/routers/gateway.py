"""Gateway router forwarding `/api/*` traffic into the virtual service dispatcher."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from mortgage_sim.client import transport_decode_body
from mortgage_sim.orchestrator import ServiceOrchestratorPort

GATEWAY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def api_create_gateway_router(orchestrator: ServiceOrchestratorPort) -> APIRouter:
    """Create gateway router answering every `/api/...` call from the virtual services.

    Args:
        orchestrator: Orchestrator whose dispatcher receives forwarded calls.

    Returns:
        APIRouter: Catch-all router for the virtual API surface.

    Raises:
        ValueError: Raised when orchestrator is invalid.
    """

    if orchestrator is None:
        raise ValueError("orchestrator must not be None")

    router = APIRouter(tags=["gateway"])

    @router.api_route("/api/{service_path:path}", methods=GATEWAY_METHODS)
    async def api_gateway_forward(service_path: str, request: Request) -> JSONResponse:
        """Forward one call and return the dispatcher status and envelope unchanged."""

        result = await orchestrator.orchestrator_dispatcher.dispatcher_dispatch(
            request.method,
            f"/api/{service_path}",
            query=dict(request.query_params.items()),
            body=transport_decode_body(await request.body()),
            headers=dict(request.headers.items()),
        )
        return JSONResponse(content=result.envelope, status_code=result.status_code)

    return router
