"""Tests for request dispatch, response normalization and the fault boundary."""

import pytest
from loguru import logger

from mortgage_sim.routing import (
    INTERNAL_ERROR_MESSAGE,
    NOT_FOUND_MESSAGE,
    DuplicateServiceError,
    RequestDispatcher,
    RouteRegistry,
    RouteRequest,
    RouteResponse,
)


class _StubService:
    """Minimal virtual service double exposing a registry and recording requests."""

    def __init__(self, name: str, base_path: str):
        self.name = name
        self.base_path = base_path
        self.registry = RouteRegistry(name)
        self.requests: list[RouteRequest] = []

    def service_reset(self) -> None:
        self.requests.clear()

    async def stub_echo(self, request: RouteRequest) -> RouteResponse:
        self.requests.append(request)
        return RouteResponse(status_code=200, envelope={"success": True, "data": {"service": self.name}})

    async def stub_raw(self, request: RouteRequest) -> RouteResponse:
        return RouteResponse(status_code=404, envelope={"reason": "raw payload"})

    async def stub_fail(self, request: RouteRequest) -> RouteResponse:
        raise RuntimeError("handler exploded")

    async def stub_malformed(self, request: RouteRequest) -> dict:
        return {"success": True}


def _build_stub(name: str, base_path: str) -> _StubService:
    service = _StubService(name, base_path)
    service.registry.registry_register("GET", f"{base_path}/echo", service.stub_echo)
    service.registry.registry_register("POST", f"{base_path}/echo", service.stub_echo)
    service.registry.registry_register("GET", f"{base_path}/raw", service.stub_raw)
    service.registry.registry_register("GET", f"{base_path}/fail", service.stub_fail)
    service.registry.registry_register("GET", f"{base_path}/malformed", service.stub_malformed)
    service.registry.registry_freeze()
    return service


@pytest.mark.asyncio
async def test_dispatcher_returns_not_found_envelope_for_unknown_route() -> None:
    """Verify unmatched calls return 404 with the standard message."""

    dispatcher = RequestDispatcher([_build_stub("loan", "/api/loans")])

    unknown_path = await dispatcher.dispatcher_dispatch("GET", "/api/unknown")
    unknown_method = await dispatcher.dispatcher_dispatch("DELETE", "/api/loans/echo")

    for result in (unknown_path, unknown_method):
        assert result.status_code == 404
        assert result.envelope == {"success": False, "data": None, "message": NOT_FOUND_MESSAGE}


@pytest.mark.asyncio
async def test_dispatcher_converts_handler_exception_to_internal_error() -> None:
    """Verify handler faults become 500 envelopes and are logged with traceback."""

    captured_messages: list[str] = []
    sink_id = logger.add(captured_messages.append, level="ERROR")
    try:
        dispatcher = RequestDispatcher([_build_stub("loan", "/api/loans")])
        result = await dispatcher.dispatcher_dispatch("GET", "/api/loans/fail")
    finally:
        logger.remove(sink_id)

    assert result.status_code == 500
    assert result.envelope == {"success": False, "data": None, "message": INTERNAL_ERROR_MESSAGE}
    assert any("handler failed for GET /api/loans/fail" in message for message in captured_messages)
    assert any("handler exploded" in message for message in captured_messages)


@pytest.mark.asyncio
async def test_dispatcher_converts_non_response_handler_result_to_internal_error() -> None:
    """Verify a handler returning something other than RouteResponse stays inside the fault boundary."""

    dispatcher = RequestDispatcher([_build_stub("loan", "/api/loans")])

    result = await dispatcher.dispatcher_dispatch("GET", "/api/loans/malformed")

    assert result.status_code == 500
    assert result.envelope == {"success": False, "data": None, "message": INTERNAL_ERROR_MESSAGE}


@pytest.mark.asyncio
async def test_dispatcher_wraps_non_envelope_payloads_by_status() -> None:
    """Verify raw handler payloads are wrapped with success derived from status."""

    dispatcher = RequestDispatcher([_build_stub("loan", "/api/loans")])

    result = await dispatcher.dispatcher_dispatch("GET", "/api/loans/raw")

    assert result.status_code == 404
    assert result.envelope == {"success": False, "data": {"reason": "raw payload"}}
    assert result.dispatch_is_success() is False


@pytest.mark.asyncio
async def test_dispatcher_normalizes_request_contract() -> None:
    """Verify query merge precedence, header casing and default body."""

    service = _build_stub("loan", "/api/loans")
    dispatcher = RequestDispatcher([service])

    result = await dispatcher.dispatcher_dispatch(
        "get",
        "/api/loans/echo/?page=2&status=draft",
        query={"page": "5"},
        headers={"Authorization": "Bearer token"},
    )

    assert result.status_code == 200
    request = service.requests[0]
    assert request.method == "GET"
    assert request.path == "/api/loans/echo"
    assert request.query == {"page": "5", "status": "draft"}
    assert request.request_header("AUTHORIZATION") == "Bearer token"
    assert request.headers == {"authorization": "Bearer token"}
    assert request.body == {}


@pytest.mark.asyncio
async def test_dispatcher_resolves_longest_base_path_first() -> None:
    """Verify nested base paths route to the most specific service."""

    outer_service = _build_stub("outer", "/api/loans")
    inner_service = _build_stub("inner", "/api/loans/special")
    dispatcher = RequestDispatcher([outer_service, inner_service])

    inner_result = await dispatcher.dispatcher_dispatch("GET", "/api/loans/special/echo")
    outer_result = await dispatcher.dispatcher_dispatch("GET", "/api/loans/echo")

    assert inner_result.envelope["data"] == {"service": "inner"}
    assert outer_result.envelope["data"] == {"service": "outer"}
    assert dispatcher.dispatcher_resolve_service("/api/loansx/echo") is None


def test_dispatcher_rejects_duplicate_base_paths() -> None:
    """Verify two services may not own the same base path."""

    trailing_slash_service = _build_stub("b", "/api/loans")
    trailing_slash_service.base_path = "/api/loans/"

    with pytest.raises(DuplicateServiceError):
        RequestDispatcher([_build_stub("a", "/api/loans"), trailing_slash_service])


def test_dispatcher_rejects_missing_services() -> None:
    """Verify constructor validates its dependency."""

    with pytest.raises(ValueError):
        RequestDispatcher(None)
