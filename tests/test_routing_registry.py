"""Tests for route registration, wildcard matching and registry sealing."""

import pytest

from mortgage_sim.routing import (
    RegistryFrozenError,
    RouteRegistrationError,
    RouteRegistry,
    RouteRequest,
    RouteResponse,
)


async def _exact_handler(request: RouteRequest) -> RouteResponse:
    return RouteResponse(status_code=200, envelope={"success": True, "data": "exact"})


async def _wildcard_handler(request: RouteRequest) -> RouteResponse:
    return RouteResponse(status_code=200, envelope={"success": True, "data": "wildcard"})


def test_registry_first_registered_match_wins_over_wildcard() -> None:
    """Verify an exact route registered first shadows a later wildcard route."""

    registry = RouteRegistry("document")
    registry.registry_register("GET", "/api/documents/templates", _exact_handler)
    registry.registry_register("GET", "/api/documents/:document_id", _wildcard_handler)

    exact_match = registry.registry_match("GET", "/api/documents/templates")
    wildcard_match = registry.registry_match("GET", "/api/documents/doc-1")

    assert exact_match.binding.handler is _exact_handler
    assert exact_match.path_params == {}
    assert wildcard_match.binding.handler is _wildcard_handler
    assert wildcard_match.path_params == {"document_id": "doc-1"}


def test_registry_wildcard_registered_first_captures_literal_path() -> None:
    """Verify registration order, not specificity, decides the winner."""

    registry = RouteRegistry("document")
    registry.registry_register("GET", "/api/documents/:document_id", _wildcard_handler)
    registry.registry_register("GET", "/api/documents/templates", _exact_handler)

    route_match = registry.registry_match("GET", "/api/documents/templates")

    assert route_match.binding.handler is _wildcard_handler
    assert route_match.path_params == {"document_id": "templates"}


def test_registry_match_requires_method_and_segment_count() -> None:
    """Verify method and segment count must both agree for a match."""

    registry = RouteRegistry("loan")
    registry.registry_register("GET", "/api/loans/applications/:application_id", _wildcard_handler)

    assert registry.registry_match("POST", "/api/loans/applications/app-1") is None
    assert registry.registry_match("GET", "/api/loans/applications") is None
    assert registry.registry_match("GET", "/api/loans/applications/app-1/status") is None
    assert registry.registry_match("get", "/api/loans/applications/app-1/") is not None


def test_registry_match_ignores_query_string() -> None:
    """Verify query strings never participate in matching."""

    registry = RouteRegistry("loan")
    registry.registry_register("GET", "/api/loans/rates/history", _exact_handler)

    assert registry.registry_match("GET", "/api/loans/rates/history?days=7") is not None


def test_registry_captures_multiple_wildcards() -> None:
    """Verify every wildcard segment is captured by name."""

    registry = RouteRegistry("broker")
    registry.registry_register("PUT", "/api/broker/:section/:client_id/stage", _wildcard_handler)

    route_match = registry.registry_match("PUT", "/api/broker/pipeline/client-1/stage")

    assert route_match.path_params == {"section": "pipeline", "client_id": "client-1"}


def test_registry_rejects_registration_after_freeze() -> None:
    """Verify sealed registries refuse new bindings."""

    registry = RouteRegistry("auth")
    registry.registry_register("POST", "/api/auth/login", _exact_handler)
    registry.registry_freeze()

    assert registry.registry_is_frozen() is True
    with pytest.raises(RegistryFrozenError):
        registry.registry_register("POST", "/api/auth/logout", _exact_handler)
    assert len(registry.registry_bindings()) == 1


@pytest.mark.parametrize(
    ("method", "pattern"),
    [
        ("FETCH", "/api/auth/login"),
        ("GET", "api/auth/login"),
        ("GET", "/api//login"),
        ("GET", "/api/:1bad"),
        ("GET", "/api/:id/items/:id"),
    ],
)
def test_registry_rejects_malformed_registrations(method: str, pattern: str) -> None:
    """Verify malformed methods and patterns raise RouteRegistrationError."""

    registry = RouteRegistry("auth")

    with pytest.raises(RouteRegistrationError):
        registry.registry_register(method, pattern, _exact_handler)
