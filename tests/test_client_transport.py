"""Tests for the httpx interception transport and the session-aware API client."""

import json

import httpx
import pytest
from loguru import logger

from mortgage_sim.client import (
    REFRESH_TOKEN_KEY,
    TOKEN_KEY,
    USER_KEY,
    InMemoryTokenStore,
    VirtualApiClient,
    VirtualServiceTransport,
    transport_decode_body,
)
from mortgage_sim.orchestrator import OrchestratorConfig, ServiceOrchestrator


async def _start_orchestrator() -> ServiceOrchestrator:
    orchestrator = ServiceOrchestrator(
        config=OrchestratorConfig(latency_scale=0.0),
        random_unit_interval_provider=lambda: 0.0,
    )
    await orchestrator.orchestrator_start()
    return orchestrator


@pytest.mark.asyncio
async def test_transport_routes_httpx_requests_into_dispatcher() -> None:
    """Verify any host is answered locally with dispatcher status and envelope."""

    orchestrator = await _start_orchestrator()
    transport = VirtualServiceTransport(orchestrator.orchestrator_dispatcher)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="https://api.example.com") as client:
            rates = await client.get("/api/loans/rates/history", params={"days": "3"})
            missing = await client.delete("/api/loans/applications/app-999")
    finally:
        await orchestrator.orchestrator_shutdown()

    assert rates.status_code == 200
    assert len(rates.json()["data"]) == 3
    assert missing.status_code == 404
    assert missing.json()["message"] == "Application not found"


@pytest.mark.asyncio
async def test_transport_logs_and_ignores_invalid_json_body() -> None:
    """Verify malformed JSON bodies are dispatched as `{}` with a warning."""

    captured_messages: list[str] = []
    sink_id = logger.add(captured_messages.append, level="WARNING")
    orchestrator = await _start_orchestrator()
    transport = VirtualServiceTransport(orchestrator.orchestrator_dispatcher)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://virtual") as client:
            response = await client.post("/api/auth/login", content=b"{broken")
    finally:
        await orchestrator.orchestrator_shutdown()
        logger.remove(sink_id)

    assert response.status_code == 401
    assert any("not valid JSON" in message for message in captured_messages)


def test_transport_decode_body_handles_empty_and_non_object_bodies() -> None:
    """Verify empty bodies decode to `{}` and JSON arrays are preserved."""

    assert transport_decode_body(b"") == {}
    assert transport_decode_body(b"  ") == {}
    assert transport_decode_body(b"[1, 2]") == [1, 2]


def test_transport_rejects_missing_dispatcher() -> None:
    """Verify constructor validates its dependency."""

    with pytest.raises(ValueError):
        VirtualServiceTransport(None)


@pytest.mark.asyncio
async def test_api_client_persists_and_clears_session() -> None:
    """Verify login stores session values, authenticates calls and logout clears them."""

    orchestrator = await _start_orchestrator()
    token_store = InMemoryTokenStore()
    try:
        async with VirtualApiClient(orchestrator.orchestrator_dispatcher, token_store=token_store) as client:
            login = await client.client_login("demo@borrower.com", "Demo123!", user_type="borrower")
            stored_user = client.client_stored_user()
            current_user = await client.client_get_current_user()
            refreshed = await client.client_refresh()
            await client.client_logout()
            anonymous = await client.client_get_current_user()
    finally:
        await orchestrator.orchestrator_shutdown()

    assert login.status_code == 200
    assert stored_user["email"] == "demo@borrower.com"
    assert current_user.envelope["data"]["id"] == "1"
    assert refreshed.status_code == 200
    assert anonymous.status_code == 401
    for key in (TOKEN_KEY, REFRESH_TOKEN_KEY, USER_KEY):
        assert token_store.store_get(key) is None


@pytest.mark.asyncio
async def test_api_client_register_stores_session_and_failed_login_does_not() -> None:
    """Verify registration persists the new user while failed logins leave storage empty."""

    orchestrator = await _start_orchestrator()
    token_store = InMemoryTokenStore()
    try:
        async with VirtualApiClient(orchestrator.orchestrator_dispatcher, token_store=token_store) as client:
            failed = await client.client_login("demo@borrower.com", "wrong", "borrower")
            authenticated_after_failure = client.client_is_authenticated()
            registered = await client.client_register(
                {"email": "client@example.com", "password": "Secret123!", "firstName": "Kai"}
            )
    finally:
        await orchestrator.orchestrator_shutdown()

    assert failed.status_code == 401
    assert authenticated_after_failure is False
    assert registered.status_code == 201
    assert json.loads(token_store.store_get(USER_KEY))["firstName"] == "Kai"
    assert token_store.store_get(TOKEN_KEY).startswith("auth-jwt-user-")
