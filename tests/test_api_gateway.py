"""Tests for gateway forwarding and system routes of the FastAPI application."""

from fastapi.testclient import TestClient

from mortgage_sim.api import create_api_application
from mortgage_sim.config import AppSettings
from mortgage_sim.orchestrator import OrchestratorConfig, ServiceOrchestrator


def _build_client() -> TestClient:
    orchestrator = ServiceOrchestrator(
        config=OrchestratorConfig(latency_scale=0.0, service_version="1.2.3"),
        random_unit_interval_provider=lambda: 0.0,
    )
    settings = AppSettings(latency_scale=0.0, service_version="1.2.3", environment_name="test")
    return TestClient(create_api_application(settings=settings, orchestrator=orchestrator))


def test_api_foundation_index_reports_environment() -> None:
    """Verify the root route reports foundation metadata."""

    with _build_client() as client:
        response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {
        "service": "mortgage-service-virtualization",
        "status": "foundation-ready",
        "environment": "test",
        "version": "1.2.3",
    }


def test_api_gateway_forwards_calls_with_status_and_envelope() -> None:
    """Verify login, authenticated reads and unknown routes pass through unchanged."""

    with _build_client() as client:
        login = client.post(
            "/api/auth/login",
            json={"email": "demo@borrower.com", "password": "Demo123!", "userType": "borrower"},
        )
        token = login.json()["data"]["token"]
        current_user = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        wrong_password = client.post("/api/auth/login", json={"email": "demo@borrower.com", "password": "nope"})
        unknown = client.get("/api/unknown/route")

    assert login.status_code == 200
    assert current_user.json()["data"]["email"] == "demo@borrower.com"
    assert wrong_password.status_code == 401
    assert wrong_password.json() == {"success": False, "data": None, "message": "Invalid credentials"}
    assert unknown.status_code == 404
    assert unknown.json()["message"] == "API endpoint not found"


def test_api_gateway_forwards_query_and_treats_invalid_json_as_empty_body() -> None:
    """Verify query parameters reach handlers and malformed bodies decode to `{}`."""

    with _build_client() as client:
        history = client.get("/api/loans/rates/history", params={"days": "5"})
        created = client.post(
            "/api/broker/clients",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

    assert len(history.json()["data"]) == 5
    assert created.status_code == 201
    assert created.json()["data"]["status"] == "prospect"


def test_api_system_routes_report_and_reset_state() -> None:
    """Verify status, metrics and reset operate on the running orchestrator."""

    with _build_client() as client:
        client.post("/api/broker/clients", json={"firstName": "Tmp"})
        status_response = client.get("/system/status")
        metrics_response = client.get("/system/metrics")
        reset_response = client.post("/system/reset")
        clients_after_reset = client.get("/api/broker/clients")

    assert status_response.status_code == 200
    assert status_response.json()["services"]["broker"] == "running"
    assert {"method": "GET", "pattern": "/api/broker/pipeline"} in status_response.json()["endpoints"]["broker"]
    assert metrics_response.json()["serviceCount"] == 6
    assert metrics_response.json()["version"] == "1.2.3"
    assert reset_response.json() == {"status": "reset"}
    assert clients_after_reset.json()["data"]["total"] == 3
