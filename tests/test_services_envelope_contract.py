"""Tests for the response envelope contract across every registered route.

Each route is called with an empty body, a non-object body and an object
whose fields carry the wrong JSON types. Every call must answer with a
structurally valid envelope and never fall through to the fault boundary.
"""

from typing import Any

import pytest

from mortgage_sim.orchestrator import OrchestratorConfig, ServiceOrchestrator

_PATH_PARAM_VALUES = {
    "application_id": "app-1",
    "client_id": "client-1",
    "document_id": "doc-1",
    "notification_id": "notif-1",
    "quote_id": "quote-123",
}

_MISTYPED_BODY: dict[str, Any] = {
    "email": 42,
    "password": ["Demo123!"],
    "userType": {"role": "broker"},
    "refreshToken": False,
    "token": 99,
    "newPassword": 12345678,
    "loanAmount": "lots",
    "propertyValue": [],
    "interestRate": [],
    "loanTerm": "forever",
    "income": {},
    "debts": "some",
    "downPayment": None,
    "aiScore": "high",
    "stage": ["closing"],
    "status": 7,
    "type": ["system"],
    "priority": {"level": "high"},
    "recipients": "everyone",
    "documentIds": "doc-1",
    "userId": {"id": "1"},
    "name": ["statement.pdf"],
    "firstName": None,
}

_REQUEST_BODIES = (None, ["not", "an", "object"], "plain text", _MISTYPED_BODY)


def _fill_path(pattern: str) -> str:
    segments = []
    for segment in pattern.split("/"):
        if segment.startswith(":"):
            segment = _PATH_PARAM_VALUES.get(segment[1:], "unknown-id")
        segments.append(segment)
    return "/".join(segments)


def _assert_envelope(status_code: int, envelope: Any, label: str) -> None:
    assert status_code != 500, label
    assert isinstance(envelope, dict), label
    assert isinstance(envelope.get("success"), bool), label
    assert envelope["success"] is (status_code < 400), label
    assert "data" in envelope or "message" in envelope, label
    if not envelope["success"]:
        assert isinstance(envelope.get("message"), str) and envelope["message"], label


@pytest.mark.asyncio
async def test_services_every_route_keeps_envelope_contract_for_malformed_bodies() -> None:
    """Verify all registered routes keep the envelope contract for hostile input."""

    orchestrator = ServiceOrchestrator(
        config=OrchestratorConfig(latency_scale=0.0),
        random_unit_interval_provider=lambda: 0.5,
    )
    await orchestrator.orchestrator_start()
    try:
        dispatcher = orchestrator.orchestrator_dispatcher
        endpoints = orchestrator.orchestrator_get_endpoints()
        dispatched_count = 0
        for body in _REQUEST_BODIES:
            for bindings in endpoints.values():
                for binding in bindings:
                    path = _fill_path(binding["pattern"])
                    result = await dispatcher.dispatcher_dispatch(binding["method"], path, body=body)
                    _assert_envelope(result.status_code, result.envelope, f"{binding['method']} {path} body={body!r}")
                    dispatched_count += 1

        # Reads after the hostile writes above must still succeed.
        for bindings in endpoints.values():
            for binding in bindings:
                if binding["method"] != "GET":
                    continue
                path = _fill_path(binding["pattern"])
                result = await dispatcher.dispatcher_dispatch("GET", path)
                _assert_envelope(result.status_code, result.envelope, f"GET {path} after writes")
                assert result.status_code == 200 or path.startswith("/api/auth/me"), path
    finally:
        await orchestrator.orchestrator_shutdown()

    assert dispatched_count == len(_REQUEST_BODIES) * sum(len(bindings) for bindings in endpoints.values())
