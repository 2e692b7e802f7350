"""Tests for scripted AI routes and the shared health payload."""

from datetime import datetime, timezone

import pytest

from mortgage_sim.fixtures import FixtureStore
from mortgage_sim.routing import LatencySimulator, RequestDispatcher
from mortgage_sim.services import AiVirtualService
from mortgage_sim.services.ai import CHAT_RESPONSES, ai_risk_level


def _fixed_clock() -> datetime:
    return datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)


def _build_dispatcher(random_value: float = 0.0) -> RequestDispatcher:
    service = AiVirtualService(
        store=FixtureStore(clock=_fixed_clock),
        latency=LatencySimulator(scale=0),
        version="1.0.0",
        random_unit_interval_provider=lambda: random_value,
        clock=_fixed_clock,
    )
    return RequestDispatcher([service])


@pytest.mark.asyncio
async def test_ai_health_reports_models_and_fixed_version() -> None:
    """Verify the AI health payload carries its own version and model table."""

    dispatcher = _build_dispatcher()

    result = await dispatcher.dispatcher_dispatch("GET", "/api/ai/health")

    health = result.envelope["data"]
    assert result.status_code == 200
    assert health["service"] == "ai-service"
    assert health["status"] == "healthy"
    assert health["version"] == "2.0.1"
    assert health["timestamp"] == "2024-02-01T12:00:00.000Z"
    assert set(health["models"]) >= {"loan-matching", "risk-assessment", "client-scoring"}


@pytest.mark.asyncio
async def test_ai_risk_assessment_stays_in_band() -> None:
    """Verify the top of the random band yields the highest low-risk score."""

    dispatcher = _build_dispatcher(random_value=0.99)

    result = await dispatcher.dispatcher_dispatch(
        "POST",
        "/api/ai/risk-assessment",
        body={"applicationId": "app-1"},
    )

    assessment = result.envelope["data"]
    assert assessment["applicationId"] == "app-1"
    assert assessment["riskScore"] == 99
    assert assessment["riskLevel"] == "Low"
    assert 0.99 <= assessment["approvalProbability"] <= 1.09


@pytest.mark.asyncio
async def test_ai_chat_picks_scripted_reply() -> None:
    """Verify chat replies come from the scripted set with a fresh conversation id."""

    dispatcher = _build_dispatcher(random_value=0.0)

    result = await dispatcher.dispatcher_dispatch("POST", "/api/ai/chat", body={"message": "hello"})

    assert result.envelope["data"]["response"] == CHAT_RESPONSES[0]
    assert result.envelope["data"]["conversationId"] == "conv-1000"


@pytest.mark.asyncio
async def test_ai_optimization_payload_is_not_shared_between_calls() -> None:
    """Verify mutating one response does not leak into the next."""

    dispatcher = _build_dispatcher()

    first = await dispatcher.dispatcher_dispatch("POST", "/api/ai/performance-optimization")
    first.envelope["data"]["optimizations"].clear()
    second = await dispatcher.dispatcher_dispatch("POST", "/api/ai/performance-optimization")

    assert second.envelope["data"]["optimizations"]


@pytest.mark.asyncio
async def test_ai_rejects_out_of_range_random_provider() -> None:
    """Verify an invalid random provider surfaces as an internal error."""

    dispatcher = _build_dispatcher(random_value=1.5)

    result = await dispatcher.dispatcher_dispatch("POST", "/api/ai/client-scoring", body={"clientId": "client-1"})

    assert result.status_code == 500


def test_ai_risk_level_thresholds() -> None:
    """Verify risk thresholds are exclusive at 85 and 70."""

    assert ai_risk_level(86) == "Low"
    assert ai_risk_level(85) == "Medium"
    assert ai_risk_level(71) == "Medium"
    assert ai_risk_level(70) == "High"
