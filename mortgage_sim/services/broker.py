"""Virtual broker service for `/api/broker`: clients, pipeline, messaging and AI insights."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Final

from mortgage_sim.fixtures import Record
from mortgage_sim.routing import RouteRequest, RouteResponse

from .base import (
    INVALID_INPUT_STATUS,
    BaseVirtualService,
    service_coerce_number,
    service_format_iso,
    service_parse_number,
)

PIPELINE_STAGES: Final[tuple[str, ...]] = ("prospects", "application", "underwriting", "closing")
PERFORMANCE_PERIOD_DAYS: Final[dict[str, int]] = {"7d": 7, "30d": 30, "90d": 90}
BROKER_ID: Final[str] = "broker-1"
_STAGE_CONVERSION: Final[dict[str, tuple[int, str]]] = {
    "prospects": (45, "3.2 days"),
    "application": (78, "8.5 days"),
    "underwriting": (92, "12.3 days"),
    "closing": (96, "5.1 days"),
}
_PROTECTED_CLIENT_FIELDS: Final[frozenset[str]] = frozenset({"id", "createdAt"})
CLIENT_NUMERIC_FIELDS: Final[tuple[str, ...]] = ("loanAmount", "aiScore")


def broker_client_number(client: Record, field_name: str) -> int | float:
    """Return a numeric client field, with 0 for missing or non-numeric values."""

    value = service_coerce_number(client.get(field_name), 0.0)
    return int(value) if value.is_integer() else value


def broker_parse_client_numbers(fields: Record) -> tuple[Record, str | None]:
    """Parse numeric client fields sent as numbers or numeric strings.

    Args:
        fields: Client fields taken from a request body.

    Returns:
        tuple[Record, str | None]: Parsed fields, and the name of the first
        field that is not numeric (None when all parse).

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    parsed_fields = dict(fields)
    for field_name in CLIENT_NUMERIC_FIELDS:
        if field_name not in parsed_fields:
            continue
        parsed_value = service_parse_number(parsed_fields[field_name])
        if parsed_value is None:
            return parsed_fields, field_name
        parsed_fields[field_name] = int(parsed_value) if parsed_value.is_integer() else parsed_value
    return parsed_fields, None


def broker_build_pipeline(clients: list[Record]) -> dict[str, Any]:
    """Group clients by pipeline stage with per-stage count and summed loan amount.

    Args:
        clients: Client records with `pipelineStage` and `loanAmount`.

    Returns:
        dict[str, Any]: Ordered stages plus totals.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    stages = []
    for stage_name in PIPELINE_STAGES:
        stage_clients = [client for client in clients if client.get("pipelineStage") == stage_name]
        conversion_rate, avg_time_in_stage = _STAGE_CONVERSION[stage_name]
        stages.append(
            {
                "stage": stage_name,
                "count": len(stage_clients),
                "value": sum(broker_client_number(client, "loanAmount") for client in stage_clients),
                "applications": stage_clients,
                "conversionRate": conversion_rate,
                "avgTimeInStage": avg_time_in_stage,
            }
        )
    return {
        "stages": stages,
        "totalValue": sum(stage["value"] for stage in stages),
        "totalCount": sum(stage["count"] for stage in stages),
        "forecastedClosings": {"thisMonth": 8, "nextMonth": 12, "thisQuarter": 28},
    }


def broker_filter_clients(clients: list[Record], status: str | None, search: str | None) -> list[Record]:
    """Filter clients by exact status and case-insensitive name or email search."""

    filtered_clients = clients
    if status:
        filtered_clients = [client for client in filtered_clients if client.get("status") == status]
    if search:
        needle = search.lower()
        filtered_clients = [
            client
            for client in filtered_clients
            if any(needle in str(client.get(field, "")).lower() for field in ("firstName", "lastName", "email"))
        ]
    return filtered_clients


class BrokerVirtualService(BaseVirtualService):
    """Broker dashboard, client book and pipeline backed by the clients collection."""

    SERVICE_NAME = "broker"
    BASE_PATH = "/api/broker"
    HEALTH_LABEL = "broker-service"
    HEALTH_DEPENDENCIES = {
        "client-database": "healthy",
        "ai-scoring-engine": "healthy",
        "communication-service": "healthy",
        "analytics-engine": "healthy",
    }

    def _service_register_routes(self) -> None:
        self._service_route("GET", "/dashboard/stats", self._broker_get_stats)
        self._service_route("GET", "/dashboard/performance", self._broker_get_performance)

        self._service_route("GET", "/clients", self._broker_list_clients)
        self._service_route("POST", "/clients", self._broker_create_client)
        self._service_route("GET", "/clients/:client_id", self._broker_get_client)
        self._service_route("PUT", "/clients/:client_id", self._broker_update_client)
        self._service_route("DELETE", "/clients/:client_id", self._broker_delete_client)
        self._service_route("GET", "/clients/:client_id/messages", self._broker_list_client_messages)

        self._service_route("POST", "/messages/send", self._broker_send_message)
        self._service_route("POST", "/calls/schedule", self._broker_schedule_call)

        self._service_route("GET", "/pipeline", self._broker_get_pipeline)
        self._service_route("GET", "/pipeline/forecast", self._broker_get_forecast)
        self._service_route("PUT", "/pipeline/:client_id/stage", self._broker_update_stage)

        self._service_route("GET", "/ai/insights", self._broker_get_ai_insights)
        self._service_route("GET", "/ai/priority-actions", self._broker_get_priority_actions)
        self._service_route("GET", "/ai/client-scoring", self._broker_get_client_scoring)
        self._service_route("GET", "/ai/market-recommendations", self._broker_get_market_recommendations)

        self._service_route("GET", "/reports/performance", self._broker_get_performance_report)
        self._service_route("GET", "/reports/client/:client_id", self._broker_get_client_report)

    async def _broker_get_stats(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        stats = self._store.fixture_reference("broker_stats")
        return self._service_ok(
            {
                **stats,
                "lastUpdated": self._service_now_iso(),
                "realTimeMetrics": {
                    "activeClients": stats["totalClients"],
                    "todayApplications": 3,
                    "weeklyGoalProgress": 78,
                    "monthlyCommissionProjected": stats["monthlyCommission"] * 1.15,
                },
            }
        )

    async def _broker_get_performance(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1200)
        period = str(request.query.get("period") or "30d")
        days = PERFORMANCE_PERIOD_DAYS.get(period, 30)
        today = self._service_now().date()

        performance_data = [
            {
                "date": (today - timedelta(days=day_offset)).isoformat(),
                "applications": self._service_random_int(1, 5),
                "approvals": self._service_random_int(1, 3),
                "revenue": self._service_random_int(2000, 5000),
                "clientSatisfaction": round(self._service_random_float(4.2, 0.8), 2),
            }
            for day_offset in range(days)
        ]
        performance_data.reverse()
        return self._service_ok(
            {
                "period": period,
                "data": performance_data,
                "summary": {
                    "totalApplications": sum(day["applications"] for day in performance_data),
                    "totalApprovals": sum(day["approvals"] for day in performance_data),
                    "totalRevenue": sum(day["revenue"] for day in performance_data),
                    "avgSatisfaction": 4.7,
                },
            }
        )

    async def _broker_list_clients(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1000)
        clients = broker_filter_clients(
            self._store.fixture_list("clients"),
            status=request.query.get("status"),
            search=request.query.get("search"),
        )
        return self._service_ok(self._service_paginate(request, clients))

    async def _broker_create_client(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        client_fields = {
            key: value
            for key, value in request.request_body_object().items()
            if key not in _PROTECTED_CLIENT_FIELDS
        }
        client_fields, invalid_field = broker_parse_client_numbers(client_fields)
        if invalid_field is not None:
            return self._service_fail(INVALID_INPUT_STATUS, f"{invalid_field} must be a number")
        client = self._store.fixture_append(
            "clients",
            {
                "loanAmount": 0,
                **client_fields,
                "id": self._store.fixture_next_id("client"),
                "status": "prospect",
                "pipelineStage": "prospects",
                "aiScore": self._service_random_int(70, 30),
                "lastActivity": "Just now",
                "tags": ["New Lead"],
                "assignedBroker": BROKER_ID,
                "createdAt": self._service_now_iso(),
            },
        )
        return self._service_ok(client, status_code=201)

    async def _broker_get_client(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(800)
        client = self._store.fixture_get("clients", request.path_params["client_id"])
        if client is None:
            return self._service_fail(404, "Client not found")
        client["detailedInfo"] = {
            "applicationHistory": [
                {"id": "app-1", "status": "approved", "amount": 450000, "date": "2024-01-15"},
                {"id": "app-2", "status": "processing", "amount": 320000, "date": "2024-01-20"},
            ],
            "communicationLog": [
                {"type": "call", "date": "2024-01-22", "duration": "15 min", "notes": "Discussed rate options"},
                {"type": "email", "date": "2024-01-21", "subject": "Document requirements"},
                {"type": "meeting", "date": "2024-01-18", "duration": "45 min", "notes": "Initial consultation"},
            ],
            "documents": [
                {"name": "Income Verification", "status": "verified", "uploadDate": "2024-01-16"},
                {"name": "Credit Report", "status": "verified", "uploadDate": "2024-01-15"},
                {"name": "Bank Statements", "status": "pending", "uploadDate": "2024-01-20"},
            ],
            "riskAssessment": {
                "creditRisk": "Low",
                "incomeStability": "High",
                "propertyRisk": "Medium",
                "overallRisk": "Low",
            },
        }
        return self._service_ok(client)

    async def _broker_update_client(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1000)
        updates = {
            key: value
            for key, value in request.request_body_object().items()
            if key not in _PROTECTED_CLIENT_FIELDS
        }
        updates, invalid_field = broker_parse_client_numbers(updates)
        if invalid_field is not None:
            return self._service_fail(INVALID_INPUT_STATUS, f"{invalid_field} must be a number")
        updates["lastActivity"] = "Just updated"
        client = self._store.fixture_update("clients", request.path_params["client_id"], updates)
        if client is None:
            return self._service_fail(404, "Client not found")
        return self._service_ok(client)

    async def _broker_delete_client(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(800)
        if self._store.fixture_get("clients", request.path_params["client_id"]) is None:
            return self._service_fail(404, "Client not found")
        return self._service_ok({"message": "Client deleted successfully"})

    async def _broker_list_client_messages(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(800)
        client_id = request.path_params["client_id"]
        if self._store.fixture_get("clients", client_id) is None:
            return self._service_fail(404, "Client not found")
        messages = [
            message
            for message in self._store.fixture_list("messages")
            if client_id in (message.get("senderId"), message.get("receiverId"))
        ]
        return self._service_ok(self._service_paginate(request, messages, default_limit=20))

    async def _broker_send_message(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1000)
        message = self._store.fixture_append(
            "messages",
            {
                "id": self._store.fixture_next_id("msg"),
                "senderId": BROKER_ID,
                "receiverId": request.request_body_field("recipientId"),
                "content": request.request_body_field("content", ""),
                "type": "text",
                "isRead": False,
                "createdAt": self._service_now_iso(),
                "deliveryStatus": "delivered",
            },
        )
        return self._service_ok(message)

    async def _broker_schedule_call(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1200)
        call_id = self._store.fixture_next_id("call")
        return self._service_ok(
            {
                "id": call_id,
                "clientId": request.request_body_field("clientId"),
                "scheduledAt": request.request_body_field("scheduledAt"),
                "notes": request.request_body_field("notes"),
                "status": "scheduled",
                "meetingLink": f"https://teams.microsoft.com/meet/{call_id}",
                "createdAt": self._service_now_iso(),
            }
        )

    async def _broker_get_pipeline(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1200)
        return self._service_ok(broker_build_pipeline(self._store.fixture_list("clients")))

    async def _broker_get_forecast(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        return self._service_ok(
            {
                "currentMonth": {"projected": 2800000, "actual": 1950000, "confidence": 87},
                "nextMonth": {"projected": 3200000, "confidence": 82},
                "quarter": {"projected": 8500000, "confidence": 79},
                "trends": [
                    {"metric": "Application Volume", "trend": "up", "change": 15},
                    {"metric": "Conversion Rate", "trend": "up", "change": 8},
                    {"metric": "Average Loan Size", "trend": "stable", "change": 2},
                    {"metric": "Time to Close", "trend": "down", "change": -12},
                ],
            }
        )

    async def _broker_update_stage(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1000)
        stage = request.request_body_field("stage")
        if stage not in PIPELINE_STAGES:
            return self._service_fail(404, "Pipeline stage not found")

        client_id = request.path_params["client_id"]
        updated_at = self._service_now_iso()
        client = self._store.fixture_update("clients", client_id, {"pipelineStage": stage})
        if client is None:
            return self._service_fail(404, "Client not found")
        return self._service_ok(
            {
                "applicationId": client_id,
                "newStage": stage,
                "updatedAt": updated_at,
                "message": f"Application moved to {stage} stage",
            }
        )

    async def _broker_get_ai_insights(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(2000)
        generated_at = self._service_now_iso()
        insights = [
            {
                **insight,
                "generatedAt": generated_at,
                "aiModel": "JazzX-AI-v2.1",
                "dataPoints": self._service_random_int(500, 1000),
            }
            for insight in self._store.fixture_list("ai_insights")
        ]
        return self._service_ok(insights)

    async def _broker_get_priority_actions(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        now = self._service_now()
        return self._service_ok(
            [
                {
                    "id": "action-1",
                    "type": "urgent",
                    "priority": "high",
                    "title": "Rate Lock Expiring Soon",
                    "description": "John Smith's rate lock expires in 24 hours",
                    "clientId": "client-1",
                    "clientName": "John Smith",
                    "dueDate": service_format_iso(now + timedelta(days=1)),
                    "estimatedImpact": "$2,400 potential loss",
                    "recommendedAction": "Contact client immediately to extend or finalize",
                },
                {
                    "id": "action-2",
                    "type": "opportunity",
                    "priority": "medium",
                    "title": "Cross-sell Opportunity",
                    "description": "Maria Garcia qualifies for HELOC product",
                    "clientId": "client-2",
                    "clientName": "Maria Garcia",
                    "dueDate": service_format_iso(now + timedelta(days=7)),
                    "estimatedImpact": "$3,200 additional commission",
                    "recommendedAction": "Schedule consultation for HELOC discussion",
                },
                {
                    "id": "action-3",
                    "type": "follow-up",
                    "priority": "medium",
                    "title": "Document Follow-up Required",
                    "description": "Robert Johnson needs updated employment verification",
                    "clientId": "client-3",
                    "clientName": "Robert Johnson",
                    "dueDate": service_format_iso(now + timedelta(days=3)),
                    "estimatedImpact": "Prevent 5-day delay",
                    "recommendedAction": "Send document request with deadline",
                },
            ]
        )

    async def _broker_get_client_scoring(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1800)
        last_updated = self._service_now_iso()
        return self._service_ok(
            [self._broker_score_client(client, last_updated) for client in self._store.fixture_list("clients")]
        )

    async def _broker_get_market_recommendations(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(2200)
        return self._service_ok(
            [
                {
                    "type": "rate_strategy",
                    "title": "Rate Environment Analysis",
                    "description": "Current market conditions favor 15-year fixed products",
                    "confidence": 89,
                    "impact": "High",
                    "recommendation": "Promote 15-year fixed rates to qualified borrowers",
                    "supportingData": {
                        "rateTrend": "Stable with slight upward pressure",
                        "demandIndicators": "High demand for shorter terms",
                        "competitorAnalysis": "15-year rates 0.5% below market average",
                    },
                },
                {
                    "type": "client_targeting",
                    "title": "High-Value Client Segments",
                    "description": "Tech professionals showing 40% higher approval rates",
                    "confidence": 92,
                    "impact": "Medium",
                    "recommendation": "Focus marketing efforts on tech industry professionals",
                    "supportingData": {
                        "conversionRate": "68% vs 48% average",
                        "averageLoanSize": "$650K vs $450K average",
                        "timeToClose": "18 days vs 25 days average",
                    },
                },
            ]
        )

    async def _broker_get_performance_report(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(2000)
        report_year = self._service_now().year
        return self._service_ok(
            {
                "reportPeriod": {
                    "startDate": request.query.get("startDate"),
                    "endDate": request.query.get("endDate"),
                },
                "summary": {
                    "totalApplications": 45,
                    "approvedApplications": 38,
                    "totalVolume": 12500000,
                    "commission": 87500,
                    "clientSatisfaction": 4.8,
                },
                "monthlyBreakdown": [
                    {
                        "month": f"{report_year}-{month:02d}-01",
                        "applications": self._service_random_int(15, 20),
                        "volume": self._service_random_int(800000, 2000000),
                        "commission": self._service_random_int(5000, 15000),
                    }
                    for month in range(1, 13)
                ],
                "topPerformingProducts": [
                    {"product": "30-Year Fixed", "count": 28, "volume": 8400000},
                    {"product": "15-Year Fixed", "count": 12, "volume": 2800000},
                    {"product": "FHA", "count": 8, "volume": 1800000},
                ],
            }
        )

    async def _broker_get_client_report(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        client = self._store.fixture_get("clients", request.path_params["client_id"])
        if client is None:
            return self._service_fail(404, "Client not found")
        return self._service_ok(
            {
                "clientSummary": client,
                "applicationHistory": [
                    {"date": "2024-01-15", "type": "Application Started", "status": "completed"},
                    {"date": "2024-01-16", "type": "Documents Uploaded", "status": "completed"},
                    {"date": "2024-01-18", "type": "Credit Check", "status": "completed"},
                    {"date": "2024-01-20", "type": "Underwriting", "status": "in_progress"},
                ],
                "communicationLog": [
                    {"date": "2024-01-22", "type": "Phone Call", "duration": "15 min"},
                    {"date": "2024-01-21", "type": "Email", "subject": "Rate lock confirmation"},
                    {"date": "2024-01-19", "type": "Document Request", "status": "fulfilled"},
                ],
                "financialSummary": {
                    "loanAmount": client.get("loanAmount"),
                    "interestRate": 6.25,
                    "monthlyPayment": 2771,
                    "estimatedClosingCosts": 8500,
                },
            }
        )

    def _broker_score_client(self, client: Record, last_updated: str) -> dict[str, Any]:
        ai_score = int(broker_client_number(client, "aiScore"))
        if ai_score > 85:
            risk_level = "Low"
        elif ai_score > 70:
            risk_level = "Medium"
        else:
            risk_level = "High"

        return {
            "clientId": client["id"],
            "clientName": f"{client.get('firstName', '')} {client.get('lastName', '')}".strip(),
            "aiScore": ai_score,
            "riskLevel": risk_level,
            "approvalProbability": self._service_random_int(ai_score, 10),
            "scoringFactors": [
                {"factor": "Credit Score", "weight": 35, "score": self._service_random_int(ai_score, 10)},
                {"factor": "Income Stability", "weight": 25, "score": self._service_random_int(ai_score, 15)},
                {"factor": "Debt-to-Income", "weight": 20, "score": self._service_random_int(ai_score, 8)},
                {"factor": "Employment History", "weight": 20, "score": self._service_random_int(ai_score, 12)},
            ],
            "recommendations": [
                "Excellent candidate - fast-track application"
                if ai_score > 85
                else "Review income documentation carefully",
                "Consider premium rate options",
                "Schedule follow-up within 48 hours",
            ],
            "lastUpdated": last_updated,
        }
