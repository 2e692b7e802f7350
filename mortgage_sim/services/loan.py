"""Virtual loan service for `/api/loans`: quotes, applications, rates and calculators."""

from __future__ import annotations

import math
from datetime import timedelta
from typing import Any, Final

from mortgage_sim.fixtures import Record
from mortgage_sim.routing import RouteRequest, RouteResponse

from .base import INVALID_INPUT_STATUS, BaseVirtualService, service_coerce_number, service_format_iso
from .calculators import BASE_THIRTY_YEAR_RATE_PERCENT, calculate_affordability, calculate_payment

QUOTE_PAYMENT_FACTOR: Final[float] = 0.006
DEFAULT_LOAN_AMOUNT: Final[float] = 500000
DEFAULT_PROPERTY_VALUE: Final[float] = 600000
MAX_HISTORY_DAYS: Final[int] = 365
MAX_LOAN_TERM_YEARS: Final[int] = 50
MAX_INTEREST_RATE_PERCENT: Final[int] = 100
BASE_RATES: Final[dict[str, float]] = {
    "conventional30": BASE_THIRTY_YEAR_RATE_PERCENT,
    "conventional15": 5.75,
    "fha30": 6.00,
    "va30": 5.95,
    "jumbo30": 6.45,
}
# Sine amplitude per product for the synthetic rate history.
HISTORY_AMPLITUDES: Final[dict[str, float]] = {
    "conventional30": 0.3,
    "conventional15": 0.25,
    "fha30": 0.3,
    "va30": 0.25,
}
_PROTECTED_APPLICATION_FIELDS: Final[frozenset[str]] = frozenset({"id", "applicationNumber", "createdAt"})


class LoanVirtualService(BaseVirtualService):
    """Quote generation, application lifecycle and market data over shared fixtures."""

    SERVICE_NAME = "loan"
    BASE_PATH = "/api/loans"
    HEALTH_LABEL = "loan-service"
    HEALTH_DEPENDENCIES = {
        "ai-engine": "healthy",
        "document-processor": "healthy",
        "rate-provider": "healthy",
    }

    def _service_register_routes(self) -> None:
        self._service_route("POST", "/quote", self._loan_create_quote)
        self._service_route("GET", "/quotes", self._loan_list_quotes)
        self._service_route("POST", "/quotes/:quote_id/save", self._loan_save_quote)

        self._service_route("POST", "/applications", self._loan_create_application)
        self._service_route("GET", "/applications", self._loan_list_applications)
        self._service_route("GET", "/applications/:application_id", self._loan_get_application)
        self._service_route("PUT", "/applications/:application_id", self._loan_update_application)
        self._service_route("DELETE", "/applications/:application_id", self._loan_delete_application)
        self._service_route("POST", "/applications/:application_id/submit", self._loan_submit_application)
        self._service_route("GET", "/applications/:application_id/documents", self._loan_list_application_documents)
        self._service_route("GET", "/applications/:application_id/status", self._loan_get_application_status)
        self._service_route(
            "GET", "/applications/:application_id/ai-recommendations", self._loan_get_ai_recommendations
        )
        self._service_route("GET", "/applications/:application_id/ai-score", self._loan_get_ai_score)

        self._service_route("POST", "/documents/upload", self._loan_upload_document)
        self._service_route("DELETE", "/documents/:document_id", self._loan_delete_document)
        self._service_route("GET", "/documents/:document_id/download", self._loan_download_document)

        self._service_route("GET", "/rates/current", self._loan_get_current_rates)
        self._service_route("GET", "/rates/history", self._loan_get_rate_history)
        self._service_route("GET", "/market/insights", self._loan_get_market_insights)
        self._service_route("POST", "/property/estimate", self._loan_estimate_property)
        self._service_route("POST", "/calculate/payment", self._loan_calculate_payment)
        self._service_route("POST", "/calculate/affordability", self._loan_calculate_affordability)

    async def _loan_create_quote(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(3000)
        loan_amount = service_coerce_number(request.request_body_field("loanAmount"), DEFAULT_LOAN_AMOUNT)
        property_value = service_coerce_number(request.request_body_field("propertyValue"), DEFAULT_PROPERTY_VALUE)
        template = self._store.fixture_get("quotes", "quote-123") or {}

        quote = self._store.fixture_append(
            "quotes",
            {
                **template,
                "id": self._store.fixture_next_id("quote"),
                "loanAmount": loan_amount,
                "propertyValue": property_value,
                "downPayment": round(property_value * 0.2, 2),
                "monthlyPayment": math.floor(loan_amount * QUOTE_PAYMENT_FACTOR + 0.5),
                "loanOptions": self._store.fixture_reference("loan_options"),
                "recommendedBroker": self._store.fixture_reference("recommended_broker"),
                "confidence": self._service_random_int(90, 10),
                "aiProcessingTime": "2.8s",
                "saved": False,
                "createdAt": self._service_now_iso(),
            },
        )
        return self._service_ok(quote)

    async def _loan_list_quotes(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1000)
        quotes = list(reversed(self._store.fixture_list("quotes")))
        return self._service_ok(self._service_paginate(request, quotes))

    async def _loan_save_quote(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(800)
        quote = self._store.fixture_update(
            "quotes",
            request.path_params["quote_id"],
            {"saved": True, "savedAt": self._service_now_iso()},
        )
        if quote is None:
            return self._service_fail(404, "Quote not found")
        return self._service_ok(quote, message="Quote saved successfully")

    async def _loan_create_application(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        now = self._service_now()
        now_iso = service_format_iso(now)
        sequence_value = self._store.fixture_next_sequence()
        application_fields = {
            key: value
            for key, value in request.request_body_object().items()
            if key not in _PROTECTED_APPLICATION_FIELDS
        }

        application = self._store.fixture_append(
            "applications",
            {
                "userId": "1",
                "status": "draft",
                "progress": 10,
                **application_fields,
                "id": f"app-{sequence_value}",
                "applicationNumber": f"JX{sequence_value:06d}",
                "estimatedClosingDate": service_format_iso(now + timedelta(days=30)),
                "createdAt": now_iso,
                "updatedAt": now_iso,
            },
        )
        return self._service_ok(application, status_code=201)

    async def _loan_list_applications(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1200)
        applications = self._store.fixture_list("applications")
        status_filter = request.query.get("status")
        if status_filter:
            applications = [record for record in applications if record.get("status") == status_filter]
        return self._service_ok(self._service_paginate(request, applications))

    async def _loan_get_application(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(800)
        application = self._store.fixture_get("applications", request.path_params["application_id"])
        if application is None:
            return self._service_fail(404, "Application not found")
        application.setdefault(
            "nextSteps",
            ["Upload bank statements", "Schedule appraisal", "Review loan terms"],
        )
        return self._service_ok(application)

    async def _loan_update_application(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1000)
        updates = {
            key: value
            for key, value in request.request_body_object().items()
            if key not in _PROTECTED_APPLICATION_FIELDS
        }
        updates["updatedAt"] = self._service_now_iso()
        application = self._store.fixture_update("applications", request.path_params["application_id"], updates)
        if application is None:
            return self._service_fail(404, "Application not found")
        return self._service_ok(application)

    async def _loan_delete_application(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(800)
        if self._store.fixture_get("applications", request.path_params["application_id"]) is None:
            return self._service_fail(404, "Application not found")
        return self._service_ok({"message": "Application deleted successfully"})

    async def _loan_submit_application(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(2000)
        submitted_at = self._service_now_iso()
        application = self._store.fixture_update(
            "applications",
            request.path_params["application_id"],
            {"status": "submitted", "submittedAt": submitted_at, "updatedAt": submitted_at},
        )
        if application is None:
            return self._service_fail(404, "Application not found")
        return self._service_ok(
            {
                "message": "Application submitted successfully",
                "status": application["status"],
                "submittedAt": submitted_at,
                "confirmationNumber": application.get("applicationNumber"),
            }
        )

    async def _loan_list_application_documents(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1000)
        application_id = request.path_params["application_id"]
        if self._store.fixture_get("applications", application_id) is None:
            return self._service_fail(404, "Application not found")
        documents = [
            record
            for record in self._store.fixture_list("documents")
            if record.get("applicationId") == application_id
        ]
        return self._service_ok(documents)

    async def _loan_get_application_status(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1000)
        application = self._store.fixture_get("applications", request.path_params["application_id"])
        if application is None:
            return self._service_fail(404, "Application not found")
        return self._service_ok(
            {
                "applicationId": application["id"],
                "currentStatus": application.get("status"),
                "progress": application.get("progress", 0),
                "timeline": [
                    {"stage": "application", "status": "completed", "date": "2024-01-15T10:00:00Z"},
                    {"stage": "documentation", "status": "completed", "date": "2024-01-18T14:30:00Z"},
                    {"stage": "verification", "status": "completed", "date": "2024-01-20T09:15:00Z"},
                    {"stage": "underwriting", "status": "in_progress", "date": "2024-01-22T11:00:00Z"},
                    {"stage": "approval", "status": "pending", "estimatedDate": "2024-01-25T16:00:00Z"},
                    {"stage": "closing", "status": "pending", "estimatedDate": "2024-01-30T10:00:00Z"},
                ],
                "nextActions": [
                    "Underwriter reviewing income documentation",
                    "Appraisal scheduled for January 24th",
                    "Final approval expected by January 25th",
                ],
                "estimatedClosingDate": application.get("estimatedClosingDate", "2024-01-30T10:00:00Z"),
            }
        )

    async def _loan_get_ai_recommendations(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(2000)
        if self._store.fixture_get("applications", request.path_params["application_id"]) is None:
            return self._service_fail(404, "Application not found")
        return self._service_ok(
            [
                {
                    "type": "rate_optimization",
                    "title": "Rate Lock Opportunity",
                    "description": "Current rates are 0.125% below your quoted rate. Consider locking now.",
                    "confidence": 92,
                    "potentialSavings": "$18,500 over loan term",
                    "action": "Lock rate within 48 hours",
                },
                {
                    "type": "document_optimization",
                    "title": "Document Efficiency",
                    "description": "Upload recent bank statements to expedite underwriting by 3-5 days.",
                    "confidence": 88,
                    "timesSaved": "3-5 days",
                    "action": "Upload 2 months of bank statements",
                },
            ]
        )

    async def _loan_get_ai_score(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        if self._store.fixture_get("applications", request.path_params["application_id"]) is None:
            return self._service_fail(404, "Application not found")
        return self._service_ok(
            {
                "overallScore": 87,
                "approvalProbability": 94,
                "riskFactors": [
                    {"factor": "Credit Score", "score": 95, "impact": "positive"},
                    {"factor": "Debt-to-Income", "score": 82, "impact": "neutral"},
                    {"factor": "Employment History", "score": 90, "impact": "positive"},
                    {"factor": "Down Payment", "score": 85, "impact": "positive"},
                ],
                "recommendations": [
                    "Excellent credit profile - qualify for best rates",
                    "Consider increasing down payment for better terms",
                    "Strong employment history supports approval",
                ],
            }
        )

    async def _loan_upload_document(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(2500)
        document_id = self._store.fixture_next_id("doc")
        document = self._store.fixture_append(
            "documents",
            {
                "id": document_id,
                "name": request.request_body_field("name") or f"uploaded-document-{document_id}.pdf",
                "type": request.request_body_field("type") or "income",
                "status": "uploaded",
                "applicationId": request.request_body_field("applicationId"),
                "uploadedAt": self._service_now_iso(),
                "size": self._service_random_int(500000, 2000000),
                "mimeType": "application/pdf",
                "url": f"/documents/{document_id}.pdf",
                "aiExtractedData": {
                    "documentType": "Pay Stub",
                    "employer": "Tech Corp Inc.",
                    "grossPay": "$8,333.33",
                    "netPay": "$6,250.00",
                    "payPeriod": "Monthly",
                },
            },
        )
        return self._service_ok(document)

    async def _loan_delete_document(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(600)
        if self._store.fixture_get("documents", request.path_params["document_id"]) is None:
            return self._service_fail(404, "Document not found")
        return self._service_ok({"message": "Document deleted successfully"})

    async def _loan_download_document(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        document = self._store.fixture_get("documents", request.path_params["document_id"])
        if document is None:
            return self._service_fail(404, "Document not found")
        return self._service_ok(_loan_build_download(document))

    async def _loan_get_current_rates(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(800)
        rates: dict[str, Any] = {
            product: round(base_rate + (self._service_random() - 0.5) * 0.5, 3)
            for product, base_rate in BASE_RATES.items()
        }
        rates.update(
            {
                "lastUpdated": self._service_now_iso(),
                "source": "Federal Reserve Economic Data",
                "trend": "up" if self._service_random() > 0.5 else "down",
                "changePercent": round((self._service_random() - 0.5) * 0.2, 3),
            }
        )
        return self._service_ok(rates)

    async def _loan_get_rate_history(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1200)
        days = min(request.request_query_int("days", 30), MAX_HISTORY_DAYS)
        today = self._service_now().date()

        history = []
        for day_offset in range(days):
            point: dict[str, Any] = {"date": (today - timedelta(days=day_offset)).isoformat()}
            for product, amplitude in HISTORY_AMPLITUDES.items():
                point[product] = round(BASE_RATES[product] + math.sin(day_offset * 0.1) * amplitude, 4)
            history.append(point)
        history.reverse()
        return self._service_ok(history)

    async def _loan_get_market_insights(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        return self._service_ok(self._store.fixture_list("market_insights"))

    async def _loan_estimate_property(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(2500)
        return self._service_ok(
            {
                "address": request.request_body_field("address"),
                "estimatedValue": self._service_random_int(580000, 100000),
                "confidence": "High",
                "valuationDate": self._service_now_iso(),
                "comparables": [
                    {"address": "123 Similar St", "price": 575000, "distance": 0.2, "soldDate": "2024-01-10"},
                    {"address": "456 Nearby Ave", "price": 590000, "distance": 0.3, "soldDate": "2024-01-05"},
                    {"address": "789 Close Rd", "price": 565000, "distance": 0.4, "soldDate": "2023-12-28"},
                ],
                "marketTrends": {
                    "priceChange30d": 2.1,
                    "priceChange90d": 5.8,
                    "daysOnMarket": 28,
                    "inventoryLevel": "Low",
                    "marketCondition": "Seller's Market",
                },
                "aiInsights": [
                    "Property value trending upward in this neighborhood",
                    "Low inventory supporting price appreciation",
                    "Comparable sales indicate strong market demand",
                ],
            }
        )

    async def _loan_calculate_payment(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(500)
        loan_amount = service_coerce_number(request.request_body_field("loanAmount"), DEFAULT_LOAN_AMOUNT)
        interest_rate = service_coerce_number(request.request_body_field("interestRate"), BASE_THIRTY_YEAR_RATE_PERCENT)
        loan_term = service_coerce_number(request.request_body_field("loanTerm"), 30)
        if loan_amount < 0:
            return self._service_fail(INVALID_INPUT_STATUS, "loanAmount must not be negative")
        if not 0 <= interest_rate <= MAX_INTEREST_RATE_PERCENT:
            return self._service_fail(
                INVALID_INPUT_STATUS, f"interestRate must be between 0 and {MAX_INTEREST_RATE_PERCENT} percent"
            )
        if not 0 < loan_term <= MAX_LOAN_TERM_YEARS:
            return self._service_fail(
                INVALID_INPUT_STATUS, f"loanTerm must be greater than 0 and at most {MAX_LOAN_TERM_YEARS} years"
            )

        breakdown = calculate_payment(
            loan_amount=loan_amount,
            interest_rate_percent=interest_rate,
            loan_term_years=loan_term,
        )
        return self._service_ok(breakdown.breakdown_to_payload())

    async def _loan_calculate_affordability(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(500)
        amounts = {
            field_name: service_coerce_number(request.request_body_field(field_name), 0)
            for field_name in ("income", "debts", "downPayment")
        }
        for field_name, amount in amounts.items():
            if amount < 0:
                return self._service_fail(INVALID_INPUT_STATUS, f"{field_name} must not be negative")

        return self._service_ok(
            calculate_affordability(
                annual_income=amounts["income"],
                monthly_debts=amounts["debts"],
                down_payment=amounts["downPayment"],
            )
        )


def _loan_build_download(document: Record) -> dict[str, Any]:
    return {
        "id": document["id"],
        "name": document.get("name"),
        "mimeType": document.get("mimeType", "application/pdf"),
        "size": document.get("size"),
        "downloadUrl": document.get("url"),
        "content": "Mock PDF content",
    }
