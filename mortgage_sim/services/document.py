"""Virtual document service for `/api/documents`: upload, AI analysis and verification."""

from __future__ import annotations

import copy
from typing import Any, Final

from mortgage_sim.routing import RouteRequest, RouteResponse

from .base import BaseVirtualService

DOCUMENT_CATEGORIES: Final[tuple[str, ...]] = ("income", "asset", "employment", "property", "identity")
_BASE_REQUIREMENTS: Final[tuple[dict[str, Any], ...]] = (
    {
        "category": "income",
        "documents": ["Pay Stubs (2 months)", "Tax Returns (2 years)", "W-2 Forms (2 years)"],
        "required": True,
        "aiVerifiable": True,
    },
    {
        "category": "asset",
        "documents": ["Bank Statements (2 months)", "Investment Statements", "Gift Letter (if applicable)"],
        "required": True,
        "aiVerifiable": True,
    },
    {
        "category": "employment",
        "documents": ["Employment Verification Letter", "HR Contact Information"],
        "required": True,
        "aiVerifiable": False,
    },
    {
        "category": "property",
        "documents": ["Purchase Agreement", "Property Appraisal", "Homeowners Insurance"],
        "required": True,
        "aiVerifiable": True,
    },
)
_FHA_REQUIREMENT: Final[dict[str, Any]] = {
    "category": "fha_specific",
    "documents": ["FHA Case Number", "Mortgage Insurance Premium"],
    "required": True,
    "aiVerifiable": False,
}


def document_resolve_verification_status(requested_status: Any) -> str:
    """Map a review decision onto a stored document status.

    `approved` becomes `verified`; any other non-empty decision is stored as
    given and a missing decision leaves the document `pending`.
    """

    if requested_status == "approved":
        return "verified"
    if isinstance(requested_status, str) and requested_status.strip():
        return requested_status.strip()
    return "pending"


class DocumentVirtualService(BaseVirtualService):
    SERVICE_NAME = "document"
    BASE_PATH = "/api/documents"
    HEALTH_LABEL = "document-service"
    HEALTH_DEPENDENCIES = {
        "ai-ocr-engine": "healthy",
        "document-storage": "healthy",
        "fraud-detection": "healthy",
        "classification-model": "healthy",
    }
    HEALTH_METRICS = {
        "documentsProcessed": 15847,
        "avgProcessingTime": "2.3s",
        "accuracyRate": "96.8%",
        "fraudDetectionRate": "99.2%",
    }

    def _service_register_routes(self) -> None:
        self._service_route("GET", "", self._document_list)
        self._service_route("POST", "/upload", self._document_upload)
        self._service_route("GET", "/requirements", self._document_get_requirements)
        self._service_route("GET", "/templates", self._document_get_templates)
        self._service_route("POST", "/analyze", self._document_analyze)
        self._service_route("POST", "/categorize", self._document_categorize)
        # Wildcard routes last so they never shadow the literal siblings above.
        self._service_route("GET", "/:document_id", self._document_get)
        self._service_route("PUT", "/:document_id/verify", self._document_verify)
        self._service_route("DELETE", "/:document_id", self._document_delete)
        self._service_route("GET", "/:document_id/download", self._document_download)

    async def _document_list(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1000)
        documents = self._store.fixture_list("documents")
        type_filter = request.query.get("type")
        status_filter = request.query.get("status")
        if type_filter:
            documents = [document for document in documents if document.get("type") == type_filter]
        if status_filter:
            documents = [document for document in documents if document.get("status") == status_filter]

        return self._service_ok(
            [
                {
                    **document,
                    "aiAnalysis": {
                        "readabilityScore": self._service_random_int(80, 20),
                        "completenessScore": self._service_random_int(85, 15),
                        "accuracyScore": self._service_random_int(90, 10),
                        "riskFlags": ["Date discrepancy detected"] if self._service_random() > 0.8 else [],
                    },
                }
                for document in documents
            ]
        )

    async def _document_upload(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(3000)
        document_id = self._store.fixture_next_id("doc")
        file_name = request.request_body_field("name") or f"document-{document_id}.pdf"
        document = self._store.fixture_append(
            "documents",
            {
                "id": document_id,
                "name": file_name,
                "type": request.request_body_field("type") or "income",
                "status": "processing",
                "applicationId": request.request_body_field("applicationId"),
                "uploadedAt": self._service_now_iso(),
                "size": self._service_random_int(500000, 2000000),
                "mimeType": "application/pdf",
                "url": f"/documents/{file_name}",
                "aiProcessing": {
                    "status": "completed",
                    "confidence": 0.95,
                    "extractedData": {
                        "documentType": "Pay Stub",
                        "employer": "Tech Corporation Inc.",
                        "employeeName": "John Smith",
                        "grossPay": "$8,333.33",
                        "netPay": "$6,250.00",
                        "payPeriod": "Monthly",
                        "payDate": "2024-01-15",
                        "ytdGross": "$8,333.33",
                        "ytdNet": "$6,250.00",
                    },
                    "validationResults": {
                        "formatValid": True,
                        "dataConsistent": True,
                        "signaturePresent": True,
                        "dateRecent": True,
                        "amountReasonable": True,
                    },
                },
            },
        )
        return self._service_ok(document)

    async def _document_get_requirements(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(800)
        loan_type = request.query.get("loanType")
        requirements = copy.deepcopy(list(_BASE_REQUIREMENTS))
        if str(loan_type or "").lower() == "fha":
            requirements.append(copy.deepcopy(_FHA_REQUIREMENT))
        return self._service_ok(
            {
                "loanType": loan_type,
                "loanAmount": request.query.get("loanAmount"),
                "requirements": requirements,
                "estimatedProcessingTime": "5-7 business days",
                "aiProcessingCapable": True,
            }
        )

    async def _document_get_templates(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(600)
        return self._service_ok(
            [
                {
                    "id": "template-paystub",
                    "name": "Pay Stub Template",
                    "category": "income",
                    "description": "Standard pay stub format for income verification",
                    "fields": ["employer", "employee", "payPeriod", "grossPay", "netPay", "deductions"],
                    "downloadUrl": "/templates/paystub-template.pdf",
                },
                {
                    "id": "template-bank-statement",
                    "name": "Bank Statement Template",
                    "category": "asset",
                    "description": "Bank statement format for asset verification",
                    "fields": ["accountNumber", "balance", "transactions", "statementPeriod"],
                    "downloadUrl": "/templates/bank-statement-template.pdf",
                },
            ]
        )

    async def _document_analyze(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(4000)
        return self._service_ok(
            {
                "documentId": request.request_body_field("documentId"),
                "analysisId": self._store.fixture_next_id("analysis"),
                "results": {
                    "documentType": "Pay Stub",
                    "confidence": 0.96,
                    "extractedData": {
                        "employer": "Tech Corporation Inc.",
                        "employee": "John Smith",
                        "payPeriod": "Monthly",
                        "grossIncome": 8333.33,
                        "netIncome": 6250.00,
                        "payDate": "2024-01-15",
                        "ytdGross": 8333.33,
                        "deductions": {"federal": 1250.00, "state": 416.67, "fica": 637.50, "insurance": 278.16},
                    },
                    "validationChecks": {
                        "mathematicalAccuracy": {"passed": True, "confidence": 0.99},
                        "dateConsistency": {"passed": True, "confidence": 0.97},
                        "formatCompliance": {"passed": True, "confidence": 0.95},
                        "employerVerification": {"passed": True, "confidence": 0.92},
                    },
                    "riskFlags": [],
                    "recommendations": [
                        "Document appears authentic and complete",
                        "All mathematical calculations verified",
                        "Format consistent with standard pay stub templates",
                    ],
                },
                "processingTime": "3.2 seconds",
                "aiModel": "JazzX-DocAI-v2.1",
            }
        )

    async def _document_categorize(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        document_ids = request.request_body_field("documentIds")
        if not isinstance(document_ids, list):
            document_ids = []

        results = [
            {
                "documentId": document_id,
                "category": self._service_random_choice(DOCUMENT_CATEGORIES),
                "confidence": round(self._service_random_float(0.85, 0.14), 4),
                "subcategory": "Pay Stub",
                "suggestedTags": ["verified", "current", "complete"],
            }
            for document_id in document_ids
        ]
        avg_confidence = sum(result["confidence"] for result in results) / len(results) if results else 0.0
        return self._service_ok(
            {
                "results": results,
                "summary": {
                    "totalDocuments": len(document_ids),
                    "categorized": len(results),
                    "avgConfidence": avg_confidence,
                },
            }
        )

    async def _document_get(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(600)
        document = self._store.fixture_get("documents", request.path_params["document_id"])
        if document is None:
            return self._service_fail(404, "Document not found")

        document["metadata"] = {
            "pages": 2,
            "resolution": "300 DPI",
            "colorMode": "RGB",
            "fileSize": document.get("size"),
            "createdDate": document.get("uploadedAt"),
            "modifiedDate": document.get("verifiedAt") or document.get("uploadedAt"),
        }
        document["aiAnalysis"] = {
            "documentClassification": {"type": document.get("type"), "subtype": "Monthly Pay Stub", "confidence": 0.97},
            "extractedFields": {
                "employer": "Tech Corporation Inc.",
                "employee": "John Smith",
                "payPeriod": "Monthly",
                "grossPay": 8333.33,
                "netPay": 6250.00,
                "deductions": {
                    "federalTax": 1250.00,
                    "stateTax": 416.67,
                    "socialSecurity": 516.67,
                    "medicare": 120.83,
                    "insurance": 278.16,
                },
            },
            "validationResults": {
                "mathAccuracy": True,
                "dateConsistency": True,
                "formatCompliance": True,
                "signaturePresent": True,
                "watermarkDetected": False,
            },
            "riskAssessment": {
                "fraudRisk": "Low",
                "alterationRisk": "Low",
                "completenessRisk": "Low",
                "overallRisk": "Low",
            },
        }
        return self._service_ok(document)

    async def _document_verify(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        requested_status = request.request_body_field("status")
        notes = request.request_body_field("notes")
        stored_status = document_resolve_verification_status(requested_status)
        verified_at = self._service_now_iso()

        document = self._store.fixture_update(
            "documents",
            request.path_params["document_id"],
            {
                "status": stored_status,
                "verifiedAt": verified_at,
                "verifiedBy": "AI-System",
                "verificationNotes": notes,
            },
        )
        if document is None:
            return self._service_fail(404, "Document not found")

        return self._service_ok(
            {
                "documentId": document["id"],
                "status": stored_status,
                "verifiedAt": verified_at,
                "verifiedBy": "AI-System",
                "notes": notes,
                "verificationDetails": {
                    "method": "AI + Human Review",
                    "confidence": 0.94,
                    "flags": ["Income amount inconsistent"] if stored_status == "rejected" else [],
                    "recommendations": (
                        ["Document meets all requirements"]
                        if stored_status == "verified"
                        else ["Request updated document"]
                    ),
                },
            }
        )

    async def _document_delete(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(800)
        if self._store.fixture_get("documents", request.path_params["document_id"]) is None:
            return self._service_fail(404, "Document not found")
        return self._service_ok({"message": "Document deleted successfully", "deletedAt": self._service_now_iso()})

    async def _document_download(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(2000)
        document = self._store.fixture_get("documents", request.path_params["document_id"])
        if document is None:
            return self._service_fail(404, "Document not found")
        return self._service_ok(
            {
                "documentId": document["id"],
                "name": document.get("name"),
                "mimeType": document.get("mimeType", "application/pdf"),
                "downloadUrl": document.get("url"),
                "content": "%PDF-1.4\n%%EOF",
            }
        )
