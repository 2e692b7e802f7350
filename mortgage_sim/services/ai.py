"""Virtual AI service for `/api/ai`.

Every output is a pre-scripted constant or a bounded random band; no model
runs behind these routes.
"""

from __future__ import annotations

import copy
from typing import Any, Final

from mortgage_sim.routing import RouteRequest, RouteResponse

from .base import BaseVirtualService

CHAT_RESPONSES: Final[tuple[str, ...]] = (
    "Based on your credit score of 785 and income of $120,000, you qualify for our best rates. "
    "I recommend the 30-year fixed at 6.125% APR.",
    "Your application is progressing well. The underwriter has reviewed your income documentation "
    "and everything looks good. Next step is the property appraisal.",
    "Current market conditions favor rate locking within the next 7 days. "
    "Rates are expected to increase by 0.125% based on Fed signals.",
    "I've analyzed your client portfolio and identified 3 high-value prospects who are likely to close "
    "within 30 days. Would you like me to prioritize them?",
    "Your document upload was successful. I've extracted the key information and verified the income "
    "amounts. No additional documentation needed for this category.",
)


def ai_risk_level(score: int) -> str:
    if score > 85:
        return "Low"
    if score > 70:
        return "Medium"
    return "High"


class AiVirtualService(BaseVirtualService):
    """Scripted loan matching, risk scoring, predictions and chat replies."""

    SERVICE_NAME = "ai"
    BASE_PATH = "/api/ai"
    HEALTH_LABEL = "ai-service"
    HEALTH_VERSION = "2.0.1"
    HEALTH_MODELS = {
        "loan-matching": {"status": "active", "accuracy": "94.2%", "version": "v2.1"},
        "risk-assessment": {"status": "active", "accuracy": "91.8%", "version": "v2.0"},
        "document-analysis": {"status": "active", "accuracy": "96.5%", "version": "v2.1"},
        "market-prediction": {"status": "active", "accuracy": "87.3%", "version": "v1.8"},
        "client-scoring": {"status": "active", "accuracy": "89.7%", "version": "v1.9"},
    }
    HEALTH_METRICS = {
        "requestsProcessed": 45672,
        "avgResponseTime": "2.3s",
        "modelAccuracy": "93.1%",
        "uptime": "99.8%",
    }

    def _service_register_routes(self) -> None:
        self._service_route("POST", "/loan-matching", self._ai_match_loans)
        self._service_route("POST", "/risk-assessment", self._ai_assess_risk)
        self._service_route("POST", "/document-analysis", self._ai_analyze_document)
        self._service_route("GET", "/market-predictions", self._ai_predict_market)
        self._service_route("POST", "/client-scoring", self._ai_score_client)
        self._service_route("POST", "/performance-optimization", self._ai_optimize_performance)
        self._service_route("POST", "/chat", self._ai_chat)

    async def _ai_match_loans(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(3500)
        return self._service_ok(
            {
                "requestId": self._store.fixture_next_id("ai-match"),
                "matches": [
                    {
                        "lenderId": "lender-1",
                        "lenderName": "Premier Mortgage Corp",
                        "loanType": "30-Year Fixed",
                        "interestRate": 6.125,
                        "apr": 6.234,
                        "monthlyPayment": 3045,
                        "confidence": 0.94,
                        "matchReasons": [
                            "Excellent credit score match",
                            "Income-to-debt ratio optimal",
                            "Property type preference",
                        ],
                        "estimatedApprovalTime": "3-5 business days",
                    },
                    {
                        "lenderId": "lender-2",
                        "lenderName": "National Bank Lending",
                        "loanType": "30-Year Fixed",
                        "interestRate": 6.25,
                        "apr": 6.31,
                        "monthlyPayment": 3078,
                        "confidence": 0.89,
                        "matchReasons": [
                            "Strong employment history",
                            "Competitive rate offering",
                            "Fast processing capability",
                        ],
                        "estimatedApprovalTime": "2-4 business days",
                    },
                ],
                "aiInsights": {
                    "recommendedLender": "lender-1",
                    "confidenceScore": 0.94,
                    "riskAssessment": "Low",
                    "approvalProbability": 0.92,
                    "keyFactors": [
                        "Credit score: 785 (Excellent)",
                        "Debt-to-income: 28% (Good)",
                        "Down payment: 20% (Strong)",
                        "Employment: 5+ years (Stable)",
                    ],
                },
                "processingTime": "3.2 seconds",
                "modelVersion": "JazzX-LoanMatch-v2.1",
            }
        )

    async def _ai_assess_risk(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(2500)
        risk_score = self._service_random_int(70, 30)
        return self._service_ok(
            {
                "applicationId": request.request_body_field("applicationId"),
                "riskScore": risk_score,
                "riskLevel": ai_risk_level(risk_score),
                "approvalProbability": self._service_random_float(risk_score, 10) / 100,
                "riskFactors": [
                    {
                        "factor": "Credit Score",
                        "score": self._service_random_int(risk_score, 10),
                        "weight": 0.35,
                        "impact": "positive",
                        "details": "Excellent credit history with no recent delinquencies",
                    },
                    {
                        "factor": "Income Stability",
                        "score": self._service_random_int(risk_score, 8),
                        "weight": 0.25,
                        "impact": "positive",
                        "details": "5+ years with current employer, consistent income growth",
                    },
                    {
                        "factor": "Debt-to-Income Ratio",
                        "score": risk_score - self._service_random_int(0, 5),
                        "weight": 0.20,
                        "impact": "neutral",
                        "details": "28% DTI ratio within acceptable range",
                    },
                    {
                        "factor": "Property Value",
                        "score": self._service_random_int(risk_score, 12),
                        "weight": 0.20,
                        "impact": "positive",
                        "details": "Property in stable, appreciating neighborhood",
                    },
                ],
                "recommendations": [
                    "Excellent candidate for premium rates" if risk_score > 85 else "Standard processing recommended",
                    "Consider expedited underwriting",
                    "Monitor for rate lock opportunities",
                ],
                "modelConfidence": 0.92,
                "lastUpdated": self._service_now_iso(),
            }
        )

    async def _ai_analyze_document(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(4000)
        return self._service_ok(
            {
                "documentId": request.request_body_field("documentId"),
                "analysisId": self._store.fixture_next_id("ai-doc"),
                "results": {
                    "documentType": request.request_body_field("documentType") or "Pay Stub",
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
                    "validationResults": {
                        "authenticity": {"score": 0.98, "passed": True},
                        "completeness": {"score": 0.95, "passed": True},
                        "consistency": {"score": 0.97, "passed": True},
                        "recency": {"score": 0.92, "passed": True},
                    },
                    "fraudIndicators": {
                        "alterationDetected": False,
                        "inconsistentFonts": False,
                        "suspiciousPatterns": False,
                        "overallFraudRisk": "Low",
                    },
                    "qualityMetrics": {"readability": 0.94, "imageQuality": 0.89, "textClarity": 0.92},
                },
                "processingTime": "3.8 seconds",
                "modelVersion": "JazzX-DocAI-v2.1",
            }
        )

    async def _ai_predict_market(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(3000)
        return self._service_ok(
            {
                "timeframe": request.query.get("timeframe") or "30d",
                "loanType": request.query.get("loanType") or "conventional",
                "predictions": {
                    "interestRates": {
                        "current": 6.25,
                        "predicted30d": 6.375,
                        "predicted90d": 6.50,
                        "confidence": 0.87,
                        "trend": "upward",
                        "factors": [
                            "Federal Reserve policy signals",
                            "Inflation expectations",
                            "Economic growth indicators",
                            "Housing market demand",
                        ],
                    },
                    "housingMarket": {
                        "priceAppreciation": {"predicted30d": 0.8, "predicted90d": 2.4, "confidence": 0.82},
                        "inventory": {"trend": "increasing", "impact": "moderate_positive", "confidence": 0.79},
                        "demandIndicators": {
                            "buyerActivity": "high",
                            "seasonalAdjustment": 1.15,
                            "confidence": 0.85,
                        },
                    },
                    "lendingEnvironment": {
                        "approvalRates": {"current": 0.78, "predicted": 0.76, "confidence": 0.83},
                        "competitiveness": "high",
                        "newProducts": [
                            "AI-assisted underwriting",
                            "Green mortgage incentives",
                            "First-time buyer programs",
                        ],
                    },
                },
                "recommendations": [
                    "Consider rate lock within 14 days",
                    "Monitor Fed announcements closely",
                    "Prepare for increased competition",
                ],
                "generatedAt": self._service_now_iso(),
                "modelVersion": "JazzX-MarketAI-v1.8",
            }
        )

    async def _ai_score_client(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(2000)
        score = self._service_random_int(70, 30)
        if score > 85:
            time_to_close = "18-22 days"
        elif score > 70:
            time_to_close = "22-28 days"
        else:
            time_to_close = "28-35 days"

        return self._service_ok(
            {
                "clientId": request.request_body_field("clientId"),
                "aiScore": score,
                "scoreBreakdown": {
                    "creditworthiness": self._service_random_int(score, 10),
                    "incomeStability": self._service_random_int(score, 8),
                    "propertyValue": self._service_random_int(score, 12),
                    "marketTiming": self._service_random_int(score, 6),
                    "brokerFit": self._service_random_int(score, 15),
                },
                "riskLevel": ai_risk_level(score),
                "approvalProbability": self._service_random_float(score, 15) / 100,
                "timeToClose": time_to_close,
                "recommendedActions": [
                    "Fast-track application" if score > 85 else "Standard processing",
                    "Schedule follow-up within 48 hours",
                    "Prepare rate lock strategy",
                ],
                "crossSellOpportunities": [
                    {"product": "Home Insurance", "probability": 0.78, "value": 1200},
                    {"product": "HELOC", "probability": 0.45, "value": 3500},
                    {"product": "Investment Property", "probability": 0.23, "value": 8500},
                ],
                "confidence": 0.91,
                "lastUpdated": self._service_now_iso(),
            }
        )

    async def _ai_optimize_performance(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(2800)
        return self._service_ok(
            {
                "brokerId": request.request_body_field("brokerId"),
                "optimizations": copy.deepcopy(_AI_OPTIMIZATIONS),
                "overallScore": 78,
                "potentialScore": 90,
                "implementationPlan": {
                    "phase1": "Communication optimization (2 weeks)",
                    "phase2": "Lead qualification refinement (3 weeks)",
                    "phase3": "Rate strategy implementation (4 weeks)",
                },
                "confidence": 0.88,
                "generatedAt": self._service_now_iso(),
            }
        )

    async def _ai_chat(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        return self._service_ok(
            {
                "response": self._service_random_choice(CHAT_RESPONSES),
                "confidence": 0.92,
                "suggestedActions": [
                    "Review rate lock options",
                    "Schedule client consultation",
                    "Upload additional documents",
                ],
                "relatedInsights": [
                    "Market rates trending upward",
                    "Client satisfaction score: 4.8/5",
                    "Processing time: 18% faster than average",
                ],
                "conversationId": self._store.fixture_next_id("conv"),
                "timestamp": self._service_now_iso(),
            }
        )


_AI_OPTIMIZATIONS: Final[list[dict[str, Any]]] = [
    {
        "area": "Client Communication",
        "currentScore": 78,
        "potentialScore": 89,
        "recommendations": [
            "Increase follow-up frequency by 25%",
            "Implement automated status updates",
            "Use AI-suggested response templates",
        ],
        "estimatedImpact": {
            "conversionIncrease": "12%",
            "timesSaved": "4.5 hours/week",
            "clientSatisfaction": "+0.8 points",
        },
    },
    {
        "area": "Lead Qualification",
        "currentScore": 82,
        "potentialScore": 94,
        "recommendations": [
            "Focus on tech industry professionals",
            "Prioritize clients with 750+ credit scores",
            "Target loan amounts $400K-$800K",
        ],
        "estimatedImpact": {"conversionIncrease": "18%", "avgLoanSize": "+$45K", "processingTime": "-3.2 days"},
    },
    {
        "area": "Rate Strategy",
        "currentScore": 75,
        "potentialScore": 87,
        "recommendations": [
            "Implement dynamic rate locking",
            "Monitor competitor rates daily",
            "Use AI-powered rate predictions",
        ],
        "estimatedImpact": {
            "competitiveAdvantage": "15%",
            "clientRetention": "+8%",
            "marginImprovement": "+0.125%",
        },
    },
]
