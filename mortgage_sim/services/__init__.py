"""Virtual service layer package: one route bundle per simulated backend domain."""

from .ai import AiVirtualService
from .auth import AuthVirtualService, auth_parse_token_user_id
from .base import (
    INVALID_INPUT_STATUS,
    BaseVirtualService,
    service_coerce_number,
    service_format_iso,
    service_parse_number,
)
from .broker import (
    BrokerVirtualService,
    broker_build_pipeline,
    broker_client_number,
    broker_filter_clients,
    broker_parse_client_numbers,
)
from .calculators import PaymentBreakdown, calculate_affordability, calculate_monthly_payment, calculate_payment
from .document import DocumentVirtualService, document_resolve_verification_status
from .loan import LoanVirtualService
from .notification import (
    NotificationVirtualService,
    notification_count_by,
    notification_filter,
    notification_find_non_text_field,
)

# Construction and health-poll order.
VIRTUAL_SERVICE_CLASSES: tuple[type[BaseVirtualService], ...] = (
    AuthVirtualService,
    LoanVirtualService,
    BrokerVirtualService,
    DocumentVirtualService,
    NotificationVirtualService,
    AiVirtualService,
)

__all__ = [
    "INVALID_INPUT_STATUS",
    "AiVirtualService",
    "AuthVirtualService",
    "BaseVirtualService",
    "BrokerVirtualService",
    "DocumentVirtualService",
    "LoanVirtualService",
    "NotificationVirtualService",
    "PaymentBreakdown",
    "VIRTUAL_SERVICE_CLASSES",
    "auth_parse_token_user_id",
    "broker_build_pipeline",
    "broker_client_number",
    "broker_filter_clients",
    "broker_parse_client_numbers",
    "calculate_affordability",
    "calculate_monthly_payment",
    "calculate_payment",
    "document_resolve_verification_status",
    "notification_count_by",
    "notification_filter",
    "notification_find_non_text_field",
    "service_coerce_number",
    "service_format_iso",
    "service_parse_number",
]
