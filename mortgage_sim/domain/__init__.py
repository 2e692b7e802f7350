"""Domain models and envelope helpers used across application layer boundaries."""

from .envelope import (
    domain_build_envelope,
    domain_build_error_envelope,
    domain_build_paginated,
    domain_is_envelope,
)
from .models import (
    HEALTH_STATUS_ERROR,
    HEALTH_STATUS_HEALTHY,
    HEALTH_STATUS_UNHEALTHY,
    HealthRecord,
    ServiceRegistryEntry,
)

__all__ = [
    "HEALTH_STATUS_ERROR",
    "HEALTH_STATUS_HEALTHY",
    "HEALTH_STATUS_UNHEALTHY",
    "HealthRecord",
    "ServiceRegistryEntry",
    "domain_build_envelope",
    "domain_build_error_envelope",
    "domain_build_paginated",
    "domain_is_envelope",
]
