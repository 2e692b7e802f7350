"""Typed domain models shared across runtime layers.

This module provides simple data contracts for health aggregation and
service registration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

HEALTH_STATUS_HEALTHY = "healthy"
HEALTH_STATUS_UNHEALTHY = "unhealthy"
HEALTH_STATUS_ERROR = "error"


@dataclass(frozen=True)
class HealthRecord:
    """Health poll result for one virtual service.

    Attributes:
        service_name: Orchestrator registry name of the service.
        status: One of `healthy`, `unhealthy`, `error`.
        dependencies: Dependency status flags reported by the service.
        metrics: Static metrics reported by the service.
        checked_at_utc: Poll timestamp.
    """

    service_name: str
    status: str
    checked_at_utc: datetime
    dependencies: dict[str, str] = field(default_factory=dict)
    metrics: dict[str, Any] = field(default_factory=dict)

    def health_is_healthy(self) -> bool:
        """Return whether the poll reported a healthy service."""

        return self.status == HEALTH_STATUS_HEALTHY


@dataclass(frozen=True)
class ServiceRegistryEntry:
    """Orchestrator registry entry for one constructed virtual service.

    Attributes:
        name: Registry name (`auth`, `loan`, ...).
        service: Constructed virtual service instance.
        constructed_at_utc: Construction timestamp.
    """

    name: str
    service: Any
    constructed_at_utc: datetime
