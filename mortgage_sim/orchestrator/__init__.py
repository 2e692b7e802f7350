"""Orchestrator layer package for virtual service lifecycle and health polling."""

from .errors import OrchestratorNotStartedError, UnknownServiceError
from .interfaces import OrchestratorConfig, ServiceOrchestratorPort
from .orchestrator import ServiceOrchestrator

__all__ = [
    "OrchestratorConfig",
    "OrchestratorNotStartedError",
    "ServiceOrchestrator",
    "ServiceOrchestratorPort",
    "UnknownServiceError",
]
