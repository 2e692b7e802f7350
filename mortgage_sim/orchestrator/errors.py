"""Project-native typed exceptions for orchestrator lookups and lifecycle misuse."""

from __future__ import annotations


class UnknownServiceError(KeyError):
    """Requested virtual service name is not registered."""

    def __init__(self, service_name: str):
        super().__init__(service_name)
        self.service_name = service_name

    def __str__(self) -> str:
        return f"unknown virtual service={self.service_name}"


class OrchestratorNotStartedError(RuntimeError):
    """Operation requires a started orchestrator."""
