"""Project-native typed exceptions for routing configuration failures.

These signal programming errors while wiring services. Request-time failures
never raise past the dispatcher; they travel as envelopes.
"""

from __future__ import annotations


class RoutingError(Exception):
    """Base exception for routing-layer configuration failures."""


class RouteRegistrationError(RoutingError, ValueError):
    """Malformed method or path pattern passed to a route registry."""


class RegistryFrozenError(RoutingError, RuntimeError):
    """Route registration attempted after the registry was sealed."""


class DuplicateServiceError(RoutingError, ValueError):
    """Two virtual services claim the same base path in one dispatcher."""
