"""Routing layer package for route matching, dispatch and simulated latency."""

from .dispatcher import INTERNAL_ERROR_MESSAGE, NOT_FOUND_MESSAGE, RequestDispatcher, routing_normalize_path
from .errors import DuplicateServiceError, RegistryFrozenError, RouteRegistrationError, RoutingError
from .interfaces import DispatchResult, RouteHandler, RouteRequest, RouteResponse, VirtualServicePort
from .latency import LatencySimulator, SleepCallable
from .registry import SUPPORTED_METHODS, RouteBinding, RouteMatch, RouteRegistry, routing_split_path

__all__ = [
    "DispatchResult",
    "DuplicateServiceError",
    "INTERNAL_ERROR_MESSAGE",
    "LatencySimulator",
    "NOT_FOUND_MESSAGE",
    "RegistryFrozenError",
    "RequestDispatcher",
    "RouteBinding",
    "RouteHandler",
    "RouteMatch",
    "RouteRegistrationError",
    "RouteRegistry",
    "RouteRequest",
    "RouteResponse",
    "RoutingError",
    "SUPPORTED_METHODS",
    "SleepCallable",
    "VirtualServicePort",
    "routing_normalize_path",
    "routing_split_path",
]
