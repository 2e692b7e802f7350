"""Request dispatcher resolving virtual service routes and normalizing responses.

The dispatcher is the single fault boundary of the virtualization layer:
handler exceptions are logged with traceback and converted into a generic
500 envelope; nothing propagates to the caller.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping
from urllib.parse import parse_qsl

from loguru import logger

from mortgage_sim.domain import domain_build_envelope, domain_build_error_envelope, domain_is_envelope

from .errors import DuplicateServiceError
from .interfaces import DispatchResult, RouteRequest, VirtualServicePort

NOT_FOUND_MESSAGE = "API endpoint not found"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def routing_normalize_path(path: str) -> str:
    """Return a path with a single leading slash and no trailing slash.

    Args:
        path: Raw request path without query string.

    Returns:
        str: Normalized path; the root path stays `/`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    stripped_path = path.strip()
    if not stripped_path.startswith("/"):
        stripped_path = f"/{stripped_path}"
    normalized_path = stripped_path.rstrip("/")
    return normalized_path or "/"


class RequestDispatcher:
    """Dispatcher routing HTTP-shaped calls to the owning virtual service."""

    def __init__(self, services: Iterable[VirtualServicePort]):
        """Initialize dispatcher with the virtual services it may route to.

        Args:
            services: Constructed virtual services with sealed registries.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when services is None.
            DuplicateServiceError: Raised when two services share a base path.
        """

        if services is None:
            raise ValueError("services must not be None")

        services_by_base_path: dict[str, VirtualServicePort] = {}
        for service in services:
            base_path = routing_normalize_path(service.base_path)
            if base_path in services_by_base_path:
                raise DuplicateServiceError(f"base_path={base_path} is already owned by another service")
            services_by_base_path[base_path] = service

        # Longest base path first so nested bases resolve to the most specific owner.
        self._services = sorted(
            services_by_base_path.items(),
            key=lambda item: len(item[0]),
            reverse=True,
        )

    def dispatcher_resolve_service(self, path: str) -> VirtualServicePort | None:
        """Return the service owning a path by longest base-path prefix, or None."""

        normalized_path = routing_normalize_path(path.split("?", 1)[0])
        for base_path, service in self._services:
            if normalized_path == base_path or normalized_path.startswith(f"{base_path}/"):
                return service
        return None

    async def dispatcher_dispatch(
        self,
        method: str,
        path: str,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> DispatchResult:
        """Dispatch one HTTP-shaped call and return a normalized envelope.

        Args:
            method: HTTP method.
            path: Request path, optionally with a `?query` suffix.
            query: Explicit query parameters; they win over the path suffix.
            body: Decoded JSON body; None is treated as `{}`.
            headers: Request headers.

        Returns:
            DispatchResult: Preserved handler status with envelope, or 404/500.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        normalized_method = method.strip().upper()
        raw_path, _, raw_query = path.partition("?")
        normalized_path = routing_normalize_path(raw_path)

        merged_query: dict[str, Any] = dict(parse_qsl(raw_query, keep_blank_values=True))
        merged_query.update(query or {})
        normalized_headers = {str(name).lower(): str(value) for name, value in (headers or {}).items()}

        service = self.dispatcher_resolve_service(normalized_path)
        route_match = None if service is None else service.registry.registry_match(normalized_method, normalized_path)
        if route_match is None:
            logger.debug("no route for {} {}", normalized_method, normalized_path)
            return DispatchResult(status_code=404, envelope=domain_build_error_envelope(NOT_FOUND_MESSAGE))

        route_request = RouteRequest(
            method=normalized_method,
            path=normalized_path,
            path_params=route_match.path_params,
            query=merged_query,
            body={} if body is None else body,
            headers=normalized_headers,
        )

        try:
            route_response = await route_match.binding.handler(route_request)
            status_code = int(route_response.status_code)
            envelope = route_response.envelope
        except Exception:
            logger.exception(
                "handler failed for {} {} (pattern={})",
                normalized_method,
                normalized_path,
                route_match.binding.pattern,
            )
            return DispatchResult(status_code=500, envelope=domain_build_error_envelope(INTERNAL_ERROR_MESSAGE))

        if not domain_is_envelope(envelope):
            envelope = domain_build_envelope(data=envelope, success=status_code < 400)
        return DispatchResult(status_code=status_code, envelope=envelope)
