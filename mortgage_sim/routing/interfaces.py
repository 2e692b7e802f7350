"""Typed interfaces for routing-layer responsibilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol

if TYPE_CHECKING:
    from .registry import RouteRegistry


@dataclass(frozen=True)
class RouteRequest:
    """Request contract handed to a matched route handler.

    Attributes:
        method: Upper-case HTTP method.
        path: Normalized request path without query string.
        path_params: Values captured by wildcard segments.
        query: Query parameters; never used for matching.
        body: Decoded JSON body, `{}` when absent.
        headers: Request headers with lower-case names.
    """

    method: str
    path: str
    path_params: dict[str, str] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    body: Any = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)

    def request_header(self, name: str) -> str | None:
        """Return one header value by case-insensitive name."""

        return self.headers.get(name.lower())

    def request_body_object(self) -> dict[str, Any]:
        """Return the JSON body when it is an object, else an empty dict."""

        return self.body if isinstance(self.body, dict) else {}

    def request_body_field(self, name: str, default: Any = None) -> Any:
        """Return one top-level JSON body field, or default for non-object bodies."""

        if not isinstance(self.body, dict):
            return default
        return self.body.get(name, default)

    def request_query_int(self, name: str, default: int) -> int:
        """Return a positive integer query parameter, or default when absent or invalid.

        Args:
            name: Query parameter name.
            default: Fallback value.

        Returns:
            int: Parsed positive integer or default.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        raw_value = self.query.get(name)
        if raw_value is None:
            return default
        try:
            parsed_value = int(str(raw_value).strip())
        except ValueError:
            return default
        return parsed_value if parsed_value >= 1 else default


@dataclass(frozen=True)
class RouteResponse:
    """Handler result contract: status code plus envelope payload.

    Attributes:
        status_code: HTTP-style status chosen by the handler.
        envelope: Response envelope (or raw payload to be wrapped).
    """

    status_code: int
    envelope: Any


RouteHandler = Callable[[RouteRequest], Awaitable[RouteResponse]]


@dataclass(frozen=True)
class DispatchResult:
    """Normalized dispatcher output relayed to callers.

    Attributes:
        status_code: Status preserved from the handler, or 404/500.
        envelope: Response envelope; always has a boolean `success`.
    """

    status_code: int
    envelope: dict[str, Any]

    def dispatch_is_success(self) -> bool:
        """Return whether the dispatched call succeeded."""

        return self.status_code < 400 and bool(self.envelope.get("success"))


class VirtualServicePort(Protocol):
    """Port definition for one virtual service owning a route registry."""

    @property
    def name(self) -> str:
        """Return the orchestrator registry name (`auth`, `loan`, ...)."""

    @property
    def base_path(self) -> str:
        """Return the base path owned by the service (`/api/auth`, ...)."""

    @property
    def registry(self) -> "RouteRegistry":
        """Return the sealed route registry of the service."""

    def service_reset(self) -> None:
        """Clear per-service runtime state, if any."""
