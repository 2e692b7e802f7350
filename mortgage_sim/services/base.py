"""Shared virtual service foundation: registry wiring, envelopes and random bands."""

from __future__ import annotations

import copy
import math
import random
from datetime import datetime, timezone
from typing import Any, Callable, ClassVar, Final, Sequence, TypeVar

from mortgage_sim.domain import domain_build_envelope, domain_build_error_envelope, domain_build_paginated
from mortgage_sim.fixtures import FixtureStore
from mortgage_sim.routing import LatencySimulator, RouteHandler, RouteRegistry, RouteRequest, RouteResponse

ChoiceT = TypeVar("ChoiceT")
# Input validation failures share the auth failure status; the wire contract has no 400.
INVALID_INPUT_STATUS: Final[int] = 401


def service_format_iso(value: datetime) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision and `Z` suffix."""

    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def service_parse_number(value: Any) -> float | None:
    """Return a JSON number or numeric string as float, or None when it is not numeric.

    Booleans, missing values and non-finite numbers are not numeric.
    """

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        parsed_value = float(value)
    else:
        try:
            parsed_value = float(str(value).strip())
        except ValueError:
            return None
    return parsed_value if math.isfinite(parsed_value) else None


def service_coerce_number(value: Any, default: float) -> float:
    """Return a JSON number or numeric string as float, else default.

    Args:
        value: Raw body or query value.
        default: Fallback for missing or non-numeric input.

    Returns:
        float: Parsed number or default.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    parsed_value = service_parse_number(value)
    return default if parsed_value is None else parsed_value


class BaseVirtualService:
    """Base class for one virtual service bound to a base path.

    Subclasses declare class-level identity and implement
    `_service_register_routes`. The health route is always registered first,
    and the registry is sealed once construction finishes.
    """

    SERVICE_NAME: ClassVar[str] = ""
    BASE_PATH: ClassVar[str] = ""
    HEALTH_LABEL: ClassVar[str] = ""
    HEALTH_DEPENDENCIES: ClassVar[dict[str, str]] = {}
    HEALTH_METRICS: ClassVar[dict[str, Any]] = {}
    HEALTH_MODELS: ClassVar[dict[str, Any]] = {}
    HEALTH_VERSION: ClassVar[str | None] = None

    def __init__(
        self,
        store: FixtureStore,
        latency: LatencySimulator,
        version: str = "1.0.0",
        random_unit_interval_provider: Callable[[], float] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize service dependencies and register its routes.

        Args:
            store: Shared fixture store.
            latency: Shared latency simulator.
            version: Version string reported by the health route.
            random_unit_interval_provider: Optional provider returning values in [0.0, 1.0).
            clock: Optional UTC clock.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if store is None:
            raise ValueError("store must not be None")
        if latency is None:
            raise ValueError("latency must not be None")
        if not self.SERVICE_NAME or not self.BASE_PATH.startswith("/"):
            raise ValueError("service subclasses must declare SERVICE_NAME and BASE_PATH")

        self._store = store
        self._latency = latency
        self._version = version
        self._random_unit_interval_provider = random_unit_interval_provider or random.random
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        self._registry = RouteRegistry(self.SERVICE_NAME)
        self._service_route("GET", "/health", self._service_health)
        self._service_register_routes()
        self._registry.registry_freeze()

    @property
    def name(self) -> str:
        return self.SERVICE_NAME

    @property
    def base_path(self) -> str:
        return self.BASE_PATH

    @property
    def registry(self) -> RouteRegistry:
        return self._registry

    def service_reset(self) -> None:
        """Clear per-service runtime state; services keep all state in the store by default."""

    def service_health_payload(self) -> dict[str, Any]:
        """Build the health payload carried inside the health envelope.

        Returns:
            dict[str, Any]: Service label, status, timestamp, version and optional details.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        payload: dict[str, Any] = {
            "service": self.HEALTH_LABEL or f"{self.SERVICE_NAME}-service",
            "status": "healthy",
            "timestamp": self._service_now_iso(),
            "version": self.HEALTH_VERSION or self._version,
        }
        if self.HEALTH_DEPENDENCIES:
            payload["dependencies"] = copy.deepcopy(self.HEALTH_DEPENDENCIES)
        if self.HEALTH_METRICS:
            payload["metrics"] = copy.deepcopy(self.HEALTH_METRICS)
        if self.HEALTH_MODELS:
            payload["models"] = copy.deepcopy(self.HEALTH_MODELS)
        return payload

    def _service_register_routes(self) -> None:
        raise NotImplementedError

    def _service_route(self, method: str, suffix: str, handler: RouteHandler) -> None:
        self._registry.registry_register(method, f"{self.BASE_PATH}{suffix}", handler)

    async def _service_health(self, request: RouteRequest) -> RouteResponse:
        return self._service_ok(self.service_health_payload())

    async def _service_delay(self, milliseconds: float) -> None:
        await self._latency.latency_delay(milliseconds)

    def _service_ok(self, data: Any, status_code: int = 200, message: str | None = None) -> RouteResponse:
        return RouteResponse(status_code=status_code, envelope=domain_build_envelope(data=data, message=message))

    def _service_fail(self, status_code: int, message: str) -> RouteResponse:
        return RouteResponse(status_code=status_code, envelope=domain_build_error_envelope(message))

    def _service_paginate(self, request: RouteRequest, items: Sequence[Any], default_limit: int = 10) -> dict[str, Any]:
        return domain_build_paginated(
            items,
            page=request.request_query_int("page", 1),
            limit=request.request_query_int("limit", default_limit),
        )

    def _service_now(self) -> datetime:
        return self._clock()

    def _service_now_iso(self) -> str:
        return service_format_iso(self._clock())

    def _service_now_ms(self) -> int:
        return int(self._clock().timestamp() * 1000)

    def _service_random(self) -> float:
        """Return one provider value, validated to the unit interval.

        Raises:
            RuntimeError: Raised when the provider returns a value outside [0.0, 1.0].
        """

        random_ratio = float(self._random_unit_interval_provider())
        if random_ratio < 0.0 or random_ratio > 1.0:
            raise RuntimeError("random_unit_interval_provider must return a value in [0.0, 1.0]")
        return random_ratio

    def _service_random_int(self, base: int, band: int) -> int:
        """Return `base + floor(random * band)`, clamped below `base + band`."""

        return base + min(band - 1, math.floor(self._service_random() * band))

    def _service_random_float(self, base: float, band: float) -> float:
        return base + self._service_random() * band

    def _service_random_choice(self, options: Sequence[ChoiceT]) -> ChoiceT:
        if not options:
            raise ValueError("options must not be empty")
        return options[self._service_random_int(0, len(options))]
