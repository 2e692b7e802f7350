"""Ordered route registry with first-match path pattern resolution.

Patterns are exact paths whose segments may be `:name` wildcards. A wildcard
captures exactly one non-empty segment. Bindings are tested in registration
order and the first structural match wins, so exact routes must be registered
before wildcard siblings that could shadow them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from .errors import RegistryFrozenError, RouteRegistrationError
from .interfaces import RouteHandler

SUPPORTED_METHODS: Final[frozenset[str]] = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})
_WILDCARD_PREFIX: Final[str] = ":"


def routing_split_path(path: str) -> tuple[str, ...]:
    """Split a path into segments, ignoring leading and trailing slashes.

    Args:
        path: Request path or pattern, without query string.

    Returns:
        tuple[str, ...]: Path segments; inner empty segments are kept.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    stripped_path = path.strip().strip("/")
    if not stripped_path:
        return ()
    return tuple(stripped_path.split("/"))


@dataclass(frozen=True)
class RouteBinding:
    """Immutable method + pattern + handler binding.

    Attributes:
        method: Upper-case HTTP method.
        pattern: Registered pattern text.
        handler: Coroutine function producing a RouteResponse.
        segments: Compiled pattern segments.
    """

    method: str
    pattern: str
    handler: RouteHandler = field(compare=False)
    segments: tuple[str, ...] = ()

    def binding_match(self, method: str, path_segments: tuple[str, ...]) -> dict[str, str] | None:
        """Return captured wildcard values when method and path shape match, else None."""

        if method != self.method or len(path_segments) != len(self.segments):
            return None

        captured: dict[str, str] = {}
        for pattern_segment, path_segment in zip(self.segments, path_segments):
            if pattern_segment.startswith(_WILDCARD_PREFIX):
                if not path_segment:
                    return None
                captured[pattern_segment[1:]] = path_segment
            elif pattern_segment != path_segment:
                return None
        return captured


@dataclass(frozen=True)
class RouteMatch:
    """Resolved binding plus captured path parameters."""

    binding: RouteBinding
    path_params: dict[str, str]


class RouteRegistry:
    """Ordered list of route bindings owned by one virtual service."""

    def __init__(self, name: str):
        """Initialize an empty, unsealed registry.

        Args:
            name: Owner label used in diagnostics.

        Raises:
            ValueError: Raised when name is blank.
        """

        normalized_name = name.strip()
        if not normalized_name:
            raise ValueError("name must not be blank")
        self._name = normalized_name
        self._bindings: list[RouteBinding] = []
        self._frozen = False

    @property
    def name(self) -> str:
        return self._name

    def registry_register(self, method: str, pattern: str, handler: RouteHandler) -> RouteBinding:
        """Append one binding to the registry.

        Args:
            method: HTTP method.
            pattern: Path pattern, e.g. `/api/broker/clients/:client_id`.
            handler: Coroutine function invoked on match.

        Returns:
            RouteBinding: Registered immutable binding.

        Raises:
            RegistryFrozenError: Raised when the registry is sealed.
            RouteRegistrationError: Raised for malformed method, pattern or handler.
        """

        if self._frozen:
            raise RegistryFrozenError(f"registry={self._name} is frozen; cannot register {method} {pattern}")

        normalized_method = method.strip().upper()
        if normalized_method not in SUPPORTED_METHODS:
            raise RouteRegistrationError(f"unsupported method={method}")
        if handler is None or not callable(handler):
            raise RouteRegistrationError("handler must be callable")

        segments = self._registry_compile_pattern(pattern)
        binding = RouteBinding(
            method=normalized_method,
            pattern=pattern.strip(),
            handler=handler,
            segments=segments,
        )
        self._bindings.append(binding)
        return binding

    def registry_match(self, method: str, path: str) -> RouteMatch | None:
        """Return the first binding matching method and path shape, or None.

        Args:
            method: HTTP method of the request.
            path: Request path; any query string is ignored.

        Returns:
            RouteMatch | None: First structural match in registration order.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        normalized_method = method.strip().upper()
        path_segments = routing_split_path(path.split("?", 1)[0])
        for binding in self._bindings:
            captured = binding.binding_match(normalized_method, path_segments)
            if captured is not None:
                return RouteMatch(binding=binding, path_params=captured)
        return None

    def registry_freeze(self) -> None:
        """Seal the registry; later registrations raise RegistryFrozenError."""

        self._frozen = True

    def registry_is_frozen(self) -> bool:
        return self._frozen

    def registry_bindings(self) -> tuple[RouteBinding, ...]:
        """Return bindings in registration order."""

        return tuple(self._bindings)

    def _registry_compile_pattern(self, pattern: str) -> tuple[str, ...]:
        normalized_pattern = pattern.strip()
        if not normalized_pattern.startswith("/"):
            raise RouteRegistrationError(f"pattern must start with '/': {pattern}")

        segments = routing_split_path(normalized_pattern)
        wildcard_names: set[str] = set()
        for segment in segments:
            if not segment:
                raise RouteRegistrationError(f"pattern contains an empty segment: {pattern}")
            if segment.startswith(_WILDCARD_PREFIX):
                wildcard_name = segment[1:]
                if not wildcard_name.isidentifier():
                    raise RouteRegistrationError(f"invalid wildcard name in pattern: {pattern}")
                if wildcard_name in wildcard_names:
                    raise RouteRegistrationError(f"duplicate wildcard name={wildcard_name} in pattern: {pattern}")
                wildcard_names.add(wildcard_name)
        return segments
