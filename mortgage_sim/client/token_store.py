"""Token persistence port used by the virtual API client."""

from __future__ import annotations

from typing import Final, Protocol

TOKEN_KEY: Final[str] = "auth_token"
REFRESH_TOKEN_KEY: Final[str] = "refresh_token"
USER_KEY: Final[str] = "user"


class TokenStorePort(Protocol):
    """Port definition for opaque string persistence of session values."""

    def store_get(self, key: str) -> str | None:
        """Return the stored value for key, or None when absent."""

    def store_set(self, key: str, value: str) -> None:
        """Store one value under key, replacing any previous value."""

    def store_remove(self, key: str) -> None:
        """Remove key; removing an absent key is a no-op."""


class InMemoryTokenStore(TokenStorePort):
    """Process-local token store."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def store_get(self, key: str) -> str | None:
        return self._values.get(key)

    def store_set(self, key: str, value: str) -> None:
        self._values[key] = value

    def store_remove(self, key: str) -> None:
        self._values.pop(key, None)
