"""Front-end style API client bound to the virtual services through httpx."""

from __future__ import annotations

import json
from typing import Any, Mapping

import httpx

from mortgage_sim.routing import DispatchResult, RequestDispatcher

from .token_store import REFRESH_TOKEN_KEY, TOKEN_KEY, USER_KEY, InMemoryTokenStore, TokenStorePort
from .transport import VirtualServiceTransport

VIRTUAL_BASE_URL = "http://virtual"


class VirtualApiClient:
    """Async API client with session token persistence.

    Login and register store the issued token, refresh token and user JSON;
    logout clears them. Every request carries `Authorization: Bearer <token>`
    while a token is stored.
    """

    def __init__(self, dispatcher: RequestDispatcher, token_store: TokenStorePort | None = None):
        """Initialize client transport and session storage.

        Args:
            dispatcher: Dispatcher of a started orchestrator.
            token_store: Optional session value store; defaults to in-memory storage.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dispatcher is None.
        """

        if dispatcher is None:
            raise ValueError("dispatcher must not be None")
        self._token_store = token_store or InMemoryTokenStore()
        self._http_client = httpx.AsyncClient(
            transport=VirtualServiceTransport(dispatcher),
            base_url=VIRTUAL_BASE_URL,
        )

    async def __aenter__(self) -> "VirtualApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.client_close()

    async def client_close(self) -> None:
        await self._http_client.aclose()

    async def client_request(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> DispatchResult:
        """Send one request to the virtual services.

        Args:
            method: HTTP method.
            path: Absolute API path such as `/api/loans/rates/current`.
            json_body: Optional JSON body.
            params: Optional query parameters.

        Returns:
            DispatchResult: Response status with decoded envelope.

        Raises:
            httpx.HTTPError: Raised only on transport misuse; virtual faults are 500 envelopes.
        """

        headers: dict[str, str] = {}
        token = self._token_store.store_get(TOKEN_KEY)
        if token:
            headers["Authorization"] = f"Bearer {token}"

        response = await self._http_client.request(
            method,
            path,
            json=json_body,
            params=dict(params) if params else None,
            headers=headers,
        )
        return DispatchResult(status_code=response.status_code, envelope=response.json())

    async def client_login(self, email: str, password: str, user_type: str) -> DispatchResult:
        credentials: dict[str, Any] = {"email": email, "password": password, "userType": user_type}
        result = await self.client_request("POST", "/api/auth/login", json_body=credentials)
        self._client_store_session(result)
        return result

    async def client_register(self, profile: Mapping[str, Any]) -> DispatchResult:
        result = await self.client_request("POST", "/api/auth/register", json_body=dict(profile))
        self._client_store_session(result)
        return result

    async def client_logout(self) -> DispatchResult:
        """Notify the auth service and clear stored session values regardless of outcome."""

        try:
            return await self.client_request("POST", "/api/auth/logout")
        finally:
            for key in (TOKEN_KEY, REFRESH_TOKEN_KEY, USER_KEY):
                self._token_store.store_remove(key)

    async def client_refresh(self) -> DispatchResult:
        refresh_token = self._token_store.store_get(REFRESH_TOKEN_KEY) or ""
        result = await self.client_request("POST", "/api/auth/refresh", json_body={"refreshToken": refresh_token})
        if result.dispatch_is_success():
            self._token_store.store_set(TOKEN_KEY, result.envelope["data"]["token"])
        return result

    async def client_get_current_user(self) -> DispatchResult:
        return await self.client_request("GET", "/api/auth/me")

    def client_is_authenticated(self) -> bool:
        return self._token_store.store_get(TOKEN_KEY) is not None

    def client_stored_user(self) -> dict[str, Any] | None:
        user_json = self._token_store.store_get(USER_KEY)
        return None if user_json is None else json.loads(user_json)

    def _client_store_session(self, result: DispatchResult) -> None:
        if not result.dispatch_is_success():
            return
        session = result.envelope.get("data") or {}
        self._token_store.store_set(TOKEN_KEY, session["token"])
        self._token_store.store_set(REFRESH_TOKEN_KEY, session["refreshToken"])
        self._token_store.store_set(USER_KEY, json.dumps(session["user"]))
