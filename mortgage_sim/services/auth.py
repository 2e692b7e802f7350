"""Virtual authentication service for `/api/auth`.

Tokens are opaque strings of the form `auth-jwt-<userId>.<issuedMs>`; the
user id is everything between the prefix and the last dot, so generated
ids containing hyphens stay recoverable.
"""

from __future__ import annotations

from typing import Any, Final

from mortgage_sim.fixtures import Record
from mortgage_sim.routing import RouteRequest, RouteResponse

from .base import BaseVirtualService

DEMO_PASSWORDS: Final[frozenset[str]] = frozenset({"Demo123!", "Broker123!"})
ACCESS_TOKEN_PREFIX: Final[str] = "auth-jwt-"
REFRESH_TOKEN_PREFIX: Final[str] = "auth-refresh-"
RESET_TOKEN_PREFIX: Final[str] = "reset-"
TOKEN_TTL_SECONDS: Final[int] = 3600
MIN_PASSWORD_LENGTH: Final[int] = 8
_PROTECTED_USER_FIELDS: Final[frozenset[str]] = frozenset({"id", "password", "createdAt"})


def auth_parse_token_user_id(token: str, prefix: str) -> str | None:
    """Return the user id embedded in a token, or None when the token is malformed.

    Args:
        token: Raw token text.
        prefix: Expected token prefix.

    Returns:
        str | None: Embedded user id.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if not token.startswith(prefix):
        return None
    user_id, separator, issued_ms = token[len(prefix) :].rpartition(".")
    if not separator or not user_id or not issued_ms.isdigit():
        return None
    return user_id


class AuthVirtualService(BaseVirtualService):
    """Credential checks, token issue and profile updates over the users collection."""

    SERVICE_NAME = "auth"
    BASE_PATH = "/api/auth"
    HEALTH_LABEL = "auth-service"

    def _service_register_routes(self) -> None:
        self._service_route("POST", "/login", self._auth_login)
        self._service_route("POST", "/register", self._auth_register)
        self._service_route("POST", "/logout", self._auth_logout)
        self._service_route("POST", "/refresh", self._auth_refresh)
        self._service_route("GET", "/me", self._auth_me)
        self._service_route("PUT", "/profile", self._auth_update_profile)
        self._service_route("POST", "/change-password", self._auth_change_password)
        self._service_route("POST", "/forgot-password", self._auth_forgot_password)
        self._service_route("POST", "/reset-password", self._auth_reset_password)
        for provider in ("google", "microsoft", "apple"):
            self._service_route("POST", f"/{provider}", self._auth_build_social_handler(provider))

    async def _auth_login(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        email = _auth_text(request.request_body_field("email"))
        password = _auth_text(request.request_body_field("password"))
        user_type = _auth_text(request.request_body_field("userType"))

        user = self._store.fixture_find_first(
            "users",
            lambda record: record.get("email") == email and record.get("userType") == user_type,
        )
        if user is None or password not in DEMO_PASSWORDS:
            return self._service_fail(401, "Invalid credentials")
        return self._service_ok(self._auth_build_session(user))

    async def _auth_register(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(2000)
        email = _auth_text(request.request_body_field("email"))
        password = _auth_text(request.request_body_field("password"))
        if not email or not password:
            return self._service_fail(401, "Email and password are required")

        if self._store.fixture_find_first("users", lambda record: record.get("email") == email) is not None:
            return self._service_fail(409, "User already exists")

        now_iso = self._service_now_iso()
        profile_fields = {
            key: value
            for key, value in request.request_body_object().items()
            if key not in _PROTECTED_USER_FIELDS
        }
        new_user = self._store.fixture_append(
            "users",
            {
                "userType": "borrower",
                **profile_fields,
                "id": self._store.fixture_next_id("user"),
                "email": email,
                "createdAt": now_iso,
                "updatedAt": now_iso,
            },
        )
        return self._service_ok(self._auth_build_session(new_user), status_code=201)

    async def _auth_logout(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(500)
        return self._service_ok({"message": "Logged out successfully"})

    async def _auth_refresh(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(800)
        refresh_token = _auth_text(request.request_body_field("refreshToken"))
        user_id = auth_parse_token_user_id(refresh_token, REFRESH_TOKEN_PREFIX)
        if user_id is None:
            return self._service_fail(401, "Invalid refresh token")
        return self._service_ok(
            {
                "token": self._auth_issue_token(ACCESS_TOKEN_PREFIX, user_id),
                "expiresIn": TOKEN_TTL_SECONDS,
                "tokenType": "Bearer",
            }
        )

    async def _auth_me(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(600)
        user = self._auth_resolve_bearer_user(request)
        if user is None:
            return self._service_fail(401, "Unauthorized")
        return self._service_ok(user)

    async def _auth_update_profile(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1000)
        user = self._auth_resolve_bearer_user(request)
        if user is None:
            return self._service_fail(401, "Unauthorized")

        updates = {
            key: value
            for key, value in request.request_body_object().items()
            if key not in _PROTECTED_USER_FIELDS
        }
        updates["updatedAt"] = self._service_now_iso()
        updated_user = self._store.fixture_update("users", user["id"], updates)
        if updated_user is None:
            return self._service_fail(401, "Unauthorized")
        return self._service_ok(updated_user)

    async def _auth_change_password(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1200)
        current_password = _auth_text(request.request_body_field("currentPassword"))
        new_password = _auth_text(request.request_body_field("newPassword"))
        if current_password not in DEMO_PASSWORDS:
            return self._service_fail(401, "Current password is incorrect")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            return self._service_fail(401, "Password must be at least 8 characters")
        return self._service_ok({"message": "Password changed successfully"})

    async def _auth_forgot_password(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1500)
        email = _auth_text(request.request_body_field("email"))
        user = self._store.fixture_find_first("users", lambda record: record.get("email") == email)
        if user is None:
            return self._service_fail(404, "User not found")
        return self._service_ok(
            {
                "message": "Password reset email sent",
                "resetToken": f"{RESET_TOKEN_PREFIX}{user['id']}.{self._service_now_ms()}",
            }
        )

    async def _auth_reset_password(self, request: RouteRequest) -> RouteResponse:
        await self._service_delay(1000)
        token = _auth_text(request.request_body_field("token"))
        new_password = _auth_text(request.request_body_field("newPassword"))
        if not token.startswith(RESET_TOKEN_PREFIX) or len(new_password) < MIN_PASSWORD_LENGTH:
            return self._service_fail(401, "Invalid reset token or password")
        return self._service_ok({"message": "Password reset successfully"})

    def _auth_build_social_handler(self, provider: str):
        async def _auth_social_login(request: RouteRequest) -> RouteResponse:
            await self._service_delay(2000)
            demo_user = self._store.fixture_list("users")[0]
            return self._service_ok({**self._auth_build_session(demo_user), "provider": provider})

        return _auth_social_login

    def _auth_resolve_bearer_user(self, request: RouteRequest) -> Record | None:
        authorization = request.request_header("authorization") or ""
        scheme, _, token = authorization.partition(" ")
        if scheme != "Bearer":
            return None
        user_id = auth_parse_token_user_id(token.strip(), ACCESS_TOKEN_PREFIX)
        if user_id is None:
            return None
        return self._store.fixture_get("users", user_id)

    def _auth_build_session(self, user: Record) -> dict[str, Any]:
        return {
            "user": user,
            "token": self._auth_issue_token(ACCESS_TOKEN_PREFIX, user["id"]),
            "refreshToken": self._auth_issue_token(REFRESH_TOKEN_PREFIX, user["id"]),
            "expiresIn": TOKEN_TTL_SECONDS,
            "tokenType": "Bearer",
        }

    def _auth_issue_token(self, prefix: str, user_id: str) -> str:
        return f"{prefix}{user_id}.{self._service_now_ms()}"


def _auth_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""
