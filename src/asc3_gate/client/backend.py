"""Thin async client for the contribution backend's REST API."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from asc3_gate.auth.models import LoginResult, ProfileUpdate, UserProfile
from asc3_gate.client.errors import (
    BackendError,
    BackendTimeoutError,
    NetworkError,
    UnauthorizedError,
    error_for_status,
)
from asc3_gate.session.store import GLOBAL_TOKEN, TOKEN, SessionStore

log = structlog.get_logger(__name__)

TENANT_HEADER = "x-tenant-prefix"


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("message") or body.get("error")
    return None


class BackendClient:
    """Calls the REST backend on behalf of one visitor's session.

    Tenant requests carry the session token and the ``x-tenant-prefix``
    header. Global-admin requests carry the separate global token and never
    the tenant header.
    """

    def __init__(self, http: httpx.AsyncClient, store: SessionStore) -> None:
        self._http = http
        self._store = store

    async def _tenant_headers(self, token: str | None) -> dict[str, str]:
        headers = {TENANT_HEADER: await self._store.tenant_prefix()}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _global_headers(self) -> dict[str, str]:
        token = await self._store.get(GLOBAL_TOKEN)
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def _send(self, method: str, path: str, headers: dict[str, str], **kwargs: Any) -> Any:
        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as exc:
            raise BackendTimeoutError() from exc
        except httpx.TransportError as exc:
            raise NetworkError() from exc

        if response.is_error:
            log.warning("backend_request_failed", method=method, path=path, status=response.status_code)
            raise error_for_status(response.status_code, _error_message(response))

        if not response.content:
            return {}
        body = response.json()
        if isinstance(body, dict) and body.get("success") is False:
            raise BackendError(body.get("message") or "Request failed", status=response.status_code)
        return body

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a tenant-scoped request. A 401 clears the token it was sent with."""
        token = await self._store.get(TOKEN)
        headers = await self._tenant_headers(token)
        try:
            return await self._send(method, path, headers, **kwargs)
        except UnauthorizedError:
            await self._store.discard(TOKEN, token)
            raise

    async def request_global(self, method: str, path: str, **kwargs: Any) -> Any:
        return await self._send(method, path, await self._global_headers(), **kwargs)

    # Auth

    async def login(self, email: str, password: str) -> LoginResult:
        # Bad credentials also answer 401; that must not end an existing session
        body = await self._send(
            "POST",
            "/api/auth/login",
            await self._tenant_headers(await self._store.get(TOKEN)),
            json={"email": email, "password": password},
        )
        return LoginResult.model_validate(body.get("data"))

    async def get_profile(self) -> UserProfile:
        body = await self.request("GET", "/api/auth/profile")
        return UserProfile.model_validate(body.get("data"))

    async def update_profile(self, update: ProfileUpdate) -> Any:
        body = await self.request("PUT", "/api/auth/profile", json=update.model_dump(by_alias=True))
        return body.get("data")

    async def logout(self, token: str | None = None) -> None:
        """Notify the backend. ``token`` overrides the stored one, which the
        caller may already have cleared."""
        headers = await self._tenant_headers(token or await self._store.get(TOKEN))
        await self._send("POST", "/api/auth/logout", headers)

    # Global admin

    async def global_login(self, email: str, password: str) -> str:
        body = await self.request_global("POST", "/api/global/login", json={"email": email, "password": password})
        token = (body.get("data") or {}).get("token")
        if not token:
            raise BackendError("Global login returned no token")
        return token

    async def get_global(self, path: str, params: dict[str, str] | None = None) -> Any:
        body = await self.request_global("GET", path, params=params)
        return body.get("data")
