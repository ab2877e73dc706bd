"""Session store: the single owner of a visitor's session fields.

Each field is stored under its own key, namespaced by the session id. The
store is best-effort by contract: storage failures never propagate. A failed
read looks like an unset field and a failed write leaves the previous value
in place.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass

import structlog

from asc3_gate.session.backends import SessionBackend, SessionBackendError

log = structlog.get_logger(__name__)

TOKEN = "token"
TENANT_PREFIX = "tenantPrefix"
LAST_ALLOWED_PATH = "lastAllowedPath"
GLOBAL_TOKEN = "globalToken"


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


@dataclass(frozen=True)
class SessionSnapshot:
    """Session fields the guards read, captured once per request."""

    tenant_prefix: str | None = None
    last_allowed_path: str | None = None
    global_session: bool = False


class SessionStore:
    """Best-effort access to one visitor's session fields."""

    def __init__(
        self,
        backend: SessionBackend,
        session_id: str,
        prefix: str = "asc3:session",
        default_tenant: str = "default",
    ) -> None:
        self._backend = backend
        self.session_id = session_id
        self._prefix = prefix
        self.default_tenant = default_tenant

    def _key(self, key: str) -> str:
        return ":".join([self._prefix, self.session_id, key])

    async def get(self, key: str) -> str | None:
        try:
            return await self._backend.get(self._key(key))
        except SessionBackendError as exc:
            log.warning("session_read_failed", key=key, error=str(exc))
            return None

    async def set(self, key: str, value: str) -> None:
        try:
            await self._backend.set(self._key(key), value)
        except SessionBackendError as exc:
            log.warning("session_write_failed", key=key, error=str(exc))

    async def remove(self, key: str) -> None:
        if key == LAST_ALLOWED_PATH:
            raise ValueError("lastAllowedPath is never removed")
        try:
            await self._backend.delete(self._key(key))
        except SessionBackendError as exc:
            log.warning("session_remove_failed", key=key, error=str(exc))

    async def discard(self, key: str, expected: str | None) -> bool:
        """Remove ``key`` only while it still holds ``expected``.

        A response to a request sent with an old value must not clear a value
        another request has stored since.
        """
        if expected is None or await self.get(key) != expected:
            return False
        await self.remove(key)
        return True

    async def bound_tenant(self) -> str | None:
        """The tenant explicitly bound to this session, if any."""
        value = await self.get(TENANT_PREFIX)
        if value is None:
            return None
        return value.strip() or None

    async def tenant_prefix(self) -> str:
        """The bound tenant, falling back to the default tenant."""
        return await self.bound_tenant() or self.default_tenant

    async def bind_tenant(self, prefix: str | None) -> str:
        value = (prefix or "").strip() or self.default_tenant
        await self.set(TENANT_PREFIX, value)
        return value

    async def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            tenant_prefix=await self.bound_tenant(),
            last_allowed_path=await self.get(LAST_ALLOWED_PATH),
            global_session=bool(await self.get(GLOBAL_TOKEN)),
        )
