"""Auth context: the single source of truth for who is logged in.

States move ``loading -> authenticated | unauthenticated``. While ``loading``
is true callers must not branch on ``is_authenticated``.

Every identity operation takes a new generation number. A response that
arrives after a newer operation started is discarded instead of applied.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from asc3_gate.auth.models import UserProfile
from asc3_gate.client.errors import BackendError
from asc3_gate.session.store import TOKEN, SessionStore

if TYPE_CHECKING:
    from asc3_gate.client.backend import BackendClient

log = structlog.get_logger(__name__)


class AuthState(str, Enum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


def is_global_admin(user: UserProfile | None, legacy_email: str = "") -> bool:
    """True for the cross-tenant identity.

    The backend's ``globalAdmin`` claim decides; the email match only applies
    when a legacy identity is configured.
    """
    if user is None:
        return False
    if user.global_admin:
        return True
    return bool(legacy_email) and user.email == legacy_email


class AuthContext:
    """Per-visitor authentication state backed by the session store."""

    def __init__(
        self,
        store: SessionStore,
        client: BackendClient,
        global_admin_email: str = "",
        tasks: set[asyncio.Task] | None = None,
    ) -> None:
        self._store = store
        self._client = client
        self._global_admin_email = global_admin_email
        self._user: UserProfile | None = None
        self._loading = True
        self._generation = 0
        # Shared with the app so pending logout notifications outlive the request
        self._background: set[asyncio.Task] = tasks if tasks is not None else set()

    @property
    def user(self) -> UserProfile | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def state(self) -> AuthState:
        if self._loading:
            return AuthState.LOADING
        if self._user is not None:
            return AuthState.AUTHENTICATED
        return AuthState.UNAUTHENTICATED

    @property
    def is_global_admin(self) -> bool:
        return is_global_admin(self._user, self._global_admin_email)

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    async def bootstrap(self) -> None:
        """Resolve the stored token into a user profile, if there is one."""
        generation = self._next_generation()
        self._loading = True
        token = await self._store.get(TOKEN)
        if not token:
            if generation == self._generation:
                self._user = None
                self._loading = False
            return

        try:
            profile = await self._client.get_profile()
        except (BackendError, ValidationError) as exc:
            if generation != self._generation:
                log.debug("stale_profile_failure_ignored", generation=generation)
                return
            log.warning("profile_fetch_failed", error=str(exc))
            # Another request may have stored a fresh token meanwhile
            await self._store.discard(TOKEN, token)
            self._user = None
            self._loading = False
            return

        if generation != self._generation:
            log.debug("stale_profile_discarded", generation=generation)
            return
        self._user = profile
        self._loading = False

    async def login(self, email: str, password: str) -> UserProfile:
        """Log in with credentials. Errors are re-raised for the caller to show."""
        previous_user, previous_loading = self._user, self._loading
        generation = self._next_generation()
        self._loading = True
        try:
            result = await self._client.login(email, password)
        except Exception:
            if generation == self._generation:
                self._user, self._loading = previous_user, previous_loading
            raise

        if generation != self._generation:
            log.debug("stale_login_discarded", generation=generation)
            return result.user
        await self._store.set(TOKEN, result.token)
        self._user = result.user
        self._loading = False
        log.info("login_succeeded", user_id=result.user.id, role=result.user.role)
        return result.user

    async def logout(self) -> None:
        """Clear the session now; tell the backend in the background."""
        self._next_generation()
        self._user = None
        self._loading = False
        token = await self._store.get(TOKEN)
        await self._store.remove(TOKEN)

        task = asyncio.create_task(self._notify_logout(token))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _notify_logout(self, token: str | None) -> None:
        try:
            await self._client.logout(token)
        except BackendError as exc:
            log.info("logout_notify_failed", error=str(exc))

    async def drain(self) -> None:
        """Wait for background notifications (shutdown and tests)."""
        if self._background:
            await asyncio.gather(*list(self._background))
