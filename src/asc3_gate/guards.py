"""Route guards.

A guard is a pure function from ``GuardInput`` to ``Decision``. Guards never
raise and never write session state; recording the last allowed path is a
separate step the caller performs after it has actually rendered.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from asc3_gate.auth.context import is_global_admin
from asc3_gate.auth.models import UserProfile
from asc3_gate.session.store import LAST_ALLOWED_PATH, SessionSnapshot, SessionStore

LOGIN_PATH = "/login"
GLOBAL_ADMIN_ROOT = "/global-admin"


class DecisionKind(str, Enum):
    RENDER = "render"
    REDIRECT = "redirect"
    PENDING = "pending"  # identity still resolving, no decision yet


@dataclass(frozen=True)
class Decision:
    kind: DecisionKind
    location: str | None = None
    records_path: bool = False

    @classmethod
    def render(cls, records_path: bool = False) -> Decision:
        return cls(DecisionKind.RENDER, records_path=records_path)

    @classmethod
    def redirect(cls, location: str) -> Decision:
        return cls(DecisionKind.REDIRECT, location=location)

    @classmethod
    def pending(cls) -> Decision:
        return cls(DecisionKind.PENDING)


@dataclass(frozen=True)
class GuardInput:
    user: UserProfile | None
    is_authenticated: bool
    loading: bool
    session: SessionSnapshot
    path: str = "/"
    route_tenant: str | None = None
    default_tenant: str = "default"
    global_admin_email: str = ""

    @property
    def signed_in(self) -> bool:
        return self.is_authenticated and self.user is not None

    @property
    def global_admin(self) -> bool:
        return is_global_admin(self.user, self.global_admin_email)


Guard = Callable[[GuardInput], Decision]


def tenant_path(tenant: str, page: str) -> str:
    return f"/t/{tenant}/{page}"


def authenticated_guard(inp: GuardInput) -> Decision:
    """Gate for the tenant-agnostic app shell."""
    if inp.loading:
        return Decision.pending()
    if not inp.signed_in:
        return Decision.redirect(LOGIN_PATH)
    return Decision.render()


def tenant_guard(inp: GuardInput) -> Decision:
    """Gate for /t/:tenantPrefix/... pages."""
    if inp.loading:
        return Decision.pending()
    if not inp.signed_in:
        tenant = inp.route_tenant or inp.session.tenant_prefix or inp.default_tenant
        return Decision.redirect(tenant_path(tenant, "login"))
    if inp.global_admin:
        return Decision.render(records_path=True)

    bound = inp.session.tenant_prefix
    if inp.route_tenant and bound and bound != inp.route_tenant:
        return Decision.redirect(tenant_path(bound, "dashboard"))
    return Decision.render(records_path=True)


def _is_global_admin_path(path: str) -> bool:
    return path == GLOBAL_ADMIN_ROOT or path.startswith(GLOBAL_ADMIN_ROOT + "/")


def global_admin_guard(inp: GuardInput) -> Decision:
    """Gate for the global-admin suite."""
    if inp.loading:
        return Decision.pending()
    if not inp.signed_in:
        # The suite authenticates its own calls with the separate global token
        if inp.session.global_session:
            return Decision.render()
        return Decision.redirect(LOGIN_PATH)
    if not inp.global_admin:
        fallback = inp.session.last_allowed_path or "/"
        # A path recorded by an earlier global-admin visit would bounce back here
        if _is_global_admin_path(fallback.split("?", 1)[0]):
            fallback = "/"
        return Decision.redirect(fallback)
    return Decision.render(records_path=True)


async def record_allowed_path(store: SessionStore, decision: Decision, path: str) -> None:
    """Persist ``path`` as the fallback target after a recording render."""
    if decision.kind is DecisionKind.RENDER and decision.records_path:
        await store.set(LAST_ALLOWED_PATH, path)
