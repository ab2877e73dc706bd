"""Route trees for the portal.

Two disjoint trees: one for visitors without a session, one for signed-in
users. Which tree applies depends only on the auth context; guards inside a
tree redirect but never switch trees themselves.
"""

from __future__ import annotations

from dataclasses import dataclass

from asc3_gate.guards import (
    Guard,
    authenticated_guard,
    global_admin_guard,
    tenant_guard,
)

TENANT_PARAM = "tenantPrefix"


@dataclass(frozen=True)
class Route:
    pattern: str
    page: str | None = None
    guard: Guard | None = None
    admin_page: str | None = None  # rendered instead of ``page`` for role=admin
    binds_tenant: bool = False
    redirect_to: str | None = None

    def match(self, path: str) -> dict[str, str] | None:
        pattern = [s for s in self.pattern.split("/") if s]
        parts = [s for s in path.split("/") if s]
        params: dict[str, str] = {}
        for i, segment in enumerate(pattern):
            if segment == "*":
                params["*"] = "/".join(parts[i:])
                return params
            if i >= len(parts):
                return None
            if segment.startswith(":"):
                params[segment[1:]] = parts[i]
            elif segment != parts[i]:
                return None
        if len(parts) != len(pattern):
            return None
        return params

    def page_for(self, role: str | None) -> str | None:
        if role == "admin" and self.admin_page:
            return self.admin_page
        return self.page


@dataclass(frozen=True)
class RouteMatch:
    route: Route
    params: dict[str, str]

    @property
    def tenant(self) -> str | None:
        return self.params.get(TENANT_PARAM)


class RouteTable:
    """Ordered routes; the first match wins."""

    def __init__(self, routes: list[Route]) -> None:
        self.routes = routes

    def resolve(self, path: str) -> RouteMatch | None:
        for route in self.routes:
            params = route.match(path)
            if params is not None:
                return RouteMatch(route, params)
        return None


_GLOBAL_ADMIN_PAGES = [
    ("dashboard", "global-dashboard"),
    ("contributions", "global-contributions"),
    ("reports", "global-reports"),
    ("users", "global-user-management"),
    ("tenants", "tenant-management"),
    ("backup-restore", "backup-restore"),
    ("functional-test", "tenant-functional-test"),
]


def _global_admin_suite() -> list[Route]:
    routes = [Route("/global-admin", page="global-dashboard", guard=global_admin_guard)]
    routes += [
        Route(f"/global-admin/{segment}", page=page, guard=global_admin_guard)
        for segment, page in _GLOBAL_ADMIN_PAGES
    ]
    return routes


PUBLIC_ROUTES = RouteTable(
    [
        Route("/login", page="login"),
        Route("/signup", page="signup"),
        Route("/t/:tenantPrefix/login", page="login", binds_tenant=True),
        Route("/t/:tenantPrefix/signup", page="signup", binds_tenant=True),
        Route("/global-admin/login", page="global-admin-login"),
        # Tenant deep links fall to the tenant guard, which sends the visitor
        # to that tenant's login page
        Route("/t/:tenantPrefix/*", guard=tenant_guard),
        # Served on a global-admin token alone, otherwise redirected to /login
        *_global_admin_suite(),
        Route("/*", redirect_to="/login"),
    ]
)

APP_ROUTES = RouteTable(
    [
        Route("/", redirect_to="/dashboard"),
        Route("/dashboard", page="dashboard", admin_page="admin-dashboard", guard=authenticated_guard),
        Route(
            "/my-contributions",
            page="my-contributions",
            admin_page="all-contributions",
            guard=authenticated_guard,
        ),
        Route("/reports", page="reports", guard=authenticated_guard),
        Route("/user-management", page="user-management", guard=authenticated_guard),
        Route("/functional-test", page="functional-test", guard=authenticated_guard),
        Route(
            "/t/:tenantPrefix/dashboard",
            page="dashboard",
            admin_page="admin-dashboard",
            guard=tenant_guard,
        ),
        Route(
            "/t/:tenantPrefix/my-contributions",
            page="my-contributions",
            admin_page="all-contributions",
            guard=tenant_guard,
        ),
        Route("/t/:tenantPrefix/reports", page="reports", guard=tenant_guard),
        Route("/t/:tenantPrefix/user-management", page="user-management", guard=tenant_guard),
        *_global_admin_suite(),
        Route("/*", redirect_to="/dashboard"),
    ]
)


def resolve(path: str, is_authenticated: bool) -> RouteMatch:
    """Pick the tree for the auth state, then the first matching route."""
    table = APP_ROUTES if is_authenticated else PUBLIC_ROUTES
    match = table.resolve(path)
    if match is None:
        # Both trees end in a catch-all
        raise LookupError(path)
    return match
