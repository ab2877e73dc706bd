"""Tests for route matching and tree selection."""

import pytest

from asc3_gate.guards import authenticated_guard, global_admin_guard, tenant_guard
from asc3_gate.shell import APP_ROUTES, PUBLIC_ROUTES, Route, resolve


class TestRouteMatch:
    def test_static(self):
        assert Route("/login").match("/login") == {}
        assert Route("/login").match("/signup") is None
        assert Route("/login").match("/login/extra") is None

    def test_root(self):
        assert Route("/").match("/") == {}
        assert Route("/").match("/dashboard") is None

    def test_params(self):
        route = Route("/t/:tenantPrefix/login")
        assert route.match("/t/acme/login") == {"tenantPrefix": "acme"}
        assert route.match("/t/acme") is None

    def test_trailing_slash_is_ignored(self):
        assert Route("/dashboard").match("/dashboard/") == {}

    def test_wildcard(self):
        route = Route("/t/:tenantPrefix/*")
        assert route.match("/t/acme/a/b") == {"tenantPrefix": "acme", "*": "a/b"}
        assert route.match("/t/acme") == {"tenantPrefix": "acme", "*": ""}
        assert Route("/*").match("/") == {"*": ""}

    def test_admin_page(self):
        route = Route("/dashboard", page="dashboard", admin_page="admin-dashboard")
        assert route.page_for("admin") == "admin-dashboard"
        assert route.page_for("user") == "dashboard"
        assert route.page_for(None) == "dashboard"


class TestPublicTree:
    @pytest.mark.parametrize("path,page", [("/login", "login"), ("/signup", "signup")])
    def test_public_pages(self, path, page):
        match = resolve(path, is_authenticated=False)
        assert match.route.page == page
        assert match.route.guard is None

    @pytest.mark.parametrize("page", ["login", "signup"])
    def test_tenant_entry_routes_bind_tenant(self, page):
        match = resolve(f"/t/acme/{page}", is_authenticated=False)
        assert match.route.binds_tenant is True
        assert match.tenant == "acme"
        assert match.route.page == page

    def test_tenant_deep_link_is_tenant_guarded(self):
        match = resolve("/t/acme/dashboard", is_authenticated=False)
        assert match.route.guard is tenant_guard
        assert match.tenant == "acme"

    @pytest.mark.parametrize("path", ["/global-admin", "/global-admin/tenants"])
    def test_global_admin_is_guarded(self, path):
        assert resolve(path, is_authenticated=False).route.guard is global_admin_guard

    def test_unknown_global_admin_page_goes_to_login(self):
        assert resolve("/global-admin/nope", is_authenticated=False).route.redirect_to == "/login"

    def test_global_admin_login_page(self):
        assert resolve("/global-admin/login", is_authenticated=False).route.page == "global-admin-login"

    @pytest.mark.parametrize("path", ["/", "/dashboard", "/reports", "/nowhere/at/all"])
    def test_everything_else_goes_to_login(self, path):
        assert resolve(path, is_authenticated=False).route.redirect_to == "/login"


class TestAppTree:
    def test_root_redirects_to_dashboard(self):
        assert resolve("/", is_authenticated=True).route.redirect_to == "/dashboard"

    @pytest.mark.parametrize(
        "path",
        ["/dashboard", "/my-contributions", "/reports", "/user-management", "/functional-test"],
    )
    def test_app_pages_use_authenticated_guard(self, path):
        assert resolve(path, is_authenticated=True).route.guard is authenticated_guard

    @pytest.mark.parametrize(
        "page", ["dashboard", "my-contributions", "reports", "user-management"]
    )
    def test_tenant_pages_use_tenant_guard(self, page):
        match = resolve(f"/t/beta/{page}", is_authenticated=True)
        assert match.route.guard is tenant_guard
        assert match.tenant == "beta"

    @pytest.mark.parametrize(
        "path",
        [
            "/global-admin",
            "/global-admin/dashboard",
            "/global-admin/contributions",
            "/global-admin/reports",
            "/global-admin/users",
            "/global-admin/tenants",
            "/global-admin/backup-restore",
            "/global-admin/functional-test",
        ],
    )
    def test_global_admin_suite(self, path):
        assert resolve(path, is_authenticated=True).route.guard is global_admin_guard

    @pytest.mark.parametrize("path", ["/login", "/signup", "/t/acme/login", "/unknown"])
    def test_login_routes_do_not_exist_when_signed_in(self, path):
        assert resolve(path, is_authenticated=True).route.redirect_to == "/dashboard"

    def test_trees_are_disjoint_on_entry_routes(self):
        public_entry = {r.pattern for r in PUBLIC_ROUTES.routes if r.page in {"login", "signup"}}
        app_patterns = {r.pattern for r in APP_ROUTES.routes}
        assert public_entry.isdisjoint(app_patterns)
