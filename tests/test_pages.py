"""End-to-end page resolution through the FastAPI app."""

from __future__ import annotations

import asyncio

from _helpers import FakeBackend
from conftest import SESSION_ID
from fastapi.testclient import TestClient

from asc3_gate.session.store import (
    GLOBAL_TOKEN,
    LAST_ALLOWED_PATH,
    TENANT_PREFIX,
    TOKEN,
    SessionStore,
)


def _seed(store: SessionStore, **values: str) -> None:
    for key, value in values.items():
        asyncio.run(store.set(key, value))


def _read(store: SessionStore, key: str) -> str | None:
    return asyncio.run(store.get(key))


def _sign_in(
    client: TestClient,
    fake_backend: FakeBackend,
    store: SessionStore,
    email: str = "alice@acme.com",
    role: str = "user",
    tenant: str | None = None,
) -> None:
    fake_backend.add_user(email, role=role)
    values = {TOKEN: fake_backend.issue_token(email)}
    if tenant:
        values[TENANT_PREFIX] = tenant
    _seed(store, **values)
    client.cookies.set("asc3_session", SESSION_ID)


class TestSignedOut:
    def test_new_visitor_gets_session_cookie(self, client: TestClient):
        response = client.get("/login")
        assert response.status_code == 200
        assert "asc3_session" in response.cookies

    def test_login_page_renders(self, client: TestClient):
        response = client.get("/login")
        assert response.json()["page"] == "login"
        assert response.json()["tenantPrefix"] == "default"

    def test_app_pages_redirect_to_login(self, client: TestClient):
        response = client.get("/dashboard")
        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    def test_tenant_login_binds_tenant(self, client: TestClient, store: SessionStore):
        client.cookies.set("asc3_session", SESSION_ID)
        response = client.get("/t/acme/login")
        assert response.status_code == 200
        assert response.json()["page"] == "login"
        assert response.json()["tenantPrefix"] == "acme"
        assert _read(store, TENANT_PREFIX) == "acme"

    def test_tenant_deep_link_goes_to_tenant_login(self, client: TestClient):
        response = client.get("/t/acme/reports")
        assert response.status_code == 303
        assert response.headers["location"] == "/t/acme/login"

    def test_global_admin_goes_to_login(self, client: TestClient):
        for path in ("/global-admin", "/global-admin/tenants"):
            response = client.get(path)
            assert response.status_code == 303
            assert response.headers["location"] == "/login"

    def test_global_token_opens_the_suite(self, client: TestClient, store: SessionStore):
        _seed(store, **{GLOBAL_TOKEN: "global-tok"})
        client.cookies.set("asc3_session", SESSION_ID)

        response = client.get("/global-admin/tenants")

        assert response.status_code == 200
        assert response.json()["page"] == "tenant-management"
        assert response.json()["globalSession"] is True
        assert response.json()["user"] is None
        assert _read(store, LAST_ALLOWED_PATH) is None

    def test_global_admin_login_page(self, client: TestClient):
        response = client.get("/global-admin/login")
        assert response.status_code == 200
        assert response.json()["page"] == "global-admin-login"

    def test_rejected_token_is_cleared(self, client: TestClient, store: SessionStore):
        _seed(store, **{TOKEN: "revoked"})
        client.cookies.set("asc3_session", SESSION_ID)

        response = client.get("/dashboard")

        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        assert _read(store, TOKEN) is None


class TestSignedIn:
    def test_root_redirects_to_dashboard(self, client, fake_backend, store):
        _sign_in(client, fake_backend, store)
        response = client.get("/")
        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"

    def test_unknown_path_redirects_to_dashboard(self, client, fake_backend, store):
        _sign_in(client, fake_backend, store)
        response = client.get("/login")
        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"

    def test_dashboard_by_role(self, client, fake_backend, store):
        _sign_in(client, fake_backend, store)
        body = client.get("/dashboard").json()
        assert body["page"] == "dashboard"
        assert body["user"]["email"] == "alice@acme.com"

    def test_admin_dashboard(self, client, fake_backend, store):
        _sign_in(client, fake_backend, store, email="boss@acme.com", role="admin")
        assert client.get("/dashboard").json()["page"] == "admin-dashboard"
        assert client.get("/my-contributions").json()["page"] == "all-contributions"

    def test_plain_pages_do_not_record_path(self, client, fake_backend, store):
        _sign_in(client, fake_backend, store)
        client.get("/reports")
        assert _read(store, LAST_ALLOWED_PATH) is None

    def test_tenant_page_records_path(self, client, fake_backend, store):
        _sign_in(client, fake_backend, store, tenant="acme")
        response = client.get("/t/acme/reports?year=2024")
        assert response.status_code == 200
        assert response.json()["params"] == {"tenantPrefix": "acme"}
        assert _read(store, LAST_ALLOWED_PATH) == "/t/acme/reports?year=2024"

    def test_tenant_mismatch_redirects_to_bound_tenant(self, client, fake_backend, store):
        _sign_in(client, fake_backend, store, tenant="acme")
        response = client.get("/t/beta/dashboard")
        assert response.status_code == 303
        assert response.headers["location"] == "/t/acme/dashboard"
        assert _read(store, LAST_ALLOWED_PATH) is None

    def test_global_admin_crosses_tenants(self, client, fake_backend, store):
        _sign_in(client, fake_backend, store, email="global@asc.com", tenant="acme")
        response = client.get("/t/beta/dashboard")
        assert response.status_code == 200
        assert _read(store, LAST_ALLOWED_PATH) == "/t/beta/dashboard"

    def test_global_admin_suite(self, client, fake_backend, store):
        _sign_in(client, fake_backend, store, email="global@asc.com")
        response = client.get("/global-admin/tenants")
        assert response.status_code == 200
        assert response.json()["page"] == "tenant-management"

    def test_non_admin_falls_back_to_last_allowed_path(self, client, fake_backend, store):
        _sign_in(client, fake_backend, store, tenant="acme")
        _seed(store, **{LAST_ALLOWED_PATH: "/t/acme/reports"})
        response = client.get("/global-admin")
        assert response.status_code == 303
        assert response.headers["location"] == "/t/acme/reports"

    def test_non_admin_without_history_goes_home(self, client, fake_backend, store):
        _sign_in(client, fake_backend, store)
        response = client.get("/global-admin/users")
        assert response.status_code == 303
        assert response.headers["location"] == "/"
