"""FastAPI dependency injection for session state, backend client and auth."""

from __future__ import annotations

from typing import Annotated

import httpx
from fastapi import Depends, HTTPException, Request

from asc3_gate.auth.context import AuthContext
from asc3_gate.client.backend import BackendClient
from asc3_gate.session.backends import SessionBackend
from asc3_gate.session.store import SessionStore
from asc3_gate.settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_session_store(request: Request, settings: SettingsDep) -> SessionStore:
    """The store for the visitor identified by the session middleware."""
    backend: SessionBackend = request.app.state.session_backend
    return SessionStore(
        backend,
        request.state.session_id,
        prefix=settings.session_key_prefix,
        default_tenant=settings.default_tenant_prefix,
    )


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]


def get_backend_client(request: Request, store: SessionStoreDep) -> BackendClient:
    http: httpx.AsyncClient = request.app.state.http
    return BackendClient(http, store)


BackendClientDep = Annotated[BackendClient, Depends(get_backend_client)]


def get_auth_context(
    request: Request,
    store: SessionStoreDep,
    client: BackendClientDep,
    settings: SettingsDep,
) -> AuthContext:
    """An auth context that has not resolved its identity yet."""
    return AuthContext(
        store,
        client,
        global_admin_email=settings.global_admin_email,
        tasks=request.app.state.background_tasks,
    )


AuthContextDep = Annotated[AuthContext, Depends(get_auth_context)]


async def get_current_auth(auth: AuthContextDep) -> AuthContext:
    """An auth context whose stored token has been resolved."""
    await auth.bootstrap()
    return auth


CurrentAuthDep = Annotated[AuthContext, Depends(get_current_auth)]


async def require_user(auth: CurrentAuthDep) -> AuthContext:
    if not auth.is_authenticated:
        raise HTTPException(status_code=401, detail="Authentication required")
    return auth


SignedInDep = Annotated[AuthContext, Depends(require_user)]
