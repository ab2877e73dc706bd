"""Session actions: login, logout, tenant binding, global-admin login, profile edits."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from asc3_gate.auth.context import AuthContext
from asc3_gate.auth.editor import ProfileEditor
from asc3_gate.client.errors import BackendError, NotFoundError
from asc3_gate.rest.deps import (
    AuthContextDep,
    BackendClientDep,
    CurrentAuthDep,
    SessionStoreDep,
    SignedInDep,
)
from asc3_gate.rest.schemas import (
    AddAccount,
    AddSale,
    GlobalLoginResponse,
    LoginRequest,
    ProfileEditRequest,
    RemoveAccount,
    RemoveSale,
    SessionResponse,
    TenantRequest,
    TenantResponse,
    UpdateAccount,
    UpdateSale,
)
from asc3_gate.session.store import GLOBAL_TOKEN, SessionStore

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/session")


def _http_error(exc: BackendError) -> HTTPException:
    # Transport failures have no HTTP status of their own
    return HTTPException(status_code=exc.status or 502, detail=exc.message)


async def _session_response(
    auth: AuthContext, store: SessionStore, next_path: str | None = None
) -> SessionResponse:
    return SessionResponse(
        state=auth.state.value,
        authenticated=auth.is_authenticated,
        tenant_prefix=await store.tenant_prefix(),
        global_session=bool(await store.get(GLOBAL_TOKEN)),
        user=auth.user.model_dump(mode="json", by_alias=True) if auth.user else None,
        next=next_path,
    )


@router.get("", response_model=SessionResponse)
async def current_session(auth: CurrentAuthDep, store: SessionStoreDep) -> SessionResponse:
    """Return who is signed in and which tenant the session is bound to."""
    return await _session_response(auth, store)


@router.post("/login", response_model=SessionResponse)
async def login(request: LoginRequest, auth: AuthContextDep, store: SessionStoreDep) -> SessionResponse:
    """Log in against the tenant bound to this session."""
    try:
        await auth.login(request.email, request.password)
    except BackendError as exc:
        log.info("login_failed", status=exc.status)
        raise _http_error(exc) from exc
    return await _session_response(auth, store, next_path="/dashboard")


@router.post("/logout", response_model=SessionResponse)
async def logout(auth: AuthContextDep, store: SessionStoreDep) -> SessionResponse:
    await auth.logout()
    return await _session_response(auth, store, next_path="/login")


@router.put("/tenant", response_model=TenantResponse)
async def bind_tenant(request: TenantRequest, store: SessionStoreDep) -> TenantResponse:
    """Rebind the session to a tenant (the layout's tenant field)."""
    prefix = await store.bind_tenant(request.tenant_prefix)
    return TenantResponse(tenant_prefix=prefix)


@router.post("/global-login", response_model=GlobalLoginResponse)
async def global_login(
    request: LoginRequest, client: BackendClientDep, store: SessionStoreDep
) -> GlobalLoginResponse:
    """Obtain the separate global-admin token."""
    try:
        token = await client.global_login(request.email, request.password)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=404,
            detail="Global Admin is not enabled on this server build (404)",
        ) from exc
    except BackendError as exc:
        raise _http_error(exc) from exc
    await store.set(GLOBAL_TOKEN, token)
    log.info("global_login_succeeded")
    return GlobalLoginResponse()


@router.post("/global-logout", response_model=GlobalLoginResponse)
async def global_logout(store: SessionStoreDep) -> GlobalLoginResponse:
    await store.remove(GLOBAL_TOKEN)
    return GlobalLoginResponse(global_session=False, next="/login")


@router.put("/profile", response_model=SessionResponse)
async def edit_profile(
    request: ProfileEditRequest,
    auth: SignedInDep,
    client: BackendClientDep,
    store: SessionStoreDep,
) -> SessionResponse:
    """Apply profile edits and push the result to the backend."""
    editor = ProfileEditor(auth.user)
    if request.full_name is not None:
        editor.full_name = request.full_name.strip()
    if request.staff_id is not None:
        editor.staff_id = request.staff_id.strip()

    try:
        for op in request.operations:
            if isinstance(op, AddSale):
                editor.add_sale(op.name, op.email)
            elif isinstance(op, RemoveSale):
                editor.remove_sale(op.index)
            elif isinstance(op, UpdateSale):
                editor.update_sale(op.index, name=op.name, email=op.email)
            elif isinstance(op, AddAccount):
                editor.add_account(op.name)
            elif isinstance(op, RemoveAccount):
                editor.remove_account(op.index)
            elif isinstance(op, UpdateAccount):
                editor.update_account(op.index, op.name)
        update = editor.to_update()
    except (IndexError, ValidationError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        await client.update_profile(update)
        # Re-resolve so the response reflects what the backend stored
        await auth.bootstrap()
    except BackendError as exc:
        raise _http_error(exc) from exc
    return await _session_response(auth, store)
