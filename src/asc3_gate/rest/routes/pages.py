"""Page resolution: pick the route tree, run its guard, render or redirect."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse

from asc3_gate.guards import Decision, DecisionKind, GuardInput, record_allowed_path
from asc3_gate.rest.deps import CurrentAuthDep, SessionStoreDep, SettingsDep
from asc3_gate.rest.schemas import PageView, PendingView
from asc3_gate.session.store import GLOBAL_TOKEN
from asc3_gate.shell import resolve

router = APIRouter()


def _redirect(location: str) -> RedirectResponse:
    return RedirectResponse(location, status_code=303)


@router.get("/{path:path}", response_model=None)
async def page(
    path: str,
    request: Request,
    auth: CurrentAuthDep,
    store: SessionStoreDep,
    settings: SettingsDep,
) -> JSONResponse | RedirectResponse:
    # No redirect decision while identity is still resolving
    if auth.loading:
        return JSONResponse(PendingView().model_dump(), status_code=202)

    url_path = "/" + path.strip("/")
    full_path = url_path + (f"?{request.url.query}" if request.url.query else "")
    match = resolve(url_path, auth.is_authenticated)
    route = match.route

    if route.redirect_to:
        return _redirect(route.redirect_to)

    if route.binds_tenant and match.tenant:
        await store.bind_tenant(match.tenant)

    decision = Decision.render()
    if route.guard is not None:
        decision = route.guard(
            GuardInput(
                user=auth.user,
                is_authenticated=auth.is_authenticated,
                loading=auth.loading,
                session=await store.snapshot(),
                path=url_path,
                route_tenant=match.tenant,
                default_tenant=settings.default_tenant_prefix,
                global_admin_email=settings.global_admin_email,
            )
        )

    if decision.kind is DecisionKind.PENDING:
        return JSONResponse(PendingView().model_dump(), status_code=202)
    if decision.kind is DecisionKind.REDIRECT:
        return _redirect(decision.location or "/")

    page_name = route.page_for(auth.user.role if auth.user else None)
    if page_name is None:
        # Guard-only routes exist to redirect; a render here has nothing to show
        return _redirect("/login")

    await record_allowed_path(store, decision, full_path)
    view = PageView(
        page=page_name,
        path=full_path,
        params={k: v for k, v in match.params.items() if k != "*"},
        tenant_prefix=await store.tenant_prefix(),
        global_session=bool(await store.get(GLOBAL_TOKEN)),
        user=auth.user.model_dump(mode="json", by_alias=True) if auth.user else None,
    )
    return JSONResponse(view.model_dump(mode="json", by_alias=True))
