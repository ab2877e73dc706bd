"""FastAPI application factory."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import httpx
import redis.asyncio as aioredis
import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from asc3_gate.rest.routes.health import router as health_router
from asc3_gate.rest.routes.pages import router as pages_router
from asc3_gate.rest.routes.session import router as session_router
from asc3_gate.session.backends import InMemoryBackend, RedisBackend, SessionBackend
from asc3_gate.session.store import new_session_id
from asc3_gate.settings import Settings
from asc3_gate.settings import settings as default_settings

log = structlog.get_logger(__name__)


def _make_session_backend(settings: Settings) -> SessionBackend:
    if settings.session_backend == "redis":
        return RedisBackend(aioredis.from_url(settings.redis_url, decode_responses=True))
    if settings.session_backend == "memory":
        return InMemoryBackend()
    raise ValueError(f"Unknown session backend: {settings.session_backend!r}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    owned_http = app.state.http is None
    if owned_http:
        app.state.http = httpx.AsyncClient(
            base_url=settings.backend_api_url,
            timeout=settings.backend_timeout_seconds,
        )
    if app.state.session_backend is None:
        app.state.session_backend = _make_session_backend(settings)
    log.info(
        "gate_started",
        backend_api_url=settings.backend_api_url,
        session_backend=settings.session_backend,
    )
    yield

    tasks = list(app.state.background_tasks)
    if tasks:
        await asyncio.gather(*tasks, return_exceptions=True)
    if owned_http:
        await app.state.http.aclose()
    if isinstance(app.state.session_backend, RedisBackend):
        await app.state.session_backend.close()


def create_app(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
    session_backend: SessionBackend | None = None,
) -> FastAPI:
    settings = settings or default_settings
    app = FastAPI(
        title="ASC3 Session Gate",
        description="Tenant-aware session and routing gate for the ASC3 contribution portal",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.http = http_client
    app.state.session_backend = session_backend
    app.state.background_tasks = set()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_allow_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def session_cookie(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        session_id = request.cookies.get(settings.session_cookie_name)
        is_new = not session_id
        request.state.session_id = session_id or new_session_id()
        response = await call_next(request)
        if is_new:
            response.set_cookie(
                settings.session_cookie_name,
                request.state.session_id,
                httponly=True,
                samesite="lax",
                secure=settings.session_cookie_secure,
            )
        return response

    # Public routes
    app.include_router(health_router, tags=["health"])

    # Session actions (login, logout, tenant binding, profile edits)
    app.include_router(session_router, tags=["session"])

    # Page resolution is a catch-all, so it goes last
    app.include_router(pages_router, tags=["pages"])

    return app
