"""Health check endpoints."""

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from asc3_gate.session.backends import SessionBackend, SessionBackendError

log = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready", response_model=None)
async def ready(request: Request) -> dict[str, str] | JSONResponse:
    """Ready once the session backend answers."""
    backend: SessionBackend = request.app.state.session_backend
    try:
        await backend.ping()
    except SessionBackendError as exc:
        log.warning("session_backend_unavailable", error=str(exc))
        return JSONResponse({"status": "unavailable"}, status_code=503)
    return {"status": "ready"}
