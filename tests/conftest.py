"""Shared test fixtures: fake REST backend, in-memory session storage."""

from __future__ import annotations

import sys
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Make _helpers importable from test files
sys.path.insert(0, str(Path(__file__).parent))

from _helpers import FakeBackend  # noqa: E402

from asc3_gate.auth.context import AuthContext  # noqa: E402
from asc3_gate.client.backend import BackendClient  # noqa: E402
from asc3_gate.rest.app import create_app  # noqa: E402
from asc3_gate.session.backends import InMemoryBackend  # noqa: E402
from asc3_gate.session.store import SessionStore  # noqa: E402
from asc3_gate.settings import Settings  # noqa: E402

BACKEND_URL = "http://backend.test"
SESSION_ID = "test-session"


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def memory_backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def store(memory_backend: InMemoryBackend) -> SessionStore:
    return SessionStore(memory_backend, SESSION_ID)


@pytest_asyncio.fixture
async def http(fake_backend: FakeBackend) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(fake_backend.handle), base_url=BACKEND_URL
    ) as client:
        yield client


@pytest.fixture
def backend_client(http: httpx.AsyncClient, store: SessionStore) -> BackendClient:
    return BackendClient(http, store)


@pytest.fixture
def auth(store: SessionStore, backend_client: BackendClient) -> AuthContext:
    return AuthContext(store, backend_client, global_admin_email="global@asc.com")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        backend_api_url=BACKEND_URL,
        session_backend="memory",
        global_admin_email="global@asc.com",
        cors_allow_origins="http://localhost:3000",
    )


@pytest.fixture
def client(
    settings: Settings, fake_backend: FakeBackend, memory_backend: InMemoryBackend
) -> Iterator[TestClient]:
    """Test client wired to the fake backend; redirects are not followed."""
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(fake_backend.handle), base_url=BACKEND_URL
    )
    app = create_app(settings, http_client=http_client, session_backend=memory_backend)
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client
