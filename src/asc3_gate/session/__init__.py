"""Per-visitor session state and its pluggable storage backends."""

from asc3_gate.session.backends import (
    InMemoryBackend,
    RedisBackend,
    SessionBackend,
    SessionBackendError,
)
from asc3_gate.session.store import (
    GLOBAL_TOKEN,
    LAST_ALLOWED_PATH,
    TENANT_PREFIX,
    TOKEN,
    SessionSnapshot,
    SessionStore,
    new_session_id,
)

__all__ = [
    "GLOBAL_TOKEN",
    "LAST_ALLOWED_PATH",
    "TENANT_PREFIX",
    "TOKEN",
    "InMemoryBackend",
    "RedisBackend",
    "SessionBackend",
    "SessionBackendError",
    "SessionSnapshot",
    "SessionStore",
    "new_session_id",
]
