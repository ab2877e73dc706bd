"""REST backend client."""

from asc3_gate.client.errors import (
    BackendError,
    BackendTimeoutError,
    ForbiddenError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    UnauthorizedError,
)
from asc3_gate.client.backend import BackendClient

__all__ = [
    "BackendClient",
    "BackendError",
    "BackendTimeoutError",
    "ForbiddenError",
    "NetworkError",
    "NotFoundError",
    "RateLimitedError",
    "UnauthorizedError",
]
