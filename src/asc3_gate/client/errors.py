"""Errors raised by the backend client."""

from __future__ import annotations


class BackendError(Exception):
    """A backend request failed. ``status`` is 0 for transport failures."""

    default_message = "Backend request failed"

    def __init__(self, message: str | None = None, status: int = 500) -> None:
        self.message = message or self.default_message
        self.status = status
        super().__init__(self.message)


class UnauthorizedError(BackendError):
    default_message = "Unauthorized - Please login again"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, status=401)


class ForbiddenError(BackendError):
    default_message = "Access forbidden - Insufficient permissions"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, status=403)


class NotFoundError(BackendError):
    default_message = "Resource not found"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, status=404)


class RateLimitedError(BackendError):
    default_message = "Rate limit exceeded - Please try again later"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, status=429)


class BackendTimeoutError(BackendError):
    default_message = "Request timeout - Please try again"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, status=408)


class NetworkError(BackendError):
    default_message = "Network error - Cannot connect to server"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, status=0)


_BY_STATUS: dict[int, type[BackendError]] = {
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    429: RateLimitedError,
}


def error_for_status(status: int, message: str | None) -> BackendError:
    """Map an HTTP error status to the matching BackendError subclass."""
    cls = _BY_STATUS.get(status)
    if cls is None:
        return BackendError(message or f"HTTP error! status: {status}", status=status)
    return cls(message)
