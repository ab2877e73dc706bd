"""Key/value backends that hold session fields."""

from __future__ import annotations

from typing import Any, Protocol

from redis.exceptions import RedisError


class SessionBackendError(Exception):
    """Raised by a backend when the underlying storage is unavailable."""


class SessionBackend(Protocol):
    """Backend interface for flat string key/value storage."""

    async def get(self, key: str) -> str | None: ...
    async def set(self, key: str, value: str) -> None: ...
    async def delete(self, key: str) -> None: ...
    async def ping(self) -> None: ...


class InMemoryBackend:
    """Process-local backend for tests and single-worker deployments."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def ping(self) -> None:
        return None

    def keys(self) -> list[str]:
        return list(self._data)


class RedisBackend:
    """Session backend shared across workers, backed by Redis."""

    def __init__(self, redis_client: Any) -> None:
        self._redis = redis_client

    async def get(self, key: str) -> str | None:
        try:
            value = await self._redis.get(key)
        except RedisError as exc:
            raise SessionBackendError(f"redis get failed for {key}") from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        try:
            await self._redis.set(key, value)
        except RedisError as exc:
            raise SessionBackendError(f"redis set failed for {key}") from exc

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except RedisError as exc:
            raise SessionBackendError(f"redis delete failed for {key}") from exc

    async def ping(self) -> None:
        try:
            await self._redis.ping()
        except RedisError as exc:
            raise SessionBackendError("redis ping failed") from exc

    async def close(self) -> None:
        await self._redis.aclose()
