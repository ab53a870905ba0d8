from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol

import redis.asyncio as redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from .config import DEFAULT_STORE_KEY, StorageConfig
from .errors import PersistenceError
from .models import Snapshot

logger = logging.getLogger(__name__)

BACKEND_ERRORS = (RedisError, ConnectionError, OSError, TimeoutError)


class SnapshotBackend(Protocol):
    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...


class InMemoryBackend:
    def __init__(self) -> None:
        self._store: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    async def set(self, key: str, value: str) -> None:
        self._store[key] = value


class RedisBackend:
    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisBackend":
        logger.info(f"Connecting snapshot store to Redis at {url.split('@')[-1]}")
        return cls(redis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> Optional[str]:
        value = await self._client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        await self._client.set(key, value)

    async def close(self) -> None:
        await self._client.aclose()


class DurableStore:
    def __init__(self, backend: SnapshotBackend, key: str = DEFAULT_STORE_KEY) -> None:
        self.backend = backend
        self.key = key

    async def load(self) -> Optional[Snapshot]:
        try:
            raw = await self.backend.get(self.key)
        except BACKEND_ERRORS as exc:
            raise PersistenceError("Reading from the durable store failed") from exc
        if raw is None:
            return None
        try:
            return Snapshot.model_validate_json(raw)
        except ValidationError as exc:
            raise PersistenceError(f"Stored snapshot under {self.key} is not readable") from exc

    async def store(self, snapshot: Snapshot) -> None:
        payload = snapshot.model_dump_json()
        try:
            await self.backend.set(self.key, payload)
        except BACKEND_ERRORS as exc:
            raise PersistenceError() from exc

    async def close(self) -> None:
        close = getattr(self.backend, "close", None)
        if close is not None:
            await close()


def build_store(config: StorageConfig) -> DurableStore:
    if config.backend == "memory":
        return DurableStore(InMemoryBackend(), key=config.key)
    if config.backend == "redis":
        return DurableStore(RedisBackend.from_url(config.url), key=config.key)
    raise ValueError(f"Unknown storage backend: {config.backend}")
