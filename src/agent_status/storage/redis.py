"""
Redis run store.

Requires redis (async): pip install redis

Layout per run:
- ``<prefix>:<run_id>:meta``  started marker (holds the start timestamp)
- ``<prefix>:<run_id>:items`` list of record JSON, in append order

Appends are a single RPUSH, so concurrent producers on the same run cannot
lose each other's records. Both keys share the configured TTL, which is
refreshed on every append; an expired run loads as absent.
"""

from __future__ import annotations

import time
from typing import Any

try:
    import redis.asyncio as redis
    from redis.exceptions import ConnectionError as RedisConnectionError
    from redis.exceptions import TimeoutError as RedisTimeoutError
    REDIS_AVAILABLE = True
except ImportError:
    redis = None  # type: ignore
    REDIS_AVAILABLE = False

from ..errors import BackendUnavailableError, RunNotStartedError
from ..logging import StructuredLogger, get_logger
from ..records.factory import record_from_json
from ..records.types import StatusRecord
from ..records.update import StatusUpdate
from .base import RunStore


def _require_redis() -> None:
    """Raise ImportError if redis is not available."""
    if not REDIS_AVAILABLE:
        raise ImportError(
            "Redis storage requires redis. "
            "Install with: pip install redis"
        )


class RedisRunStore(RunStore):
    """Run store backed by Redis.

    Example:
        ```python
        store = RedisRunStore.from_url("redis://localhost:6379/0", ttl_seconds=3600)
        await store.start("run-123")
        await store.append("run-123", record)
        update = await store.load("run-123")
        ```
    """

    backend_name = "redis"

    def __init__(
        self,
        client: Any,  # redis.Redis
        key_prefix: str = "agent_status",
        ttl_seconds: int | None = 86400,
        logger: StructuredLogger | None = None,
    ):
        _require_redis()
        self._client = client
        self._prefix = key_prefix
        self._ttl = ttl_seconds
        self._logger = logger or get_logger()

    @classmethod
    def from_url(cls, url: str, **kwargs) -> RedisRunStore:
        _require_redis()
        client = redis.from_url(url, decode_responses=True)
        return cls(client, **kwargs)

    def _meta_key(self, run_id: str) -> str:
        return f"{self._prefix}:{run_id}:meta"

    def _items_key(self, run_id: str) -> str:
        return f"{self._prefix}:{run_id}:items"

    def _unavailable(self, exc: Exception, operation: str, run_id: str) -> BackendUnavailableError:
        return BackendUnavailableError(
            f"Redis is unavailable: {exc}",
            backend=self.backend_name,
            operation=operation,
            run_id=run_id,
            cause=exc,
        )

    async def start(self, run_id: str) -> StatusUpdate:
        try:
            await self._client.delete(self._items_key(run_id))
            await self._client.set(self._meta_key(run_id), str(time.time()), ex=self._ttl)
        except (RedisConnectionError, RedisTimeoutError) as exc:
            raise self._unavailable(exc, "start", run_id) from exc
        self._logger.log_run_started(run_id, backend=self.backend_name)
        return StatusUpdate()

    async def append(self, run_id: str, record: StatusRecord) -> None:
        meta_key = self._meta_key(run_id)
        items_key = self._items_key(run_id)
        try:
            if not await self._client.exists(meta_key):
                raise RunNotStartedError(run_id)
            await self._client.rpush(items_key, record.to_json())
            if self._ttl:
                await self._client.expire(items_key, self._ttl)
                await self._client.expire(meta_key, self._ttl)
        except (RedisConnectionError, RedisTimeoutError) as exc:
            raise self._unavailable(exc, "append", run_id) from exc

    async def load(self, run_id: str) -> StatusUpdate | None:
        try:
            if not await self._client.exists(self._meta_key(run_id)):
                return None
            raw_items = await self._client.lrange(self._items_key(run_id), 0, -1)
        except (RedisConnectionError, RedisTimeoutError) as exc:
            raise self._unavailable(exc, "load", run_id) from exc
        return StatusUpdate(items=[record_from_json(raw) for raw in raw_items])

    async def delete(self, run_id: str) -> None:
        try:
            await self._client.delete(self._meta_key(run_id), self._items_key(run_id))
        except (RedisConnectionError, RedisTimeoutError) as exc:
            raise self._unavailable(exc, "delete", run_id) from exc
        self._logger.log_run_deleted(run_id)

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ["RedisRunStore"]
