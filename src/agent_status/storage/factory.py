"""
Run store factory.
"""

from __future__ import annotations

from typing import Any

from ..config import Settings, get_settings
from ..errors import ConfigError
from ..logging import StructuredLogger
from .base import InMemoryRunStore, RunStore


async def create_run_store(
    settings: Settings | None = None,
    *,
    session: Any = None,
    client: Any = None,
    logger: StructuredLogger | None = None,
) -> RunStore:
    """Build the run store selected by ``settings.storage.backend``.

    Args:
        settings: Settings to use (global settings when omitted)
        session: Session object, required for the "session" backend
        client: Pre-built Redis client or asyncpg pool; built from the
            configured URL/DSN when omitted
        logger: Logger handed to the store
    """
    settings = settings or get_settings()
    cfg = settings.storage

    if cfg.backend == "memory":
        return InMemoryRunStore(logger=logger)

    if cfg.backend == "session":
        from .session import SessionRunStore

        if session is None:
            raise ConfigError("The session storage backend needs a session object")
        return SessionRunStore(session, key_prefix=f"{cfg.key_prefix}_updates", logger=logger)

    if cfg.backend == "redis":
        from .redis import RedisRunStore

        if client is None:
            return RedisRunStore.from_url(
                cfg.redis_url, key_prefix=cfg.key_prefix, ttl_seconds=cfg.ttl_seconds, logger=logger
            )
        return RedisRunStore(client, key_prefix=cfg.key_prefix, ttl_seconds=cfg.ttl_seconds, logger=logger)

    if cfg.backend == "postgres":
        from .postgres import PostgresRunStore

        if client is None:
            return await PostgresRunStore.from_dsn(cfg.pg_dsn, table_name=cfg.table_name, logger=logger)
        return PostgresRunStore(client, table_name=cfg.table_name, logger=logger)

    raise ConfigError(f"Invalid storage backend: {cfg.backend}")


__all__ = ["create_run_store"]
