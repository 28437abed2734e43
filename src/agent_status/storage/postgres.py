"""
PostgreSQL run store.

Requires asyncpg to be installed: pip install asyncpg

Table schema:
- run_id (TEXT PRIMARY KEY)
- items (JSONB array of record wire forms, in append order)
- created_at, updated_at (TIMESTAMPTZ)

Appends are one ``UPDATE ... SET items = items || $2::jsonb`` statement, so
concurrent producers on the same run cannot lose updates. Rows never expire on
their own; use delete() or purge_older_than().
"""

from __future__ import annotations

import asyncio
import json
import re
from datetime import datetime, timezone
from typing import Any

try:
    import asyncpg
    ASYNCPG_AVAILABLE = True
except ImportError:
    asyncpg = None  # type: ignore
    ASYNCPG_AVAILABLE = False

from ..errors import BackendUnavailableError, RunNotStartedError
from ..logging import StructuredLogger, get_logger
from ..records.types import StatusRecord
from ..records.update import StatusUpdate
from .base import RunStore


def _require_asyncpg() -> None:
    """Raise ImportError if asyncpg is not available."""
    if not ASYNCPG_AVAILABLE:
        raise ImportError(
            "PostgreSQL storage requires asyncpg. "
            "Install with: pip install asyncpg"
        )


def _sanitize_table_name(name: str) -> str:
    """Ensure the table name is safe for SQL interpolation."""
    if not name:
        raise ValueError("table_name cannot be empty")
    if not re.fullmatch(r"[a-zA-Z0-9_]+", name):
        raise ValueError(f"Invalid table name: {name!r}")
    return name


def _affected_rows(status: str) -> int:
    """Row count from an asyncpg command tag such as 'UPDATE 1'."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, AttributeError):
        return 0


class PostgresRunStore(RunStore):
    """PostgreSQL implementation of RunStore."""

    TABLE_NAME = "agent_status_updates"
    backend_name = "postgres"

    def __init__(
        self,
        pool: Any,  # asyncpg.Pool
        table_name: str | None = None,
        logger: StructuredLogger | None = None,
    ):
        _require_asyncpg()
        self._pool = pool
        self._table = _sanitize_table_name(table_name or self.TABLE_NAME)
        self._ensured = False
        self._lock = asyncio.Lock()
        self._logger = logger or get_logger()

    @classmethod
    async def from_dsn(cls, dsn: str, **kwargs) -> PostgresRunStore:
        _require_asyncpg()
        pool = await asyncpg.create_pool(dsn)
        return cls(pool, **kwargs)

    def _unavailable(self, exc: Exception, operation: str, run_id: str) -> BackendUnavailableError:
        return BackendUnavailableError(
            f"PostgreSQL is unavailable: {exc}",
            backend=self.backend_name,
            operation=operation,
            run_id=run_id,
            cause=exc,
        )

    async def _ensure_table(self) -> None:
        """Create the status table if it doesn't exist."""
        async with self._lock:
            if self._ensured:
                return

            ddl = f'''
            CREATE TABLE IF NOT EXISTS "{self._table}" (
                run_id TEXT PRIMARY KEY,
                items JSONB NOT NULL DEFAULT '[]'::jsonb,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            );
            CREATE INDEX IF NOT EXISTS "{self._table}_updated_at_idx" ON "{self._table}" (updated_at);
            '''

            async with self._pool.acquire() as conn:
                for stmt in [s.strip() for s in ddl.split(";") if s.strip()]:
                    await conn.execute(stmt)

            self._ensured = True

    async def start(self, run_id: str) -> StatusUpdate:
        q = f'''
        INSERT INTO "{self._table}" (run_id, items, created_at, updated_at)
        VALUES ($1, '[]'::jsonb, NOW(), NOW())
        ON CONFLICT (run_id) DO UPDATE
        SET items = '[]'::jsonb, created_at = NOW(), updated_at = NOW()
        '''
        try:
            await self._ensure_table()
            async with self._pool.acquire() as conn:
                await conn.execute(q, run_id)
        except (OSError, asyncpg.PostgresConnectionError) as exc:
            raise self._unavailable(exc, "start", run_id) from exc
        self._logger.log_run_started(run_id, backend=self.backend_name)
        return StatusUpdate()

    async def append(self, run_id: str, record: StatusRecord) -> None:
        q = f'''
        UPDATE "{self._table}"
        SET items = items || $2::jsonb, updated_at = NOW()
        WHERE run_id = $1
        '''
        try:
            await self._ensure_table()
            async with self._pool.acquire() as conn:
                status = await conn.execute(q, run_id, json.dumps([record.to_dict()]))
        except (OSError, asyncpg.PostgresConnectionError) as exc:
            raise self._unavailable(exc, "append", run_id) from exc
        if _affected_rows(status) == 0:
            raise RunNotStartedError(run_id)

    async def load(self, run_id: str) -> StatusUpdate | None:
        q = f'SELECT items FROM "{self._table}" WHERE run_id = $1'
        try:
            await self._ensure_table()
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(q, run_id)
        except (OSError, asyncpg.PostgresConnectionError) as exc:
            raise self._unavailable(exc, "load", run_id) from exc
        if row is None:
            return None
        items = row["items"] if isinstance(row["items"], list) else json.loads(row["items"] or "[]")
        return StatusUpdate.from_dict({"items": items})

    async def delete(self, run_id: str) -> None:
        q = f'DELETE FROM "{self._table}" WHERE run_id = $1'
        try:
            await self._ensure_table()
            async with self._pool.acquire() as conn:
                await conn.execute(q, run_id)
        except (OSError, asyncpg.PostgresConnectionError) as exc:
            raise self._unavailable(exc, "delete", run_id) from exc
        self._logger.log_run_deleted(run_id)

    async def purge_older_than(self, cutoff: float) -> int:
        """Delete runs not updated since ``cutoff`` (epoch seconds). Returns the count."""
        q = f'DELETE FROM "{self._table}" WHERE updated_at < $1'
        await self._ensure_table()
        async with self._pool.acquire() as conn:
            status = await conn.execute(q, datetime.fromtimestamp(cutoff, tz=timezone.utc))
        return _affected_rows(status)

    async def close(self) -> None:
        await self._pool.close()


__all__ = ["PostgresRunStore"]
