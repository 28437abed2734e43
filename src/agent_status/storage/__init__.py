"""
Run stores for agent-status.

This module provides the RunStore interface and its backends:
- InMemoryRunStore: single process, tests
- SessionRunStore: bound to a user session
- RedisRunStore: shared, TTL-bound (requires redis)
- PostgresRunStore: durable (requires asyncpg)
"""

from .base import RunStore, InMemoryRunStore
from .session import StatusSession, InMemorySession, SessionRunStore
from .factory import create_run_store

__all__ = [
    "RunStore",
    "InMemoryRunStore",
    "StatusSession",
    "InMemorySession",
    "SessionRunStore",
    "create_run_store",
]
