"""
Shared test fixtures for agent-status tests.
"""

from __future__ import annotations

import pytest

from agent_status.config import reset_settings
from agent_status.events.types import RunnerAgent
from agent_status.storage import InMemoryRunStore
from tests._testkit import FakePgPool, FakeRedis, FixedClock, make_agent


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep the process environment and global settings out of every test."""
    for key in ("STORAGE_BACKEND", "KEY_PREFIX", "TTL_SECONDS", "REDIS_URL", "PG_DSN",
                "TABLE_NAME", "LOG_LEVEL", "LOG_FORMAT", "TRACKING_TYPES"):
        monkeypatch.delenv(f"AGENT_STATUS_{key}", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def agent() -> RunnerAgent:
    return make_agent()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def memory_store() -> InMemoryRunStore:
    return InMemoryRunStore()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def fake_pg_pool() -> FakePgPool:
    return FakePgPool()
