"""
Session-bound run store.

Keeps status updates inside a user's session, so a UI can only poll the runs
its own session started and everything disappears with the session. The
session is any object exposing ``is_started()`` and a mutable mapping
``data``; web frameworks' session dicts can be wrapped in a few lines.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import MutableMapping
from typing import Any, Protocol

from ..errors import BackendUnavailableError, RunNotStartedError
from ..logging import StructuredLogger, get_logger
from ..records.types import StatusRecord
from ..records.update import StatusUpdate
from .base import RunStore


class StatusSession(Protocol):
    """What SessionRunStore needs from a session."""

    data: MutableMapping[str, Any]

    def is_started(self) -> bool:
        ...


class InMemorySession:
    """Minimal session for tests and single-process use."""

    def __init__(self, started: bool = True):
        self.data: dict[str, Any] = {}
        self._started = started

    def is_started(self) -> bool:
        return self._started

    def start(self) -> None:
        self._started = True

    def destroy(self) -> None:
        self._started = False
        self.data.clear()


class SessionRunStore(RunStore):
    """Run store backed by a session mapping.

    Keys are ``<key_prefix>_<run_id>``. Every operation except delete
    requires an active session.
    """

    backend_name = "session"

    def __init__(
        self,
        session: StatusSession,
        key_prefix: str = "agent_status_updates",
        logger: StructuredLogger | None = None,
    ):
        self._session = session
        self._prefix = key_prefix
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._logger = logger or get_logger()

    def _key(self, run_id: str) -> str:
        return f"{self._prefix}_{run_id}"

    def _require_session(self, operation: str, run_id: str) -> MutableMapping[str, Any]:
        if not self._session.is_started():
            raise BackendUnavailableError(
                "There is no active session for the status storage",
                backend=self.backend_name,
                operation=operation,
                run_id=run_id,
            )
        return self._session.data

    async def start(self, run_id: str) -> StatusUpdate:
        data = self._require_session("start", run_id)
        update = StatusUpdate()
        async with self._locks[run_id]:
            data[self._key(run_id)] = update.to_json()
        self._logger.log_run_started(run_id, backend=self.backend_name)
        return update

    async def append(self, run_id: str, record: StatusRecord) -> None:
        data = self._require_session("append", run_id)
        if not data.get(self._key(run_id)):
            raise RunNotStartedError(run_id)
        async with self._locks[run_id]:
            raw = data.get(self._key(run_id))
            if not raw:
                raise RunNotStartedError(run_id)
            update = StatusUpdate.from_json(raw)
            update.add_item(record)
            data[self._key(run_id)] = update.to_json()

    async def load(self, run_id: str) -> StatusUpdate | None:
        data = self._require_session("load", run_id)
        raw = data.get(self._key(run_id))
        if not raw:
            return None
        return StatusUpdate.from_json(raw)

    async def delete(self, run_id: str) -> None:
        if not self._session.is_started():
            return
        lock = self._locks.get(run_id)
        if lock is None:
            self._session.data.pop(self._key(run_id), None)
        else:
            async with lock:
                self._session.data.pop(self._key(run_id), None)
            self._locks.pop(run_id, None)
        self._logger.log_run_deleted(run_id)


__all__ = [
    "StatusSession",
    "InMemorySession",
    "SessionRunStore",
]
