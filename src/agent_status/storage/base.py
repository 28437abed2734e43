"""
Run store interface and in-memory implementation.

A run store keeps one StatusUpdate per run id. The contract:

- start(run_id): create an empty status update (replacing any existing one)
- append(run_id, record): add a record; RunNotStartedError if never started
- load(run_id): the stored status update, or None when absent
- delete(run_id): remove it; deleting an absent run is not an error
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections import defaultdict

from ..errors import RunNotStartedError
from ..logging import StructuredLogger, get_logger
from ..records.types import StatusRecord
from ..records.update import StatusUpdate


class RunStore(ABC):
    """Abstract interface for run-scoped status storage.

    Implementations must be safe for concurrent access across different run
    ids. Same-run appends must not lose updates.
    """

    backend_name: str = "abstract"

    @abstractmethod
    async def start(self, run_id: str) -> StatusUpdate:
        """Create an empty status update for the run.

        Raises:
            BackendUnavailableError: If the backend context is missing
        """
        ...

    @abstractmethod
    async def append(self, run_id: str, record: StatusRecord) -> None:
        """Append a record to the run's status update.

        Raises:
            RunNotStartedError: If start() was never called for this run
            BackendUnavailableError: If the backend context is missing
        """
        ...

    @abstractmethod
    async def load(self, run_id: str) -> StatusUpdate | None:
        """Load the run's status update, or None if absent."""
        ...

    @abstractmethod
    async def delete(self, run_id: str) -> None:
        """Delete the run's status update. Idempotent."""
        ...

    async def exists(self, run_id: str) -> bool:
        return await self.load(run_id) is not None

    async def close(self) -> None:
        """Release backend resources."""
        return None


class InMemoryRunStore(RunStore):
    """In-memory run store.

    Suitable for testing and single-process deployments. Aggregates are kept
    in wire form so that every load goes through the record factory, like the
    persistent backends. Appends to one run are serialized by a per-run lock.
    """

    backend_name = "memory"

    def __init__(self, logger: StructuredLogger | None = None):
        self._data: dict[str, str] = {}
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._logger = logger or get_logger()

    async def start(self, run_id: str) -> StatusUpdate:
        update = StatusUpdate()
        async with self._locks[run_id]:
            self._data[run_id] = update.to_json()
        self._logger.log_run_started(run_id, backend=self.backend_name)
        return update

    async def append(self, run_id: str, record: StatusRecord) -> None:
        # Unknown runs must not leave a lock entry behind.
        if run_id not in self._data:
            raise RunNotStartedError(run_id)
        async with self._locks[run_id]:
            raw = self._data.get(run_id)
            if raw is None:
                raise RunNotStartedError(run_id)
            update = StatusUpdate.from_json(raw)
            update.add_item(record)
            self._data[run_id] = update.to_json()

    async def load(self, run_id: str) -> StatusUpdate | None:
        raw = self._data.get(run_id)
        if raw is None:
            return None
        return StatusUpdate.from_json(raw)

    async def delete(self, run_id: str) -> None:
        lock = self._locks.get(run_id)
        if lock is None:
            self._data.pop(run_id, None)
        else:
            async with lock:
                self._data.pop(run_id, None)
            self._locks.pop(run_id, None)
        self._logger.log_run_deleted(run_id)

    def run_ids(self) -> list[str]:
        return list(self._data)


__all__ = [
    "RunStore",
    "InMemoryRunStore",
]
