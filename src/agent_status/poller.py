"""
Status poller.

Read/delete facade over a run store for UI and log consumers. Unknown runs
read as an empty status update; backend errors are not swallowed.
"""

from __future__ import annotations

from .logging import StructuredLogger, get_logger
from .records.update import StatusUpdate
from .storage.base import RunStore


class StatusPoller:
    """Poll and clear the status of agent runs.

    Example:
        ```python
        poller = StatusPoller(store)
        update = await poller.get_latest("run-123")
        for item in update:
            print(item.type.title, item.agent_name)
        await poller.delete_status_update("run-123")
        ```
    """

    def __init__(self, store: RunStore, logger: StructuredLogger | None = None):
        self._store = store
        self._logger = logger or get_logger()

    @property
    def store(self) -> RunStore:
        return self._store

    async def get_latest(self, run_id: str) -> StatusUpdate:
        """Latest status update for a run; empty when the run is unknown."""
        update = await self._store.load(run_id)
        if update is None:
            self._logger.debug("No status update stored", run_id=run_id)
            return StatusUpdate()
        return update

    async def delete_status_update(self, run_id: str) -> None:
        await self._store.delete(run_id)


__all__ = ["StatusPoller"]
