"""
Tests for the status poller.
"""

import pytest

from agent_status.errors import BackendUnavailableError
from agent_status.poller import StatusPoller
from agent_status.records import AgentStartedRecord, StatusUpdate
from agent_status.storage import InMemorySession, SessionRunStore


class TestStatusPoller:
    @pytest.mark.asyncio
    async def test_unknown_run_reads_empty(self, memory_store):
        update = await StatusPoller(memory_store).get_latest("never-started-id")

        assert isinstance(update, StatusUpdate)
        assert len(update) == 0

    @pytest.mark.asyncio
    async def test_reads_stored_update(self, memory_store):
        record = AgentStartedRecord(time=1.0, agent_id="a", agent_name="A", agent_runner_id="r")
        await memory_store.start("run-1")
        await memory_store.append("run-1", record)

        update = await StatusPoller(memory_store).get_latest("run-1")

        assert update.items == [record]

    @pytest.mark.asyncio
    async def test_delete(self, memory_store):
        poller = StatusPoller(memory_store)
        await memory_store.start("run-1")

        await poller.delete_status_update("run-1")

        assert await memory_store.load("run-1") is None
        assert len(await poller.get_latest("run-1")) == 0

    @pytest.mark.asyncio
    async def test_delete_unknown_run(self, memory_store):
        await StatusPoller(memory_store).delete_status_update("never-started-id")

    @pytest.mark.asyncio
    async def test_backend_errors_are_not_swallowed(self):
        poller = StatusPoller(SessionRunStore(InMemorySession(started=False)))

        with pytest.raises(BackendUnavailableError):
            await poller.get_latest("run-1")
