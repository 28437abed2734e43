"""
Tests for the status subscriber.
"""

import json

import pytest

from agent_status.config import TrackingConfig, configure
from agent_status.errors import RunNotStartedError
from agent_status.events import (
    AgentFinishedEvent,
    AgentRequestEvent,
    AgentResponseEvent,
    AgentStartedEvent,
    EventDispatcher,
    ProviderResponse,
    ToolCall,
    ToolFinishedEvent,
    ToolPreExecuteEvent,
)
from agent_status.filter import EmissionFilter
from agent_status.poller import StatusPoller
from agent_status.records import StatusItemType
from agent_status.storage import InMemoryRunStore
from agent_status.subscriber import StatusSubscriber
from tests._testkit import FixedClock, full_run_events, make_agent, make_tool


def _dispatcher(store, **kwargs) -> EventDispatcher:
    dispatcher = EventDispatcher()
    dispatcher.add_subscriber(StatusSubscriber(store, **kwargs))
    return dispatcher


async def _run(dispatcher: EventDispatcher, events) -> None:
    for event in events:
        await dispatcher.dispatch(event)


class TestSubscription:
    def test_subscribes_to_every_lifecycle_event(self, memory_store):
        events = StatusSubscriber(memory_store).subscribed_events()

        assert set(events) == {
            AgentStartedEvent,
            AgentFinishedEvent,
            AgentResponseEvent,
            ToolPreExecuteEvent,
            ToolFinishedEvent,
            AgentRequestEvent,
        }
        assert all(priority == 0 for _, priority in events.values())


class TestRunGate:
    @pytest.mark.asyncio
    async def test_untracked_run_never_touches_store(self, agent, memory_store):
        """Every event kind is ignored without a run id."""
        dispatcher = _dispatcher(memory_store)

        await _run(dispatcher, full_run_events(agent, run_id=None))

        assert memory_store.run_ids() == []


class TestTypeGate:
    @pytest.mark.asyncio
    async def test_default_emits_every_kind(self, agent, memory_store):
        dispatcher = _dispatcher(memory_store)

        await _run(dispatcher, full_run_events(agent))

        update = await memory_store.load("run-1")
        assert [t.value for t in update.types()] == [
            "agent_started",
            "agent_iteration",
            "agent_chat_history",
            "system_message",
            "ai_provider_request",
            "agent_request",
            "ai_provider_response",
            "agent_response",
            "text_generated",
            "tool_selected",
            "tool_started",
            "tool_finished",
            "agent_finished",
        ]
        assert set(update.types()) == set(StatusItemType)

    @pytest.mark.asyncio
    async def test_restricted_to_start_and_finish(self, memory_store):
        agent = make_agent(tracking=["agent_started", "agent_finished"])
        dispatcher = _dispatcher(memory_store)

        await _run(dispatcher, full_run_events(agent))

        update = await memory_store.load("run-1")
        assert update.types() == [StatusItemType.STARTED, StatusItemType.FINISHED]

    @pytest.mark.asyncio
    async def test_default_types_from_filter(self, agent, memory_store):
        dispatcher = _dispatcher(memory_store, filter=EmissionFilter(default_types=["tool_finished"]))

        await _run(dispatcher, full_run_events(agent))

        update = await memory_store.load("run-1")
        assert update.types() == [StatusItemType.TOOL_FINISHED]

    @pytest.mark.asyncio
    async def test_default_types_from_settings(self, agent, memory_store):
        configure(tracking=TrackingConfig(default_types=["agent_started", "tool_finished"]))
        dispatcher = _dispatcher(memory_store)

        await _run(dispatcher, full_run_events(agent))

        update = await memory_store.load("run-1")
        assert update.types() == [StatusItemType.STARTED, StatusItemType.TOOL_FINISHED]


class TestRunInitialization:
    @pytest.mark.asyncio
    async def test_root_start_initializes_run(self, agent, memory_store):
        await _dispatcher(memory_store).dispatch(
            AgentStartedEvent(agent, "runner-1", loop_count=0, run_id="run-1")
        )

        assert await memory_store.exists("run-1")

    @pytest.mark.asyncio
    async def test_root_start_initializes_even_when_start_untracked(self, memory_store):
        agent = make_agent(tracking=["agent_finished"])
        dispatcher = _dispatcher(memory_store)

        await _run(dispatcher, full_run_events(agent))

        update = await memory_store.load("run-1")
        assert update.types() == [StatusItemType.FINISHED]

    @pytest.mark.asyncio
    async def test_nested_start_does_not_reset(self, agent, memory_store):
        dispatcher = _dispatcher(memory_store)
        await dispatcher.dispatch(AgentStartedEvent(agent, "root", loop_count=0, run_id="run-1"))

        child = make_agent(agent_id="writer", label="Writer")
        await dispatcher.dispatch(
            AgentStartedEvent(child, "child", loop_count=0, run_id="run-1", caller_id="root")
        )

        update = await memory_store.load("run-1")
        assert [(i.agent_runner_id, i.TYPE.value) for i in update] == [
            ("root", "agent_started"),
            ("root", "agent_iteration"),
            ("child", "agent_started"),
            ("child", "agent_iteration"),
        ]
        assert update.items[2].calling_agent_id == "root"
        assert update.items[2].agent_name == "Writer"

    @pytest.mark.asyncio
    async def test_later_loops_only_iterate(self, agent, memory_store):
        dispatcher = _dispatcher(memory_store)
        await dispatcher.dispatch(AgentStartedEvent(agent, "root", loop_count=0, run_id="run-1"))
        await dispatcher.dispatch(AgentStartedEvent(agent, "root", loop_count=1, run_id="run-1"))

        update = await memory_store.load("run-1")
        assert update.types() == [
            StatusItemType.STARTED,
            StatusItemType.ITERATION,
            StatusItemType.ITERATION,
        ]
        assert update.items[-1].loop_count == 1

    @pytest.mark.asyncio
    async def test_append_before_start_raises(self, agent, memory_store):
        with pytest.raises(RunNotStartedError):
            await _dispatcher(memory_store).dispatch(
                AgentFinishedEvent(agent, "runner-1", run_id="never-started")
            )


class TestOrdering:
    @pytest.mark.asyncio
    async def test_append_order_follows_events(self, memory_store):
        agent = make_agent(
            tracking=[
                "agent_started",
                "agent_iteration",
                "tool_selected",
                "tool_started",
                "tool_finished",
                "text_generated",
                "agent_finished",
            ]
        )
        dispatcher = _dispatcher(memory_store)

        await _run(
            dispatcher,
            [
                AgentStartedEvent(agent, "r", loop_count=0, run_id="run-1"),
                AgentResponseEvent(
                    agent,
                    "r",
                    response=ProviderResponse(tools=[ToolCall("t1", "search", '{"q": "x"}')]),
                    run_id="run-1",
                ),
                ToolPreExecuteEvent(agent, "r", make_tool(), run_id="run-1"),
                ToolFinishedEvent(agent, "r", make_tool(output="3 hits"), run_id="run-1"),
                AgentResponseEvent(agent, "r", response=ProviderResponse(text="done"), run_id="run-1"),
                AgentFinishedEvent(agent, "r", run_id="run-1"),
            ],
        )

        update = await memory_store.load("run-1")
        assert [t.value for t in update.types()] == [
            "agent_started",
            "agent_iteration",
            "tool_selected",
            "tool_started",
            "tool_finished",
            "text_generated",
            "agent_finished",
        ]


class TestRecordContent:
    @pytest.mark.asyncio
    async def test_co_emitted_records_share_timestamp(self, agent, memory_store):
        clock = FixedClock()
        dispatcher = _dispatcher(memory_store, clock=clock)

        await _run(dispatcher, full_run_events(agent)[:3])

        update = await memory_store.load("run-1")
        request_batch = update.items[2:6]
        response_batch = update.items[6:10]
        assert len({i.time for i in request_batch}) == 1
        assert len({i.time for i in response_batch}) == 1
        assert request_batch[0].time < response_batch[0].time

    @pytest.mark.asyncio
    async def test_request_payloads(self, agent, memory_store):
        await _run(_dispatcher(memory_store), full_run_events(agent)[:2])

        by_type = {i.TYPE: i for i in await memory_store.load("run-1")}
        assert by_type[StatusItemType.CHAT_HISTORY].chat_history == [{"role": "user", "text": "find x"}]
        assert by_type[StatusItemType.SYSTEM_MESSAGE].system_prompt == "Be brief."
        assert by_type[StatusItemType.REQUEST].instructions == "Answer the user."

        provider = by_type[StatusItemType.PROVIDER_REQUEST]
        assert provider.provider_name == "openai"
        assert provider.model_name == "gpt-5-nano"
        assert provider.config == {"temperature": 0.2}
        assert provider.request_data["system_prompt"] == "Be brief."

    @pytest.mark.asyncio
    async def test_null_tool_selection_is_skipped(self, agent, memory_store):
        dispatcher = _dispatcher(memory_store)
        await dispatcher.dispatch(AgentStartedEvent(agent, "r", run_id="run-1"))

        await dispatcher.dispatch(
            AgentResponseEvent(
                agent,
                "r",
                response=ProviderResponse(
                    tools=[None, ToolCall("t2", "fetch", "{}"), None, ToolCall(None, "search", "")]
                ),
                run_id="run-1",
            )
        )

        update = await memory_store.load("run-1")
        selected = update.filter(types=["tool_selected"]).items
        assert [(s.tool_id, s.tool_name) for s in selected] == [("t2", "fetch"), ("", "search")]
        assert StatusItemType.TEXT_GENERATED not in update.types()
        assert update.filter(types=["agent_response"]).items[0].text_response is None

    @pytest.mark.asyncio
    async def test_tool_selected_feedback_lookup(self, agent, memory_store):
        dispatcher = _dispatcher(memory_store, feedback_lookup={"search": "Looking it up"}.get)

        await _run(dispatcher, full_run_events(agent)[:3])

        selected = (await memory_store.load("run-1")).filter(types=["tool_selected"]).items[0]
        assert selected.tool_feedback_message == "Looking it up"
        assert selected.tool_input == '{"q": "x"}'

    @pytest.mark.asyncio
    async def test_tool_execution_records(self, agent, memory_store):
        await _run(_dispatcher(memory_store), full_run_events(agent))

        update = await memory_store.load("run-1")
        started = update.filter(types=["tool_started"]).items[0]
        finished = update.filter(types=["tool_finished"]).items[0]

        assert json.loads(started.tool_input) == {"q": "x"}
        assert started.tool_feedback_message == "Searching..."
        assert started.tool_id == "t1"
        assert finished.tool_results == "3 hits"
        assert finished.tool_feedback_message == ""

    @pytest.mark.asyncio
    async def test_tool_without_output_has_empty_results(self, agent, memory_store):
        dispatcher = _dispatcher(memory_store)
        await dispatcher.dispatch(AgentStartedEvent(agent, "r", run_id="run-1"))
        await dispatcher.dispatch(ToolFinishedEvent(agent, "r", make_tool(params={}), run_id="run-1"))

        finished = (await memory_store.load("run-1")).items[-1]
        assert finished.tool_results == ""
        assert finished.tool_input == "{}"


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_poller_reads_run_trace(self):
        store = InMemoryRunStore()
        poller = StatusPoller(store)
        agent = make_agent(
            agent_id="a",
            label="A",
            tracking=["agent_started", "tool_selected", "tool_finished", "agent_finished"],
        )
        dispatcher = _dispatcher(store)

        await store.start("r1")
        await _run(
            dispatcher,
            [
                AgentStartedEvent(agent, "r1a", loop_count=0, run_id="r1"),
                AgentResponseEvent(
                    agent,
                    "r1a",
                    response=ProviderResponse(tools=[ToolCall("t1", "search", '{"q":"x"}')]),
                    run_id="r1",
                ),
                ToolFinishedEvent(agent, "r1a", make_tool(output="3 hits"), run_id="r1"),
                AgentFinishedEvent(agent, "r1a", run_id="r1"),
            ],
        )

        update = await poller.get_latest("r1")

        assert [t.value for t in update.types()] == [
            "agent_started",
            "tool_selected",
            "tool_finished",
            "agent_finished",
        ]
        assert all(i.agent_runner_id == "r1a" for i in update)
        assert all(i.calling_agent_id is None for i in update)
        assert json.loads(update.items[1].tool_input) == {"q": "x"}
        assert json.loads(update.items[2].tool_input) == {"q": "x"}
        assert update.items[2].tool_results == "3 hits"
