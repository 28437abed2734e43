"""
Status subscriber.

Turns agent lifecycle events into status records and appends them to a run
store. Every handler first applies the run gate (no run id, no records), then
the type gate for each record it would produce.

Records produced from one event share a single timestamp so that a poller
never sees an ordering ambiguity between them.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable

from .config import get_settings
from .errors import RunNotStartedError
from .events.types import (
    AgentFinishedEvent,
    AgentRequestEvent,
    AgentResponseEvent,
    AgentStartedEvent,
    AgentStatusEvent,
    AgentToolEvent,
    ToolFinishedEvent,
    ToolPreExecuteEvent,
)
from .filter import EmissionFilter
from .logging import StructuredLogger, get_logger
from .records.types import (
    AgentChatHistoryRecord,
    AgentFinishedRecord,
    AgentIterationRecord,
    AgentRequestRecord,
    AgentResponseRecord,
    AgentStartedRecord,
    ProviderRequestRecord,
    ProviderResponseRecord,
    StatusItemType,
    StatusRecord,
    SystemMessageRecord,
    TextGeneratedRecord,
    ToolFinishedRecord,
    ToolSelectedRecord,
    ToolStartedRecord,
)
from .storage.base import RunStore

FeedbackLookup = Callable[[str], str]


class StatusSubscriber:
    """Records the status of agent runs.

    Example:
        ```python
        store = InMemoryRunStore()
        dispatcher = EventDispatcher()
        dispatcher.add_subscriber(StatusSubscriber(store))

        await dispatcher.dispatch(AgentStartedEvent(agent, "runner-1", run_id="run-1"))
        ```

    Args:
        store: Where records are appended
        filter: Run and type gates (defaults to settings.tracking.default_types)
        clock: Returns fractional epoch seconds
        feedback_lookup: tool name -> feedback message shown while the tool runs
        logger: Structured logger
    """

    def __init__(
        self,
        store: RunStore,
        filter: EmissionFilter | None = None,
        clock: Callable[[], float] = time.time,
        feedback_lookup: FeedbackLookup | None = None,
        logger: StructuredLogger | None = None,
    ):
        self._store = store
        self._filter = filter or EmissionFilter.from_settings(get_settings())
        self._clock = clock
        self._feedback_lookup = feedback_lookup
        self._logger = logger or get_logger()

    @property
    def store(self) -> RunStore:
        return self._store

    def subscribed_events(self) -> dict[type[AgentStatusEvent], tuple[str, int]]:
        return {
            AgentStartedEvent: ("on_agent_started", 0),
            AgentFinishedEvent: ("on_agent_finished", 0),
            AgentResponseEvent: ("on_agent_response", 0),
            ToolFinishedEvent: ("on_tool_finished", 0),
            ToolPreExecuteEvent: ("on_tool_pre_execute", 0),
            AgentRequestEvent: ("on_agent_request", 0),
        }

    # Helpers

    def _envelope(self, event: Any, now: float) -> dict[str, Any]:
        return {
            "time": now,
            "agent_id": event.agent_id,
            "agent_name": event.agent.label,
            "agent_runner_id": event.agent_runner_id,
            "calling_agent_id": event.caller_id,
        }

    def _allows(self, event: AgentStatusEvent, item_type: StatusItemType) -> bool:
        if self._filter.allows(event.agent, item_type):
            return True
        self._logger.log_record_skipped(
            "type not tracked",
            run_id=event.run_id,
            record_type=item_type.value,
            agent_id=event.agent_id,
        )
        return False

    async def _append(self, run_id: str, record: StatusRecord) -> None:
        try:
            await self._store.append(run_id, record)
        except RunNotStartedError as exc:
            self._logger.log_error(
                exc,
                f"Dropped {record.TYPE.value}: run {run_id} was never started",
                level=logging.WARNING,
                run_id=run_id,
                record_type=record.TYPE.value,
            )
            raise
        self._logger.log_record_appended(run_id, record)

    @staticmethod
    def _tool_input(event: AgentToolEvent) -> str:
        return json.dumps(event.tool.input_as_dict(), default=str)

    def _feedback_for(self, tool_name: str) -> str:
        if self._feedback_lookup is None:
            return ""
        return str(self._feedback_lookup(tool_name) or "")

    # Handlers

    async def on_agent_started(self, event: AgentStartedEvent) -> None:
        """Root start initializes the run; loop 0 is a start, every loop an iteration."""
        if not self._filter.should_track(event):
            return
        run_id = event.run_id

        if event.loop_count == 0 and event.caller_id is None:
            await self._store.start(run_id)

        if event.loop_count == 0 and self._allows(event, StatusItemType.STARTED):
            await self._append(
                run_id,
                AgentStartedRecord(**self._envelope(event, self._clock())),
            )

        if self._allows(event, StatusItemType.ITERATION):
            await self._append(
                run_id,
                AgentIterationRecord(
                    **self._envelope(event, self._clock()),
                    loop_count=event.loop_count,
                ),
            )

    async def on_agent_finished(self, event: AgentFinishedEvent) -> None:
        if not self._filter.should_track(event):
            return
        if not self._allows(event, StatusItemType.FINISHED):
            return
        await self._append(
            event.run_id,
            AgentFinishedRecord(**self._envelope(event, self._clock())),
        )

    async def on_agent_request(self, event: AgentRequestEvent) -> None:
        if not self._filter.should_track(event):
            return
        run_id = event.run_id
        envelope = self._envelope(event, self._clock())

        if self._allows(event, StatusItemType.CHAT_HISTORY):
            await self._append(
                run_id,
                AgentChatHistoryRecord(
                    **envelope,
                    loop_count=event.loop_count,
                    chat_history=[m.to_dict() for m in event.chat_history],
                ),
            )

        if self._allows(event, StatusItemType.SYSTEM_MESSAGE):
            await self._append(
                run_id,
                SystemMessageRecord(
                    **envelope,
                    loop_count=event.loop_count,
                    system_prompt=event.system_prompt or "",
                ),
            )

        if self._allows(event, StatusItemType.PROVIDER_REQUEST):
            agent = event.agent
            await self._append(
                run_id,
                ProviderRequestRecord(
                    **envelope,
                    loop_count=event.loop_count,
                    request_data=event.chat_input.to_dict(),
                    provider_name=agent.provider_name,
                    model_name=agent.model_name,
                    config=dict(agent.model_config),
                ),
            )

        if self._allows(event, StatusItemType.REQUEST):
            await self._append(
                run_id,
                AgentRequestRecord(
                    **envelope,
                    loop_count=event.loop_count,
                    instructions=event.instructions or "",
                ),
            )

    async def on_agent_response(self, event: AgentResponseEvent) -> None:
        if not self._filter.should_track(event):
            return
        run_id = event.run_id
        response = event.response
        envelope = self._envelope(event, self._clock())

        if self._allows(event, StatusItemType.PROVIDER_RESPONSE):
            await self._append(
                run_id,
                ProviderResponseRecord(
                    **envelope,
                    loop_count=event.loop_count,
                    response_data=response.to_dict(),
                ),
            )

        if self._allows(event, StatusItemType.RESPONSE):
            await self._append(
                run_id,
                AgentResponseRecord(
                    **envelope,
                    loop_count=event.loop_count,
                    text_response=response.text,
                ),
            )

        if response.text is not None and self._allows(event, StatusItemType.TEXT_GENERATED):
            await self._append(
                run_id,
                TextGeneratedRecord(
                    **envelope,
                    loop_count=event.loop_count,
                    text_response=response.text,
                ),
            )

        if not response.tools or not self._allows(event, StatusItemType.TOOL_SELECTED):
            return
        for call in response.tools:
            # Unresolvable selections come through as None.
            if call is None:
                self._logger.log_record_skipped("unresolved tool selection", run_id=run_id)
                continue
            await self._append(
                run_id,
                ToolSelectedRecord(
                    **envelope,
                    tool_name=call.name or "",
                    tool_input=call.arguments or "",
                    tool_id=call.tool_id or "",
                    tool_feedback_message=self._feedback_for(call.name),
                ),
            )

    async def on_tool_pre_execute(self, event: ToolPreExecuteEvent) -> None:
        if not self._filter.should_track(event):
            return
        if not self._allows(event, StatusItemType.TOOL_STARTED):
            return
        await self._append(
            event.run_id,
            ToolStartedRecord(
                **self._envelope(event, self._clock()),
                tool_name=event.tool.function_name,
                tool_input=self._tool_input(event),
                tool_id=event.tool_id,
                tool_feedback_message=event.progress_message or "",
            ),
        )

    async def on_tool_finished(self, event: ToolFinishedEvent) -> None:
        if not self._filter.should_track(event):
            return
        if not self._allows(event, StatusItemType.TOOL_FINISHED):
            return
        await self._append(
            event.run_id,
            ToolFinishedRecord(
                **self._envelope(event, self._clock()),
                tool_name=event.tool.function_name,
                tool_input=self._tool_input(event),
                tool_id=event.tool_id,
                tool_feedback_message=event.progress_message or "",
                tool_results=event.tool.readable_output or "",
            ),
        )


__all__ = ["StatusSubscriber", "FeedbackLookup"]
