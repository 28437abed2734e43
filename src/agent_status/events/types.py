"""
Domain event types.

These are the lifecycle events the agent execution loop emits. The loop
itself lives outside this package; it only needs to build these dataclasses
and hand them to an EventDispatcher.

Every event carries:
- run_id: the run to trace, or None to run untracked
- caller_id: the runner id of the parent invocation, None for the root agent
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from ..records.types import StatusItemType


# === Collaborator shapes ===


@dataclass
class AgentDefinition:
    """Static agent configuration.

    ``detailed_tracking`` is the allow-list of record types this agent wants
    traced. Empty means every type.
    """
    agent_id: str
    label: str
    detailed_tracking: list[StatusItemType] = field(default_factory=list)

    def __post_init__(self):
        self.detailed_tracking = [StatusItemType.parse(t) for t in self.detailed_tracking]


@dataclass
class RunnerAgent:
    """An agent definition bound to a provider for one execution."""
    definition: AgentDefinition
    provider_name: str = ""
    model_name: str = ""
    model_config: dict[str, Any] = field(default_factory=dict)

    @property
    def agent_id(self) -> str:
        return self.definition.agent_id

    @property
    def label(self) -> str:
        return self.definition.label


@dataclass
class ChatMessage:
    role: str
    text: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"role": self.role, "text": self.text}
        if self.metadata:
            d["metadata"] = dict(self.metadata)
        return d


@dataclass
class ChatInput:
    """The provider input for one loop."""
    messages: list[ChatMessage] = field(default_factory=list)
    system_prompt: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "messages": [m.to_dict() for m in self.messages],
            "system_prompt": self.system_prompt,
        }


@dataclass
class ToolCall:
    """A tool call as selected by the provider; ``arguments`` is raw JSON text."""
    tool_id: str | None
    name: str
    arguments: str = ""


@dataclass
class ProviderResponse:
    """Normalized provider response.

    ``tools`` may contain None entries when a selection could not be resolved.
    """
    text: str | None = None
    tools: list[ToolCall | None] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "tools": [
                {"tool_id": t.tool_id, "name": t.name, "arguments": t.arguments}
                for t in self.tools
                if t is not None
            ],
            "raw": dict(self.raw),
        }


@dataclass
class ToolParameter:
    label: str
    value: Any = None


@dataclass
class ExecutableTool:
    """A tool instance with its current parameter values."""
    function_name: str
    tool_id: str | None = None
    parameters: list[ToolParameter] = field(default_factory=list)
    readable_output: str | None = None

    def input_as_dict(self) -> dict[str, Any]:
        """Parameter label -> current value."""
        return {p.label: p.value for p in self.parameters}


# === Events ===


@dataclass
class AgentStatusEvent:
    """Base for all lifecycle events."""
    EVENT_NAME: ClassVar[str] = "agent_status.event"

    run_id: str | None = field(default=None, kw_only=True)
    caller_id: str | None = field(default=None, kw_only=True)


@dataclass
class AgentStartedEvent(AgentStatusEvent):
    """Emitted at the top of every loop; loop_count 0 is the invocation start."""
    EVENT_NAME: ClassVar[str] = "agent_status.started_execution"

    agent: RunnerAgent
    agent_runner_id: str
    loop_count: int = 0
    chat_history: list[ChatMessage] = field(default_factory=list)

    @property
    def agent_id(self) -> str:
        return self.agent.agent_id


@dataclass
class AgentFinishedEvent(AgentStatusEvent):
    EVENT_NAME: ClassVar[str] = "agent_status.finished_execution"

    agent: RunnerAgent
    agent_runner_id: str
    loop_count: int = 0
    chat_history: list[ChatMessage] = field(default_factory=list)

    @property
    def agent_id(self) -> str:
        return self.agent.agent_id


@dataclass
class AgentRequestEvent(AgentStatusEvent):
    """The loop is about to call the provider."""
    EVENT_NAME: ClassVar[str] = "agent_status.request"

    agent: RunnerAgent
    agent_runner_id: str
    chat_input: ChatInput = field(default_factory=ChatInput)
    system_prompt: str = ""
    instructions: str = ""
    chat_history: list[ChatMessage] = field(default_factory=list)
    loop_count: int = 0

    @property
    def agent_id(self) -> str:
        return self.agent.agent_id


@dataclass
class AgentResponseEvent(AgentStatusEvent):
    """The provider answered."""
    EVENT_NAME: ClassVar[str] = "agent_status.response"

    agent: RunnerAgent
    agent_runner_id: str
    response: ProviderResponse = field(default_factory=ProviderResponse)
    loop_count: int = 0

    @property
    def agent_id(self) -> str:
        return self.agent.agent_id


@dataclass
class AgentToolEvent(AgentStatusEvent):
    """Base for tool execution events."""
    agent: RunnerAgent
    runner_id: str
    tool: ExecutableTool
    progress_message: str | None = ""

    @property
    def agent_id(self) -> str:
        return self.agent.agent_id

    @property
    def agent_runner_id(self) -> str:
        return self.runner_id

    @property
    def tool_id(self) -> str:
        return self.tool.tool_id or ""


@dataclass
class ToolPreExecuteEvent(AgentToolEvent):
    EVENT_NAME: ClassVar[str] = "agent_status.tool_pre_execute"


@dataclass
class ToolFinishedEvent(AgentToolEvent):
    EVENT_NAME: ClassVar[str] = "agent_status.tool_finished_execution"


__all__ = [
    "AgentDefinition",
    "RunnerAgent",
    "ChatMessage",
    "ChatInput",
    "ToolCall",
    "ProviderResponse",
    "ToolParameter",
    "ExecutableTool",
    "AgentStatusEvent",
    "AgentStartedEvent",
    "AgentFinishedEvent",
    "AgentRequestEvent",
    "AgentResponseEvent",
    "AgentToolEvent",
    "ToolPreExecuteEvent",
    "ToolFinishedEvent",
]
