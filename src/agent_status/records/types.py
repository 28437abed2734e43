"""
Status record types.

This module defines the StatusItemType enum and the closed set of status
records that make up a run's trace. Every record shares one envelope:

- time: fractional seconds since epoch, stamped by the producer
- agent_id / agent_name: the static agent definition
- agent_runner_id: the invocation that produced the record
- calling_agent_id: the parent invocation, or None for the root agent

Records are frozen and serialize to a single flat mapping with the
discriminant stored under the reserved ``type`` key. They compare by value
but are not hashable.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, TypeVar


class StatusItemType(str, Enum):
    """Discriminant tags for status records."""

    # Agent lifecycle
    STARTED = "agent_started"
    FINISHED = "agent_finished"
    ITERATION = "agent_iteration"
    RESPONSE = "agent_response"
    REQUEST = "agent_request"
    CHAT_HISTORY = "agent_chat_history"

    # Provider traffic
    PROVIDER_REQUEST = "ai_provider_request"
    PROVIDER_RESPONSE = "ai_provider_response"

    # Output
    TEXT_GENERATED = "text_generated"
    SYSTEM_MESSAGE = "system_message"

    # Tools
    TOOL_SELECTED = "tool_selected"
    TOOL_STARTED = "tool_started"
    TOOL_FINISHED = "tool_finished"

    @property
    def title(self) -> str:
        """Human readable label, used by UIs rendering a trace."""
        return _TITLES[self]

    @classmethod
    def parse(cls, value: StatusItemType | str) -> StatusItemType:
        """Accept either a member or its tag string."""
        if isinstance(value, cls):
            return value
        return cls(value)


_TITLES: dict[StatusItemType, str] = {
    StatusItemType.STARTED: "Agent Started",
    StatusItemType.FINISHED: "Agent Finished",
    StatusItemType.ITERATION: "Agent Iterated",
    StatusItemType.RESPONSE: "Agent Responded",
    StatusItemType.REQUEST: "Agent Requested",
    StatusItemType.CHAT_HISTORY: "Agent Chat History",
    StatusItemType.PROVIDER_REQUEST: "AI Provider Request",
    StatusItemType.PROVIDER_RESPONSE: "AI Provider Response",
    StatusItemType.TEXT_GENERATED: "Text Generated",
    StatusItemType.SYSTEM_MESSAGE: "System Message",
    StatusItemType.TOOL_SELECTED: "Tool Selected",
    StatusItemType.TOOL_STARTED: "Tool Started",
    StatusItemType.TOOL_FINISHED: "Tool Finished",
}


# Registry used by the record factory: one class per tag.
RECORD_TYPES: dict[StatusItemType, type[StatusRecord]] = {}

R = TypeVar("R", bound="StatusRecord")


def register_record(cls: type[R]) -> type[R]:
    """Class decorator adding a record class to RECORD_TYPES.

    Apply it on top of ``@dataclass``: payloads hold JSON documents (lists,
    dicts), so records compare by value but are never hashable.
    """
    if cls.TYPE in RECORD_TYPES:
        raise ValueError(f"Record type {cls.TYPE.value!r} is already registered")
    cls.__hash__ = None  # type: ignore[assignment]
    RECORD_TYPES[cls.TYPE] = cls
    return cls


@dataclass(frozen=True, kw_only=True)
class StatusRecord:
    """Envelope shared by every status record."""

    TYPE: ClassVar[StatusItemType]

    time: float
    agent_id: str
    agent_name: str
    agent_runner_id: str
    calling_agent_id: str | None = None

    @property
    def type(self) -> StatusItemType:
        return self.TYPE

    def _payload(self) -> dict[str, Any]:
        """Variant-specific fields, flattened next to the envelope."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the flat wire mapping."""
        return {
            "agent_id": self.agent_id,
            "agent_name": self.agent_name,
            "agent_runner_id": self.agent_runner_id,
            "type": self.TYPE.value,
            "time": self.time,
            "calling_agent_id": self.calling_agent_id,
            **self._payload(),
        }

    @staticmethod
    def _envelope(data: dict[str, Any]) -> dict[str, Any]:
        return {
            "time": float(data["time"]),
            "agent_id": data["agent_id"],
            "agent_name": data["agent_name"],
            "agent_runner_id": data["agent_runner_id"],
            "calling_agent_id": data.get("calling_agent_id"),
        }

    @classmethod
    def from_dict(cls: type[R], data: dict[str, Any]) -> R:
        """Deserialize from the flat wire mapping."""
        return cls(**cls._envelope(data))

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls: type[R], text: str) -> R:
        return cls.from_dict(json.loads(text))


# =============================================================================
# Agent lifecycle records
# =============================================================================


@register_record
@dataclass(frozen=True, kw_only=True)
class AgentStartedRecord(StatusRecord):
    """An agent invocation began (loop 0)."""

    TYPE: ClassVar[StatusItemType] = StatusItemType.STARTED


@register_record
@dataclass(frozen=True, kw_only=True)
class AgentFinishedRecord(StatusRecord):
    """An agent invocation finished."""

    TYPE: ClassVar[StatusItemType] = StatusItemType.FINISHED


@register_record
@dataclass(frozen=True, kw_only=True)
class AgentIterationRecord(StatusRecord):
    """The agent loop entered iteration ``loop_count``."""

    TYPE: ClassVar[StatusItemType] = StatusItemType.ITERATION

    loop_count: int

    def _payload(self) -> dict[str, Any]:
        return {"loop_count": self.loop_count}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AgentIterationRecord:
        return cls(**cls._envelope(data), loop_count=int(data["loop_count"]))


@register_record
@dataclass(frozen=True, kw_only=True)
class AgentRequestRecord(StatusRecord):
    """The agent assembled a request, with the instructions it was given."""

    TYPE: ClassVar[StatusItemType] = StatusItemType.REQUEST

    loop_count: int
    instructions: str = ""

    def _payload(self) -> dict[str, Any]:
        return {"loop_count": self.loop_count, "instructions": self.instructions}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AgentRequestRecord:
        return cls(
            **cls._envelope(data),
            loop_count=int(data["loop_count"]),
            instructions=data.get("instructions") or "",
        )


@register_record
@dataclass(frozen=True, kw_only=True)
class AgentResponseRecord(StatusRecord):
    """The agent received a response; ``text_response`` is None for tool-only turns."""

    TYPE: ClassVar[StatusItemType] = StatusItemType.RESPONSE

    loop_count: int
    text_response: str | None = None

    def _payload(self) -> dict[str, Any]:
        return {"loop_count": self.loop_count, "text_response": self.text_response}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AgentResponseRecord:
        return cls(
            **cls._envelope(data),
            loop_count=int(data["loop_count"]),
            text_response=data.get("text_response"),
        )


@register_record
@dataclass(frozen=True, kw_only=True)
class AgentChatHistoryRecord(StatusRecord):
    """Full chat history sent with a request. Can be large."""

    TYPE: ClassVar[StatusItemType] = StatusItemType.CHAT_HISTORY

    loop_count: int
    chat_history: list[dict[str, Any]] = field(default_factory=list)

    def _payload(self) -> dict[str, Any]:
        return {"loop_count": self.loop_count, "chat_history": list(self.chat_history)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AgentChatHistoryRecord:
        return cls(
            **cls._envelope(data),
            loop_count=int(data["loop_count"]),
            chat_history=list(data.get("chat_history") or []),
        )


@register_record
@dataclass(frozen=True, kw_only=True)
class SystemMessageRecord(StatusRecord):
    TYPE: ClassVar[StatusItemType] = StatusItemType.SYSTEM_MESSAGE

    loop_count: int
    system_prompt: str = ""

    def _payload(self) -> dict[str, Any]:
        return {"loop_count": self.loop_count, "system_prompt": self.system_prompt}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SystemMessageRecord:
        return cls(
            **cls._envelope(data),
            loop_count=int(data["loop_count"]),
            system_prompt=data.get("system_prompt") or "",
        )


# =============================================================================
# Provider records
# =============================================================================


@register_record
@dataclass(frozen=True, kw_only=True)
class ProviderRequestRecord(StatusRecord):
    """Payload handed to the AI provider, with provider/model identity."""

    TYPE: ClassVar[StatusItemType] = StatusItemType.PROVIDER_REQUEST

    loop_count: int
    request_data: dict[str, Any] = field(default_factory=dict)
    provider_name: str = ""
    model_name: str = ""
    config: dict[str, Any] = field(default_factory=dict)

    def _payload(self) -> dict[str, Any]:
        return {
            "loop_count": self.loop_count,
            "request_data": dict(self.request_data),
            "provider_name": self.provider_name,
            "model_name": self.model_name,
            "config": dict(self.config),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProviderRequestRecord:
        return cls(
            **cls._envelope(data),
            loop_count=int(data["loop_count"]),
            request_data=dict(data.get("request_data") or {}),
            provider_name=data.get("provider_name") or "",
            model_name=data.get("model_name") or "",
            config=dict(data.get("config") or {}),
        )


@register_record
@dataclass(frozen=True, kw_only=True)
class ProviderResponseRecord(StatusRecord):
    TYPE: ClassVar[StatusItemType] = StatusItemType.PROVIDER_RESPONSE

    loop_count: int
    response_data: dict[str, Any] = field(default_factory=dict)

    def _payload(self) -> dict[str, Any]:
        return {"loop_count": self.loop_count, "response_data": dict(self.response_data)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProviderResponseRecord:
        return cls(
            **cls._envelope(data),
            loop_count=int(data["loop_count"]),
            response_data=dict(data.get("response_data") or {}),
        )


@register_record
@dataclass(frozen=True, kw_only=True)
class TextGeneratedRecord(StatusRecord):
    """Text the provider generated during ``loop_count``."""

    TYPE: ClassVar[StatusItemType] = StatusItemType.TEXT_GENERATED

    loop_count: int
    text_response: str = ""

    def _payload(self) -> dict[str, Any]:
        return {"loop_count": self.loop_count, "text_response": self.text_response}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TextGeneratedRecord:
        return cls(
            **cls._envelope(data),
            loop_count=int(data["loop_count"]),
            text_response=data.get("text_response") or "",
        )


# =============================================================================
# Tool records
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class _ToolRecord(StatusRecord):
    """Shared shape of tool records. Not registered on its own."""

    tool_name: str
    tool_input: str
    tool_id: str = ""
    tool_feedback_message: str = ""

    def _payload(self) -> dict[str, Any]:
        return {
            "tool_name": self.tool_name,
            "tool_input": self.tool_input,
            "tool_id": self.tool_id,
            "tool_feedback_message": self.tool_feedback_message,
        }

    @classmethod
    def _tool_fields(cls, data: dict[str, Any]) -> dict[str, Any]:
        return {
            "tool_name": data["tool_name"],
            "tool_input": data["tool_input"],
            "tool_id": data.get("tool_id") or "",
            "tool_feedback_message": data.get("tool_feedback_message") or "",
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        return cls(**cls._envelope(data), **cls._tool_fields(data))


@register_record
@dataclass(frozen=True, kw_only=True)
class ToolSelectedRecord(_ToolRecord):
    """The provider asked for a tool call; ``tool_input`` is its raw argument JSON."""

    TYPE: ClassVar[StatusItemType] = StatusItemType.TOOL_SELECTED


@register_record
@dataclass(frozen=True, kw_only=True)
class ToolStartedRecord(_ToolRecord):
    """A tool is about to execute."""

    TYPE: ClassVar[StatusItemType] = StatusItemType.TOOL_STARTED


@register_record
@dataclass(frozen=True, kw_only=True)
class ToolFinishedRecord(_ToolRecord):
    """A tool finished; ``tool_results`` is its readable output."""

    TYPE: ClassVar[StatusItemType] = StatusItemType.TOOL_FINISHED

    tool_results: str = ""

    def _payload(self) -> dict[str, Any]:
        return {**super()._payload(), "tool_results": self.tool_results}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolFinishedRecord:
        return cls(
            **cls._envelope(data),
            **cls._tool_fields(data),
            tool_results=data.get("tool_results") or "",
        )


__all__ = [
    "StatusItemType",
    "StatusRecord",
    "RECORD_TYPES",
    "register_record",
    "AgentStartedRecord",
    "AgentFinishedRecord",
    "AgentIterationRecord",
    "AgentRequestRecord",
    "AgentResponseRecord",
    "AgentChatHistoryRecord",
    "SystemMessageRecord",
    "ProviderRequestRecord",
    "ProviderResponseRecord",
    "TextGeneratedRecord",
    "ToolSelectedRecord",
    "ToolStartedRecord",
    "ToolFinishedRecord",
]
