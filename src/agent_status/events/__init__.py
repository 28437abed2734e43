"""
Lifecycle events for agent-status.

This module provides the domain events the agent loop emits and the
dispatcher that delivers them to the status subscriber.
"""

from .types import (
    AgentDefinition,
    RunnerAgent,
    ChatMessage,
    ChatInput,
    ToolCall,
    ProviderResponse,
    ToolParameter,
    ExecutableTool,
    AgentStatusEvent,
    AgentStartedEvent,
    AgentFinishedEvent,
    AgentRequestEvent,
    AgentResponseEvent,
    AgentToolEvent,
    ToolPreExecuteEvent,
    ToolFinishedEvent,
)
from .dispatcher import EventDispatcher, EventSubscriber

__all__ = [
    # Collaborators
    "AgentDefinition",
    "RunnerAgent",
    "ChatMessage",
    "ChatInput",
    "ToolCall",
    "ProviderResponse",
    "ToolParameter",
    "ExecutableTool",
    # Events
    "AgentStatusEvent",
    "AgentStartedEvent",
    "AgentFinishedEvent",
    "AgentRequestEvent",
    "AgentResponseEvent",
    "AgentToolEvent",
    "ToolPreExecuteEvent",
    "ToolFinishedEvent",
    # Dispatch
    "EventDispatcher",
    "EventSubscriber",
]
