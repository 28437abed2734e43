"""
Status records.

This module provides the closed set of status record types, the factory that
rebuilds them from their wire form, and the StatusUpdate aggregate.
"""

from .types import (
    StatusItemType,
    StatusRecord,
    RECORD_TYPES,
    register_record,
    AgentStartedRecord,
    AgentFinishedRecord,
    AgentIterationRecord,
    AgentRequestRecord,
    AgentResponseRecord,
    AgentChatHistoryRecord,
    SystemMessageRecord,
    ProviderRequestRecord,
    ProviderResponseRecord,
    TextGeneratedRecord,
    ToolSelectedRecord,
    ToolStartedRecord,
    ToolFinishedRecord,
)
from .factory import record_from_dict, record_from_json
from .update import StatusUpdate

__all__ = [
    # Types
    "StatusItemType",
    "StatusRecord",
    "RECORD_TYPES",
    "register_record",
    # Variants
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
    # Factory
    "record_from_dict",
    "record_from_json",
    # Aggregate
    "StatusUpdate",
]
