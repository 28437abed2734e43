"""
Execution-status tracing for multi-agent runs.

Agent lifecycle events are turned into an ordered, per-run trace of typed
status records that a UI poller or log sink can read incrementally and
discard when done.

Example:
    ```python
    from agent_status import (
        EventDispatcher, InMemoryRunStore, StatusPoller, StatusSubscriber,
    )

    store = InMemoryRunStore()
    dispatcher = EventDispatcher()
    dispatcher.add_subscriber(StatusSubscriber(store))

    # The agent loop dispatches lifecycle events...
    await dispatcher.dispatch(AgentStartedEvent(agent, "runner-1", run_id="run-1"))

    # ...and the UI polls.
    update = await StatusPoller(store).get_latest("run-1")
    ```

The HTTP surface lives in ``agent_status.api``.
"""

from .artifacts import ArtifactStore, InMemoryArtifactStore
from .config import (
    LoggingConfig,
    Settings,
    StorageConfig,
    TrackingConfig,
    configure,
    get_settings,
    load_env,
    reset_settings,
)
from .errors import (
    AgentStatusError,
    BackendUnavailableError,
    ConfigError,
    ErrorCode,
    ErrorContext,
    RecordDecodeError,
    RecordError,
    RunNotStartedError,
    StorageError,
    UnrecognizedRecordTypeError,
    is_retryable,
)
from .events import (
    AgentDefinition,
    AgentFinishedEvent,
    AgentRequestEvent,
    AgentResponseEvent,
    AgentStartedEvent,
    AgentStatusEvent,
    ChatInput,
    ChatMessage,
    EventDispatcher,
    ExecutableTool,
    ProviderResponse,
    RunnerAgent,
    ToolCall,
    ToolFinishedEvent,
    ToolParameter,
    ToolPreExecuteEvent,
)
from .filter import EmissionFilter
from .logging import StructuredLogger, configure_logging, get_logger
from .poller import StatusPoller
from .records import (
    RECORD_TYPES,
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
    StatusUpdate,
    SystemMessageRecord,
    TextGeneratedRecord,
    ToolFinishedRecord,
    ToolSelectedRecord,
    ToolStartedRecord,
    record_from_dict,
    record_from_json,
)
from .storage import (
    InMemoryRunStore,
    InMemorySession,
    RunStore,
    SessionRunStore,
    create_run_store,
)
from .subscriber import StatusSubscriber

__version__ = "0.1.0"

__all__ = [
    # Records
    "StatusItemType",
    "StatusRecord",
    "RECORD_TYPES",
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
    "record_from_dict",
    "record_from_json",
    "StatusUpdate",
    # Events
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
    "ToolPreExecuteEvent",
    "ToolFinishedEvent",
    "EventDispatcher",
    # Pipeline
    "EmissionFilter",
    "StatusSubscriber",
    "StatusPoller",
    # Storage
    "RunStore",
    "InMemoryRunStore",
    "InMemorySession",
    "SessionRunStore",
    "create_run_store",
    # Artifacts
    "ArtifactStore",
    "InMemoryArtifactStore",
    # Errors
    "ErrorCode",
    "ErrorContext",
    "AgentStatusError",
    "RunNotStartedError",
    "RecordError",
    "UnrecognizedRecordTypeError",
    "RecordDecodeError",
    "StorageError",
    "BackendUnavailableError",
    "ConfigError",
    "is_retryable",
    # Config
    "Settings",
    "StorageConfig",
    "LoggingConfig",
    "TrackingConfig",
    "get_settings",
    "configure",
    "reset_settings",
    "load_env",
    # Logging
    "StructuredLogger",
    "get_logger",
    "configure_logging",
]
