"""
Error taxonomy for agent-status.

This module provides a small hierarchical exception system with:
- Error codes for programmatic handling
- Retryable vs non-retryable classification
- Structured context for debugging (run id, runner id, backend)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for the status pipeline."""

    # Run lifecycle errors (1xxx)
    RUN_ERROR = "AS_1000"
    RUN_NOT_STARTED = "AS_1001"

    # Record errors (2xxx)
    RECORD_ERROR = "AS_2000"
    UNRECOGNIZED_RECORD_TYPE = "AS_2001"
    RECORD_DECODE_ERROR = "AS_2002"

    # Storage errors (3xxx)
    STORAGE_ERROR = "AS_3000"
    BACKEND_UNAVAILABLE = "AS_3001"

    # Configuration errors (6xxx)
    CONFIG_ERROR = "AS_6000"

    # Internal errors (9xxx)
    INTERNAL_ERROR = "AS_9000"


@dataclass
class ErrorContext:
    """Structured context for error debugging."""

    run_id: str | None = None
    agent_runner_id: str | None = None
    record_type: str | None = None
    backend: str | None = None
    operation: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "agent_runner_id": self.agent_runner_id,
            "record_type": self.record_type,
            "backend": self.backend,
            "operation": self.operation,
            **self.extra,
        }


class AgentStatusError(Exception):
    """
    Base exception for all agent-status errors.

    Attributes:
        code: Standardized error code for programmatic handling
        message: Human-readable error message
        retryable: Whether the operation can be retried
        context: Structured debugging context
        cause: Original exception that caused this error
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if retryable is not None:
            self.retryable = retryable
        self.context = context or ErrorContext()
        self.cause = cause

    def __str__(self) -> str:
        parts = [f"[{self.code.value}] {self.message}"]
        if self.context.run_id:
            parts.append(f"(run_id={self.context.run_id})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code.value,
            "message": self.message,
            "retryable": self.retryable,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


# =============================================================================
# Run Errors
# =============================================================================


class RunNotStartedError(AgentStatusError):
    """A record was appended to a run whose status update was never started.

    This is an ordering error in the producer; it is never retried.
    """

    code = ErrorCode.RUN_NOT_STARTED
    retryable = False

    def __init__(
        self,
        run_id: str,
        message: str | None = None,
        **kwargs,
    ):
        context = kwargs.pop("context", None) or ErrorContext(run_id=run_id)
        super().__init__(
            message or f"Status update for run '{run_id}' has not been started",
            context=context,
            **kwargs,
        )
        self.run_id = run_id


# =============================================================================
# Record Errors
# =============================================================================


class RecordError(AgentStatusError):
    """Base class for record (de)serialization errors."""

    code = ErrorCode.RECORD_ERROR
    retryable = False


class UnrecognizedRecordTypeError(RecordError):
    """The wire form carries a type tag that is not a known record kind."""

    code = ErrorCode.UNRECOGNIZED_RECORD_TYPE

    def __init__(self, record_type: Any, **kwargs):
        super().__init__(
            f"Unknown status item type: {record_type!r}",
            context=ErrorContext(record_type=str(record_type)),
            **kwargs,
        )
        self.record_type = record_type


class RecordDecodeError(RecordError):
    """The wire form has a known tag but is missing or mangling a field."""

    code = ErrorCode.RECORD_DECODE_ERROR


# =============================================================================
# Storage Errors
# =============================================================================


class StorageError(AgentStatusError):
    """Base class for run store errors."""

    code = ErrorCode.STORAGE_ERROR
    retryable = False


class BackendUnavailableError(StorageError):
    """The context the backend requires (session, connection) is missing."""

    code = ErrorCode.BACKEND_UNAVAILABLE
    retryable = True

    def __init__(
        self,
        message: str = "Status storage backend is unavailable",
        *,
        backend: str | None = None,
        operation: str | None = None,
        run_id: str | None = None,
        **kwargs,
    ):
        kwargs.setdefault(
            "context",
            ErrorContext(run_id=run_id, backend=backend, operation=operation),
        )
        super().__init__(message, **kwargs)
        self.backend = backend


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(AgentStatusError, ValueError):
    """Invalid settings."""

    code = ErrorCode.CONFIG_ERROR
    retryable = False


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable by the caller."""
    if isinstance(error, AgentStatusError):
        return error.retryable
    return False


__all__ = [
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
]
