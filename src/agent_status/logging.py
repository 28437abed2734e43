"""
Structured logging for agent-status.

This module provides:
- Structured JSON (or text) logging with consistent fields
- Run correlation (run_id / agent_runner_id) carried in a log context
- Typed helpers for record emission and store operations
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

# =============================================================================
# Log Context
# =============================================================================


@dataclass
class LogContext:
    """Context information attached to log records."""

    run_id: str | None = None
    agent_runner_id: str | None = None
    backend: str | None = None
    operation: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d = {k: v for k, v in asdict(self).items() if v is not None and k != "extra"}
        d.update(self.extra)
        return d

    def with_update(self, **kwargs) -> LogContext:
        """Create a new context with updated values."""
        return LogContext(
            run_id=kwargs.get("run_id", self.run_id),
            agent_runner_id=kwargs.get("agent_runner_id", self.agent_runner_id),
            backend=kwargs.get("backend", self.backend),
            operation=kwargs.get("operation", self.operation),
            extra={**self.extra, **kwargs.get("extra", {})},
        )


# =============================================================================
# Structured Logger
# =============================================================================


class StructuredLogger:
    """
    Logger with structured JSON output and run correlation.

    Example:
        ```python
        logger = StructuredLogger("agent_status")

        with logger.run_context("run-123", agent_runner_id="runner-1"):
            logger.log_record_appended("run-123", record)
        ```
    """

    def __init__(
        self,
        name: str = "agent_status",
        level: str = "INFO",
        json_output: bool = True,
        log_records: bool = True,
        log_skipped: bool = False,
    ):
        self.name = name
        self.json_output = json_output
        self.log_records = log_records
        self.log_skipped = log_skipped

        self._logger = logging.getLogger(name)
        self._logger.setLevel(getattr(logging, level.upper()))

        self._context: LogContext = LogContext()

        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            if json_output:
                handler.setFormatter(JSONFormatter())
            else:
                handler.setFormatter(TextFormatter())
            self._logger.addHandler(handler)

    @property
    def context(self) -> LogContext:
        return self._context

    def set_context(self, **kwargs) -> None:
        """Update the current log context."""
        self._context = self._context.with_update(**kwargs)

    @contextmanager
    def run_context(self, run_id: str | None, **kwargs) -> Iterator[LogContext]:
        """Scope log records to one run."""
        old_context = self._context
        try:
            self._context = old_context.with_update(run_id=run_id, **kwargs)
            yield self._context
        finally:
            self._context = old_context

    def _log(
        self,
        level: int,
        message: str,
        event_type: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        record_data = {
            "message": message,
            **self._context.to_dict(),
        }

        if event_type:
            record_data["event_type"] = event_type

        if data:
            record_data.update(data)

        if self.json_output:
            self._logger.log(level, json.dumps(record_data, default=str))
        else:
            extras = " ".join(f"{k}={v}" for k, v in record_data.items() if k != "message")
            self._logger.log(level, f"{message} {extras}".rstrip())

    def debug(self, message: str, **kwargs) -> None:
        self._log(logging.DEBUG, message, data=kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log(logging.INFO, message, data=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log(logging.WARNING, message, data=kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log(logging.ERROR, message, data=kwargs)

    # Typed logging methods

    def log_run_started(self, run_id: str, backend: str | None = None) -> None:
        self._log(
            logging.INFO,
            f"Status update started for run {run_id}",
            event_type="run_started",
            data={"run_id": run_id, "backend": backend},
        )

    def log_record_appended(self, run_id: str, record: Any) -> None:
        """Log a record that made it into a run's status update."""
        if not self.log_records or not self._logger.isEnabledFor(logging.DEBUG):
            return
        self._log(
            logging.DEBUG,
            f"Appended {record.TYPE.value} to run {run_id}",
            event_type="record_appended",
            data={
                "run_id": run_id,
                "record_type": record.TYPE.value,
                "agent_runner_id": record.agent_runner_id,
                "calling_agent_id": record.calling_agent_id,
            },
        )

    def log_record_skipped(self, reason: str, **kwargs) -> None:
        if not self.log_skipped or not self._logger.isEnabledFor(logging.DEBUG):
            return
        self._log(
            logging.DEBUG,
            f"Record skipped: {reason}",
            event_type="record_skipped",
            data={"reason": reason, **kwargs},
        )

    def log_run_deleted(self, run_id: str) -> None:
        self._log(
            logging.INFO,
            f"Status update deleted for run {run_id}",
            event_type="run_deleted",
            data={"run_id": run_id},
        )

    def log_error(
        self,
        error: Exception,
        message: str | None = None,
        level: int = logging.ERROR,
        **kwargs,
    ) -> None:
        """Log an error with context."""
        error_data = {
            "error_type": type(error).__name__,
            "error_message": str(error),
            **kwargs,
        }

        if hasattr(error, "code"):
            error_data["error_code"] = str(error.code.value)
        if hasattr(error, "retryable"):
            error_data["retryable"] = error.retryable
        if hasattr(error, "context") and error.context:
            error_data["error_context"] = error.context.to_dict()

        self._log(
            level,
            message or f"Error: {error}",
            event_type="error",
            data=error_data,
        )


# =============================================================================
# Formatters
# =============================================================================


class JSONFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }

        try:
            message_data = json.loads(record.getMessage())
            if isinstance(message_data, dict):
                log_data.update(message_data)
            else:
                log_data["message"] = record.getMessage()
        except (json.JSONDecodeError, TypeError):
            log_data["message"] = record.getMessage()

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%H:%M:%S.%f")[:-3]
        color = self.LEVEL_COLORS.get(record.levelname, "")
        reset = self.RESET if color else ""

        return f"{timestamp} {color}{record.levelname:8}{reset} {record.getMessage()}"


# =============================================================================
# Utilities
# =============================================================================


def truncate_for_log(text: str, max_length: int = 200) -> str:
    """Truncate text for logging."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + f"... ({len(text)} chars total)"


# =============================================================================
# Global Logger
# =============================================================================

_default_logger: StructuredLogger | None = None


def get_logger(name: str | None = None) -> StructuredLogger:
    """Get the default structured logger, or create one for ``name``."""
    global _default_logger
    if name is None:
        if _default_logger is None:
            _default_logger = StructuredLogger()
        return _default_logger
    if _default_logger is None or _default_logger.name != name:
        _default_logger = StructuredLogger(name)
    return _default_logger


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    **kwargs: Any,
) -> StructuredLogger:
    """Configure the default logger."""
    global _default_logger
    _default_logger = StructuredLogger(
        level=level,
        json_output=json_output,
        **kwargs,
    )
    return _default_logger


__all__ = [
    "LogContext",
    "StructuredLogger",
    "JSONFormatter",
    "TextFormatter",
    "truncate_for_log",
    "get_logger",
    "configure_logging",
]
