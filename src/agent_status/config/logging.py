"""
Logging configuration.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import ConfigError
from ..logging import StructuredLogger, configure_logging
from .base import LogFormat, LogLevel


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: LogLevel = "INFO"
    format: LogFormat = "json"
    logger_name: str = "agent_status"

    # What to log
    log_records: bool = True
    log_skipped: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if self.level not in valid_levels:
            raise ConfigError(f"Invalid log level: {self.level}. Must be one of {valid_levels}")
        valid_formats = ("text", "json")
        if self.format not in valid_formats:
            raise ConfigError(f"Invalid log format: {self.format}. Must be one of {valid_formats}")

    def apply(self) -> StructuredLogger:
        """Install a default logger built from this configuration."""
        return configure_logging(
            level=self.level,
            json_output=self.format == "json",
            name=self.logger_name,
            log_records=self.log_records,
            log_skipped=self.log_skipped,
        )


__all__ = ["LoggingConfig"]
