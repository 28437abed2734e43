"""
Base types for configuration.
"""

from __future__ import annotations

from typing import Literal

StorageBackendType = Literal["memory", "session", "redis", "postgres"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["text", "json"]

STORAGE_BACKENDS = ("memory", "session", "redis", "postgres")


__all__ = ["StorageBackendType", "LogLevel", "LogFormat", "STORAGE_BACKENDS"]
