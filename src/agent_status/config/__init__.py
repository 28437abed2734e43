"""
Configuration system for agent-status.

This package provides typed configuration classes with:
- Dataclass-based settings with validation
- Environment variable loading (with `.env` support)
- YAML/TOML file loading validated against a JSON schema
"""

from .base import LogFormat, LogLevel, StorageBackendType
from .logging import LoggingConfig
from .storage import StorageConfig, TrackingConfig
from .settings import Settings, configure, get_settings, load_env, reset_settings

__all__ = [
    # Types
    "StorageBackendType",
    "LogLevel",
    "LogFormat",
    # Section configs
    "StorageConfig",
    "TrackingConfig",
    "LoggingConfig",
    # Master config
    "Settings",
    # Global functions
    "get_settings",
    "configure",
    "reset_settings",
    "load_env",
]
