"""
Settings master configuration and global helpers.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
from dotenv import find_dotenv, load_dotenv

from ..config_schema import CONFIG_SCHEMA
from ..errors import ConfigError
from .logging import LoggingConfig
from .storage import StorageConfig, TrackingConfig


@dataclass
class Settings:
    """
    Master configuration for agent-status.

    This aggregates all configuration sections into a single object
    that can be loaded from environment variables, files, or constructed
    programmatically.
    """

    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)

    @classmethod
    def from_env(cls, prefix: str = "AGENT_STATUS_") -> Settings:
        """
        Load settings from environment variables.

        Example:
            AGENT_STATUS_STORAGE_BACKEND=redis
            AGENT_STATUS_REDIS_URL=redis://cache:6379/1
            AGENT_STATUS_TRACKING_TYPES=agent_started,agent_finished
        """
        storage: dict[str, Any] = {}
        if backend := os.getenv(f"{prefix}STORAGE_BACKEND"):
            storage["backend"] = backend.lower()
        if key_prefix := os.getenv(f"{prefix}KEY_PREFIX"):
            storage["key_prefix"] = key_prefix
        if ttl := os.getenv(f"{prefix}TTL_SECONDS"):
            storage["ttl_seconds"] = None if ttl.lower() in ("", "none", "0") else int(ttl)
        if redis_url := os.getenv(f"{prefix}REDIS_URL"):
            storage["redis_url"] = redis_url
        if pg_dsn := os.getenv(f"{prefix}PG_DSN"):
            storage["pg_dsn"] = pg_dsn
        if table := os.getenv(f"{prefix}TABLE_NAME"):
            storage["table_name"] = table

        logging_cfg: dict[str, Any] = {}
        if level := os.getenv(f"{prefix}LOG_LEVEL"):
            logging_cfg["level"] = level.upper()
        if log_format := os.getenv(f"{prefix}LOG_FORMAT"):
            logging_cfg["format"] = log_format.lower()

        tracking: dict[str, Any] = {}
        if types := os.getenv(f"{prefix}TRACKING_TYPES"):
            tracking["default_types"] = [t.strip() for t in types.split(",") if t.strip()]

        return cls(
            storage=StorageConfig(**storage),
            logging=LoggingConfig(**logging_cfg),
            tracking=TrackingConfig(**tracking),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> Settings:
        """
        Load settings from a YAML or TOML file.

        Args:
            path: Path to configuration file (.yaml, .yml, or .toml)
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        suffix = path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            import yaml

            with open(path) as f:
                data = yaml.safe_load(f) or {}
        elif suffix == ".toml":
            try:
                import tomllib
            except ImportError:
                import tomli as tomllib
            with open(path, "rb") as f:
                data = tomllib.load(f)
        else:
            raise ConfigError(f"Unsupported config file format: {suffix}")

        return cls._from_dict(data)

    @classmethod
    def default(cls) -> Settings:
        return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Settings:
        """
        Create Settings from a dictionary.

        The dictionary is validated against the configuration schema first.
        """
        try:
            jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            raise ConfigError(f"Configuration validation failed: {e.message}", cause=e) from e

        return cls(
            storage=StorageConfig(**data.get("storage", {})),
            logging=LoggingConfig(**data.get("logging", {})),
            tracking=TrackingConfig(**data.get("tracking", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary."""

        def convert(obj):
            if dataclasses.is_dataclass(obj):
                return {f.name: convert(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
            if isinstance(obj, list):
                return [convert(v) for v in obj]
            if isinstance(obj, Path):
                return str(obj)
            if hasattr(obj, "value"):
                return obj.value
            return obj

        return convert(self)


# =============================================================================
# Global Settings & Helpers
# =============================================================================

_global_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance, loading `.env` and the environment on first use."""
    global _global_settings
    if _global_settings is None:
        load_env()
        _global_settings = Settings.from_env()
    return _global_settings


def configure(settings: Settings | None = None, **kwargs) -> Settings:
    """
    Configure global settings.

    Args:
        settings: Settings object to use globally
        **kwargs: Override specific sections (storage=..., logging=..., tracking=...)
    """
    global _global_settings

    if settings is not None:
        _global_settings = settings
    elif _global_settings is None:
        _global_settings = Settings.from_env()

    for key, value in kwargs.items():
        if hasattr(_global_settings, key):
            setattr(_global_settings, key, value)

    return _global_settings


def reset_settings() -> None:
    """Drop the global settings instance (used by tests)."""
    global _global_settings
    _global_settings = None


def load_env(path: str | None = None, *, override: bool = False) -> bool:
    """
    Load environment variables from a .env file.

    Returns:
        True if a .env file was found and loaded, False otherwise.
    """
    env_path = path or find_dotenv(usecwd=True)
    if not env_path:
        return False
    return load_dotenv(env_path, override=override)


__all__ = ["Settings", "get_settings", "configure", "reset_settings", "load_env"]
