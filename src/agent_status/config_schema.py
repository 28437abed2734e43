"""
JSON schemas for configuration validation.
"""

from .records.types import StatusItemType

STORAGE_SCHEMA = {
    "type": "object",
    "properties": {
        "backend": {"type": "string", "enum": ["memory", "session", "redis", "postgres"]},
        "key_prefix": {"type": "string", "minLength": 1},
        "ttl_seconds": {"type": ["integer", "null"], "minimum": 1},
        "redis_url": {"type": "string"},
        "pg_dsn": {"type": "string"},
        "table_name": {"type": "string", "pattern": "^[a-zA-Z0-9_]+$"},
    },
    "additionalProperties": False,
}

LOGGING_SCHEMA = {
    "type": "object",
    "properties": {
        "level": {"type": "string", "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]},
        "format": {"type": "string", "enum": ["text", "json"]},
        "logger_name": {"type": "string"},
        "log_records": {"type": "boolean"},
        "log_skipped": {"type": "boolean"},
    },
    "additionalProperties": False,
}

TRACKING_SCHEMA = {
    "type": "object",
    "properties": {
        "default_types": {
            "type": "array",
            "items": {"type": "string", "enum": [t.value for t in StatusItemType]},
            "uniqueItems": True,
        },
    },
    "additionalProperties": False,
}

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "storage": STORAGE_SCHEMA,
        "logging": LOGGING_SCHEMA,
        "tracking": TRACKING_SCHEMA,
    },
    "additionalProperties": True,
}

__all__ = ["CONFIG_SCHEMA", "STORAGE_SCHEMA", "LOGGING_SCHEMA", "TRACKING_SCHEMA"]
