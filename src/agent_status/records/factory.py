"""
Record factory.

Rebuilds a concrete status record from its wire form. Dispatch happens on the
``type`` key only; an unknown tag is an error, never a fallback variant.
"""

from __future__ import annotations

import json
from typing import Any

from ..errors import ErrorContext, RecordDecodeError, UnrecognizedRecordTypeError
from .types import RECORD_TYPES, StatusItemType, StatusRecord


def record_from_dict(data: dict[str, Any]) -> StatusRecord:
    """Create a status record from its flat wire mapping.

    Raises:
        UnrecognizedRecordTypeError: If ``type`` is missing or unknown
        RecordDecodeError: If the tag is known but a field is missing or invalid
    """
    if not isinstance(data, dict):
        raise RecordDecodeError(f"Status record must be a mapping, got {type(data).__name__}")

    tag = data.get("type")
    try:
        item_type = StatusItemType(tag)
    except ValueError:
        raise UnrecognizedRecordTypeError(tag) from None

    cls = RECORD_TYPES[item_type]
    try:
        return cls.from_dict(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise RecordDecodeError(
            f"Invalid {item_type.value} record: {exc}",
            context=ErrorContext(record_type=item_type.value),
            cause=exc,
        ) from exc


def record_from_json(text: str | bytes) -> StatusRecord:
    """Create a status record from JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RecordDecodeError(f"Status record is not valid JSON: {exc}", cause=exc) from exc
    return record_from_dict(data)


__all__ = [
    "record_from_dict",
    "record_from_json",
]
