"""
StatusUpdate aggregate.

A StatusUpdate is the ordered trace of one run. Items keep insertion order;
they are never re-sorted by ``time`` because concurrent producers do not share
a clock. Wire form: ``{"items": [<record>, ...]}``.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from ..errors import RecordDecodeError
from .factory import record_from_dict
from .types import StatusItemType, StatusRecord


@dataclass
class StatusUpdate:
    """Ordered sequence of status records owned by one run."""

    items: list[StatusRecord] = field(default_factory=list)

    def add_item(self, item: StatusRecord) -> None:
        self.items.append(item)

    def clear_items(self) -> None:
        self.items = []

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[StatusRecord]:
        return iter(self.items)

    def types(self) -> list[StatusItemType]:
        """Tags of the items, in order."""
        return [item.TYPE for item in self.items]

    def filter(
        self,
        types: Iterable[StatusItemType | str] | None = None,
        agent_runner_id: str | None = None,
    ) -> StatusUpdate:
        """Return a new StatusUpdate holding the matching items, order kept."""
        wanted = {StatusItemType.parse(t) for t in types} if types is not None else None
        return StatusUpdate(
            items=[
                item
                for item in self.items
                if (wanted is None or item.TYPE in wanted)
                and (agent_runner_id is None or item.agent_runner_id == agent_runner_id)
            ]
        )

    def to_dict(self) -> dict[str, Any]:
        return {"items": [item.to_dict() for item in self.items]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatusUpdate:
        items = data.get("items") or []
        if not isinstance(items, list):
            raise RecordDecodeError("Status update 'items' must be a list")
        return cls(items=[record_from_dict(item) for item in items])

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str | bytes) -> StatusUpdate:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RecordDecodeError(f"Status update is not valid JSON: {exc}", cause=exc) from exc
        if not isinstance(data, dict):
            raise RecordDecodeError("Status update must be a JSON object")
        return cls.from_dict(data)


__all__ = ["StatusUpdate"]
