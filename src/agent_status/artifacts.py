"""
Artifact storage for large tool outputs.

Tools can park outputs here instead of inlining them in the conversation.
Artifacts are keyed by ``(tool_id, index)``; indexes per tool start at 1.
The status pipeline never reads or writes artifacts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ArtifactStore(ABC):
    """Abstract interface for artifact storage."""

    @abstractmethod
    def store(self, tool_id: str, index: int, value: Any) -> None:
        ...

    @abstractmethod
    def get(self, tool_id: str, index: int) -> Any | None:
        ...

    @abstractmethod
    def has(self, tool_id: str, index: int) -> bool:
        ...

    @abstractmethod
    def all(self) -> dict[str, Any]:
        """Every artifact, keyed ``"<tool_id>:<index>"``."""
        ...

    @abstractmethod
    def next_index(self, tool_id: str) -> int:
        """One past the highest index stored for the tool (1 when none)."""
        ...


class InMemoryArtifactStore(ArtifactStore):
    """Artifacts held in a dict for the lifetime of the process."""

    def __init__(self) -> None:
        self._artifacts: dict[str, Any] = {}

    @staticmethod
    def _key(tool_id: str, index: int) -> str:
        return f"{tool_id}:{index}"

    def store(self, tool_id: str, index: int, value: Any) -> None:
        self._artifacts[self._key(tool_id, index)] = value

    def get(self, tool_id: str, index: int) -> Any | None:
        return self._artifacts.get(self._key(tool_id, index))

    def has(self, tool_id: str, index: int) -> bool:
        return self._artifacts.get(self._key(tool_id, index)) is not None

    def all(self) -> dict[str, Any]:
        return dict(self._artifacts)

    def next_index(self, tool_id: str) -> int:
        prefix = f"{tool_id}:"
        highest = 0
        for key in self._artifacts:
            if not key.startswith(prefix):
                continue
            suffix = key[len(prefix):]
            # Tool ids may themselves contain ':'
            if suffix.isdigit():
                highest = max(highest, int(suffix))
        return highest + 1


__all__ = ["ArtifactStore", "InMemoryArtifactStore"]
