"""
Emission filter.

Two independent gates decide whether a record is produced:

- Run gate: the event must carry a run id. Events without one belong to an
  untracked execution and never touch the store.
- Type gate: the agent's ``detailed_tracking`` allow-list. An empty list
  traces every record type; otherwise only the listed types are emitted.
"""

from __future__ import annotations

from collections.abc import Iterable

from .events.types import AgentDefinition, AgentStatusEvent, RunnerAgent
from .records.types import StatusItemType


class EmissionFilter:
    """Decides, per event and record type, whether a record is emitted.

    Args:
        default_types: Allow-list used for agents that do not set their own.
            Empty (the default) means every type.
    """

    def __init__(self, default_types: Iterable[StatusItemType | str] | None = None):
        self._default_types = frozenset(StatusItemType.parse(t) for t in (default_types or ()))

    @classmethod
    def from_settings(cls, settings) -> EmissionFilter:
        return cls(default_types=settings.tracking.default_types)

    def should_track(self, event: AgentStatusEvent) -> bool:
        """Run gate."""
        return event.run_id is not None

    def allowed_types(self, agent: RunnerAgent | AgentDefinition) -> frozenset[StatusItemType]:
        """Effective allow-list for an agent; empty means everything."""
        definition = agent.definition if isinstance(agent, RunnerAgent) else agent
        if definition.detailed_tracking:
            return frozenset(definition.detailed_tracking)
        return self._default_types

    def allows(self, agent: RunnerAgent | AgentDefinition, item_type: StatusItemType) -> bool:
        """Type gate."""
        allowed = self.allowed_types(agent)
        if not allowed:
            return True
        return item_type in allowed

    def should_emit(self, event: AgentStatusEvent, item_type: StatusItemType) -> bool:
        """Both gates for one record type."""
        return self.should_track(event) and self.allows(event.agent, item_type)


__all__ = ["EmissionFilter"]
