"""
Event dispatcher.

Delivers lifecycle events to subscribers synchronously, in call order, exactly
once. Subscribers declare what they listen to through
``subscribed_events() -> {EventClass: (handler_name, priority)}``; higher
priority handlers run first, ties keep registration order.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any, Awaitable, Callable, Protocol

from .types import AgentStatusEvent

Handler = Callable[[Any], Awaitable[None] | None]


class EventSubscriber(Protocol):
    """Protocol for objects that can be added to an EventDispatcher."""

    def subscribed_events(self) -> dict[type[AgentStatusEvent], tuple[str, int]]:
        ...


class EventDispatcher:
    """Routes each event to the handlers registered for its class."""

    def __init__(self) -> None:
        self._handlers: dict[type[AgentStatusEvent], list[tuple[int, int, Handler]]] = defaultdict(list)
        self._counter = 0

    def add_listener(
        self,
        event_class: type[AgentStatusEvent],
        handler: Handler,
        priority: int = 0,
    ) -> None:
        """Register a handler (sync or async) for an event class."""
        self._counter += 1
        self._handlers[event_class].append((-priority, self._counter, handler))
        self._handlers[event_class].sort(key=lambda entry: (entry[0], entry[1]))

    def add_subscriber(self, subscriber: EventSubscriber) -> None:
        """Register every handler a subscriber declares."""
        for event_class, (method_name, priority) in subscriber.subscribed_events().items():
            self.add_listener(event_class, getattr(subscriber, method_name), priority)

    def listeners(self, event_class: type[AgentStatusEvent]) -> list[Handler]:
        return [handler for _, _, handler in self._handlers.get(event_class, [])]

    async def dispatch(self, event: AgentStatusEvent) -> AgentStatusEvent:
        """Deliver an event to its handlers and return it.

        Handler errors propagate to the caller; later handlers do not run.
        """
        for handler in self.listeners(type(event)):
            result = handler(event)
            if asyncio.iscoroutine(result):
                await result
        return event


__all__ = [
    "EventDispatcher",
    "EventSubscriber",
]
