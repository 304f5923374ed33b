"""Domain events recorded by actions and the in-process bus that delivers them.

Events are recorded on the action while it runs and handed to the bus by the
server once the dispatch produced a success response. Delivery is
at-most-once: a listener that raises is logged and skipped, nothing is
retried.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from actiondispatch.commons.observability import get_logger
from actiondispatch.domain.models import Post, User

logger = get_logger(__name__)

Listener = Callable[["DomainEvent"], None]


@dataclass(frozen=True)
class DomainEvent:
    """Base class for events raised by actions."""

    occurred_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), kw_only=True
    )

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class UserHasPosted(DomainEvent):
    """A user added a post to a conversation."""

    user: User
    post: Post


class InMemoryEventBus:
    """Synchronous in-process event bus.

    Listeners subscribe to an event class and receive every published event
    that is an instance of it, base classes included.
    """

    def __init__(self) -> None:
        self._listeners: dict[type[DomainEvent], list[Listener]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: type[DomainEvent], listener: Listener) -> None:
        with self._lock:
            self._listeners.setdefault(event_type, []).append(listener)

    def unsubscribe(self, event_type: type[DomainEvent], listener: Listener) -> None:
        with self._lock:
            listeners = self._listeners.get(event_type, [])
            if listener in listeners:
                listeners.remove(listener)

    def listeners_for(self, event: DomainEvent) -> list[Listener]:
        with self._lock:
            matched: list[Listener] = []
            for klass in type(event).__mro__:
                matched.extend(self._listeners.get(klass, []))
            return matched

    def publish(self, event: DomainEvent) -> None:
        for listener in self.listeners_for(event):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "event_listener_failed",
                    event_type=event.name,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                )
