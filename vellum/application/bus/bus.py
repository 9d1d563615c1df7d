"""Bus interfaces and implementations for flushed events and notifications.

This module provides:
- Bus: Abstract interface the repository publishes to after storing events
- InMemoryBus: Recording implementation for tests and single-process apps
- EventSubscription: Pull-based reader over the events an InMemoryBus saw
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any

from ulid import ULID

from ...domain import Event, Notification


class Bus(ABC):
    """Abstract interface for delivering the outcome of a unit of work.

    The repository calls the bus once per flushed aggregate, after the
    aggregate's events are durably stored. The bus therefore never has to
    deal with events that could still be rolled back.

    Implementations might use:
    - In-memory lists (for testing or single-process apps)
    - Message brokers (RabbitMQ, Kafka, AWS SQS/SNS)
    - Request/response channels for replies

    Implementations are shared by concurrent units of work and must be
    safe for that.
    """

    @abstractmethod
    async def publish(self, events: list[Event[Any]]) -> None:
        """Broadcast domain events to interested subscribers.

        Args:
            events: Events of one aggregate in the order they were produced.
                May be empty when the aggregate only raised notifications.
        """
        ...

    @abstractmethod
    async def reply(self, notifications: list[Notification[Any]]) -> None:
        """Send notifications back to whoever triggered the unit of work.

        Args:
            notifications: Notifications of one aggregate in the order they
                were raised. May be empty.
        """
        ...


class InMemoryBus(Bus):
    """Bus that records everything it is given.

    Published events are appended to a single ordered list that any number
    of subscriptions can read from. Replies are grouped by correlation id so
    a caller can pick up the notifications meant for it.

    This is a minimal implementation for testing - it doesn't support:
    - Per-stream isolation (all subscriptions see all events)
    - Blocking reads or backpressure
    - Cross-process delivery
    """

    def __init__(self) -> None:
        self.published: list[Event[Any]] = []
        self.replies: dict[ULID | None, list[Notification[Any]]] = defaultdict(list)

    async def publish(self, events: list[Event[Any]]) -> None:
        self.published.extend(events)

    async def reply(self, notifications: list[Notification[Any]]) -> None:
        for notification in notifications:
            self.replies[notification.correlation_id].append(notification)

    def replies_for(self, correlation_id: ULID | None) -> list[Notification[Any]]:
        """Notifications replied to the caller with ``correlation_id``."""
        return list(self.replies.get(correlation_id, []))

    def subscribe(self) -> "EventSubscription":
        """Create a subscription starting at the first published event."""
        return EventSubscription(self)


class EventSubscription:
    """Index-based reader over an InMemoryBus's published events.

    Limitations:
    - No blocking - reading past the end raises IndexError
    - Not thread safe
    """

    def __init__(self, bus: InMemoryBus) -> None:
        self.index = 0
        self.bus = bus

    async def depth(self) -> int:
        """Number of published events not read yet."""
        return len(self.bus.published) - self.index

    async def next(self) -> Event[Any]:
        """Read the next event and advance the subscription position.

        Raises:
            IndexError: If attempting to read past the end of the stream
        """
        event = self.bus.published[self.index]
        self.index += 1
        return event
