"""Domain primitives for event-sourced aggregates.

- VersionedId: Stable aggregate id paired with a version
- AggregateRoot: Base class for aggregates rebuilt from their events
- Command: Base class for messages that open a unit of work
- Event: Envelope for domain events
- Notification: Envelope for replies to the caller of a unit of work
- Exceptions raised by repositories and event stores
"""

from .aggregate import AggregateRoot, qualified_name
from .command import Command
from .event import Event, utc_now
from .exceptions import (
    AggregateRootNotFoundError,
    IllegalSessionStateError,
    OptimisticLockingError,
)
from .identity import VersionedId
from .notification import Notification

__all__ = [
    "AggregateRoot",
    "Command",
    "Event",
    "Notification",
    "VersionedId",
    "qualified_name",
    "utc_now",
    "AggregateRootNotFoundError",
    "IllegalSessionStateError",
    "OptimisticLockingError",
]
