"""Event store collaborators used by repositories."""

from .store import EventStore, InMemoryEventStore

__all__ = [
    "EventStore",
    "InMemoryEventStore",
]
