"""Bus collaborators for publishing events and replying notifications."""

from .bus import Bus, EventSubscription, InMemoryBus

__all__ = [
    "Bus",
    "EventSubscription",
    "InMemoryBus",
]
