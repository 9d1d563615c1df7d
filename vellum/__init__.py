"""Vellum - session-scoped repositories for event-sourced aggregates.

This module provides the public API for building event-sourced
applications on top of a unit-of-work repository.
"""

from .application import (
    Application,
    ApplicationBuilder,
    Bus,
    CommandHandler,
    EventStore,
    InMemoryBus,
    InMemoryEventStore,
    Middleware,
    Repository,
    UnitOfWork,
)
from .config import VellumSettings
from .domain import (
    AggregateRoot,
    AggregateRootNotFoundError,
    Command,
    Event,
    IllegalSessionStateError,
    Notification,
    OptimisticLockingError,
    VersionedId,
)
from .routing import applies_event, handles_command, intercepts

__all__ = [
    # Application
    "Application",
    "ApplicationBuilder",
    "VellumSettings",
    # Repository and collaborators
    "Repository",
    "UnitOfWork",
    "EventStore",
    "InMemoryEventStore",
    "Bus",
    "InMemoryBus",
    "CommandHandler",
    "Middleware",
    # Domain primitives
    "AggregateRoot",
    "Command",
    "Event",
    "Notification",
    "VersionedId",
    # Errors
    "AggregateRootNotFoundError",
    "IllegalSessionStateError",
    "OptimisticLockingError",
    # Decorators
    "applies_event",
    "handles_command",
    "intercepts",
]
