"""Application infrastructure for vellum.

This package contains everything around the domain model: the event store
and bus collaborators, the session-scoped repository and its unit of work,
command handling with middleware, and application wiring.
"""

from .application import Application, ApplicationBuilder
from .bus import Bus, EventSubscription, InMemoryBus
from .commands import CommandBus, CommandHandler
from .eventstore import EventStore, InMemoryEventStore
from .middleware import (
    ConcurrencyRetryMiddleware,
    ContextPropagationMiddleware,
    Handler,
    LoggingMiddleware,
    Middleware,
)
from .repository import Repository, Session, UnitOfWork

__all__ = [
    # Application
    "Application",
    "ApplicationBuilder",
    # Collaborators
    "Bus",
    "EventStore",
    "EventSubscription",
    "InMemoryBus",
    "InMemoryEventStore",
    # Repository
    "Repository",
    "Session",
    "UnitOfWork",
    # Commands
    "CommandBus",
    "CommandHandler",
    # Middleware
    "ConcurrencyRetryMiddleware",
    "ContextPropagationMiddleware",
    "Handler",
    "LoggingMiddleware",
    "Middleware",
]
