"""Command handling: handlers, routing and the command bus."""

from .bus import CommandBus, CommandDispatcher, CommandToHandlerMap, DelegateToHandler
from .handler import CommandHandler

__all__ = [
    "CommandBus",
    "CommandDispatcher",
    "CommandHandler",
    "CommandToHandlerMap",
    "DelegateToHandler",
]
