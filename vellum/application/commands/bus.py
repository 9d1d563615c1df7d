"""Command bus and routing infrastructure."""

import inspect
from collections.abc import Callable, Coroutine
from functools import reduce
from typing import Any

from ...domain import Command
from ..middleware import Middleware
from ..repository import UnitOfWork
from .handler import CommandHandler

CommandDispatcher = Callable[[Command], Coroutine[Any, Any, Any]]


class CommandToHandlerMap:
    @staticmethod
    def from_handlers(handlers: list[CommandHandler]) -> "CommandToHandlerMap":
        map = CommandToHandlerMap()
        for handler in handlers:
            map.add(handler)
        return map

    def __init__(self) -> None:
        self.command_to_handler_map: dict[type[Command], CommandHandler] = {}

    def add(self, handler: CommandHandler) -> None:
        """Register every command type ``handler`` declares.

        Raises:
            ValueError: If another handler already handles one of its types.
        """
        for command_type in type(handler).handled_command_types():
            existing = self.command_to_handler_map.get(command_type)
            if existing is not None and existing is not handler:
                raise ValueError(
                    f"{command_type.__name__} is already handled by {type(existing).__name__}"
                )
            self.command_to_handler_map[command_type] = handler

    def get(self, command_type: type[Command]) -> CommandHandler:
        """Get the handler for `command_type`.

        Raises:
            NotImplementedError: If no handler is registered for the type.
        """
        try:
            return self.command_to_handler_map[command_type]
        except KeyError:
            raise NotImplementedError(
                f"No handler registered for Command type {command_type.__name__}"
            ) from None


class DelegateToHandler:
    """Root handler that runs each command in its own unit of work.

    The handler's result is returned only after the unit of work has been
    flushed, so a caller that sees a result knows the changes are stored
    and published. When the handler raises, nothing is flushed.
    """

    def __init__(self, command_to_handler_map: CommandToHandlerMap, unit_of_work: UnitOfWork):
        self.command_to_handler_map = command_to_handler_map
        self.unit_of_work = unit_of_work

    async def handle(self, command: Command) -> Any:
        handler = self.command_to_handler_map.get(type(command))
        async with self.unit_of_work.begin() as repository:
            result = handler.handle(command, repository)
            if inspect.isawaitable(result):
                result = await result
        return result


class CommandBus:
    """Command bus for dispatching commands through middleware.

    Middleware is applied in registration order, with each middleware
    deciding via annotation-based routing whether to intercept a command.
    The root handler runs last and owns the unit of work.

    Args:
        root_handler: The final handler that runs the unit of work.
        middleware: List of middleware to apply (in order).
    """

    def __init__(self, root_handler: DelegateToHandler, middleware: list[Middleware]):
        self.root_handler = root_handler
        self.middleware = middleware
        # Build the middleware chain by reducing from right to left
        self.chain: CommandDispatcher = reduce(
            lambda next, mw: lambda cmd, n=next, m=mw: m.intercept(cmd, n),
            reversed(middleware),
            self.root_handler.handle,
        )

    async def dispatch(self, command: Command) -> Any:
        """Dispatch command through the middleware chain to its handler."""
        return await self.chain(command)
