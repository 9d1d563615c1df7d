from typing import Any

from ..config import VellumSettings
from ..domain import Command
from .bus import Bus, InMemoryBus
from .commands import CommandBus, CommandHandler, CommandToHandlerMap, DelegateToHandler
from .eventstore import EventStore, InMemoryEventStore
from .middleware import (
    ConcurrencyRetryMiddleware,
    ContextPropagationMiddleware,
    LoggingMiddleware,
    Middleware,
)
from .repository import UnitOfWork


class Application:
    """Entry point for handling commands against event-sourced aggregates.

    Every dispatched command runs through the middleware chain and is then
    handled in its own unit of work, whose changes are flushed before
    ``dispatch`` returns.
    """

    def __init__(
        self,
        event_store: EventStore,
        bus: Bus,
        command_bus: CommandBus,
        unit_of_work: UnitOfWork,
        settings: VellumSettings,
    ):
        self.event_store = event_store
        self.bus = bus
        self.command_bus = command_bus
        self._unit_of_work = unit_of_work
        self.settings = settings

    async def dispatch(self, command: Command) -> Any:
        """Dispatch a command and return its handler's result.

        Raises:
            AggregateRootNotFoundError: If the handler requested a missing
                aggregate.
            OptimisticLockingError: If the command conflicts with another
                write (after any configured retries).
            IllegalSessionStateError: If the handler added two instances of
                one aggregate.
        """
        return await self.command_bus.dispatch(command)

    def unit_of_work(self) -> UnitOfWork:
        """The unit of work factory, for code that works outside of commands."""
        return self._unit_of_work


class ApplicationBuilder:
    """Builder for creating Application instances.

    Examples:
        >>> app = (
        ...     ApplicationBuilder()
        ...     .use_settings(VellumSettings(retry_max_attempts=3))
        ...     .register_handler(GreeterHandler())
        ...     .build()
        ... )
        >>> greeter_id = await app.dispatch(CreateGreeter())
    """

    def __init__(self) -> None:
        self.event_store: EventStore | None = None
        self.bus: Bus | None = None
        self.settings: VellumSettings | None = None
        self.handlers: list[CommandHandler] = []
        self.middleware: list[Middleware] = []

    def use_event_store(self, event_store: EventStore) -> "ApplicationBuilder":
        self.event_store = event_store
        return self

    def use_bus(self, bus: Bus) -> "ApplicationBuilder":
        self.bus = bus
        return self

    def use_settings(self, settings: VellumSettings) -> "ApplicationBuilder":
        self.settings = settings
        return self

    def register_handler(self, handler: CommandHandler) -> "ApplicationBuilder":
        self.handlers.append(handler)
        return self

    def register_middleware(self, middleware: Middleware) -> "ApplicationBuilder":
        """Register middleware to run after the built-in middleware.

        Registered middleware runs in registration order, after context
        propagation, logging and retries.
        """
        self.middleware.append(middleware)
        return self

    def build(self) -> Application:
        """Wire the application.

        Unset collaborators default to an InMemoryEventStore, an
        InMemoryBus and settings read from the environment.

        Raises:
            ValueError: If two handlers handle the same command type.
        """
        event_store = self.event_store or InMemoryEventStore()
        bus = self.bus or InMemoryBus()
        settings = self.settings or VellumSettings()

        unit_of_work = UnitOfWork(event_store, bus)
        root_handler = DelegateToHandler(
            CommandToHandlerMap.from_handlers(self.handlers),
            unit_of_work,
        )
        command_bus = CommandBus(root_handler, self._build_middleware(settings))
        return Application(event_store, bus, command_bus, unit_of_work, settings)

    def _build_middleware(self, settings: VellumSettings) -> list[Middleware]:
        chain: list[Middleware] = [
            ContextPropagationMiddleware(),
            LoggingMiddleware(settings.log_level),
        ]
        if settings.retry_max_attempts > 1:
            chain.append(
                ConcurrencyRetryMiddleware(settings.retry_max_attempts, settings.retry_delay)
            )
        return chain + self.middleware
