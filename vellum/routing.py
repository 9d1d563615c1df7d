"""Annotation-based routing of messages to methods.

Aggregates, command handlers and middleware declare which messages they
deal with by decorating methods. The message type is read from the
annotation of the method's first parameter after ``self``:

    >>> class Greeter(AggregateRoot):
    ...     @applies_event
    ...     def apply_greeted(self, evt: PersonGreeted) -> None:
    ...         self.greetings.append(evt.message)

Each class builds one ``MessageRouter`` per role when it is defined.
"""

import inspect
from collections.abc import Callable
from functools import singledispatch
from typing import Any, NamedTuple, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

Fallback = Callable[..., Any]

COMMAND = "command"
EVENT = "event"
INTERCEPT = "intercept"

_ROUTE_ATTR = "_vellum_route"


class Route(NamedTuple):
    role: str
    message_type: type


def raise_unhandled(kind: str) -> Fallback:
    """Fallback rejecting messages that no method was registered for."""

    def fallback(message: Any, instance: Any, *args: Any, **kwargs: Any) -> Any:
        raise NotImplementedError(
            f"{type(instance).__name__} has no {kind} for {type(message).__name__}"
        )

    return fallback


def ignore_unhandled(message: Any, instance: Any, *args: Any, **kwargs: Any) -> None:
    return None


class MessageRouter:
    """Calls the method registered for the type of a message.

    Lookup is done with ``singledispatch``, so a method registered for a
    base class also receives its subclasses unless a more specific method
    exists.
    """

    __slots__ = ("_dispatch",)

    def __init__(self, fallback: Fallback):
        self._dispatch = singledispatch(fallback)

    def register(self, message_type: type, method: Callable[..., Any]) -> None:
        self._dispatch.register(
            message_type,
            lambda message, instance, *args, **kwargs: method(instance, message, *args, **kwargs),
        )

    def route(self, instance: Any, message: Any, *args: Any, **kwargs: Any) -> Any:
        """Call ``instance``'s method for ``message``.

        Extra arguments are passed on after the message.
        """
        return self._dispatch(message, instance, *args, **kwargs)


def _message_type(func: Callable[..., Any]) -> type:
    params = list(inspect.signature(func).parameters.values())
    if len(params) < 2:
        raise ValueError(f"Handler {func.__qualname__} must have at least 2 parameters")

    annotation = params[1].annotation
    if annotation is inspect.Parameter.empty:
        raise ValueError(
            f"Handler {func.__qualname__} parameter '{params[1].name}' must have a type annotation"
        )
    return annotation


def _mark(func: F, role: str) -> F:
    setattr(func, _ROUTE_ATTR, Route(role, _message_type(func)))
    return func


def handles_command(func: F) -> F:
    """Mark a method as the handler of a command type.

    Handlers receive the command and the repository of the unit of work
    opened for it.

    Example:
        >>> class GreeterHandler(CommandHandler):
        ...     @handles_command
        ...     async def greet(self, cmd: GreetPerson, repository: Repository) -> None:
        ...         greeter = await repository.get(Greeter, cmd.target)
        ...         greeter.greet_person(cmd.name)
    """
    return _mark(func, COMMAND)


def applies_event(func: F) -> F:
    """Mark an aggregate method as the applier of an event payload type."""
    return _mark(func, EVENT)


def intercepts(func: F) -> F:
    """Mark a middleware method as interceptor of a command type.

    Annotate with ``Command`` to intercept every command.

    Example:
        >>> class AuditMiddleware(Middleware):
        ...     @intercepts
        ...     async def audit(self, cmd: Command, next: Handler) -> Any:
        ...         self.seen.append(cmd)
        ...         return await next(cmd)
    """
    return _mark(func, INTERCEPT)


def collect_routes(cls: type, role: str) -> dict[type, Callable[..., Any]]:
    """Decorated methods of ``cls`` for ``role``, keyed by message type.

    Subclass methods replace base class methods for the same message type.
    """
    routes: dict[type, Callable[..., Any]] = {}
    for klass in reversed(cls.__mro__):
        for value in vars(klass).values():
            route = getattr(value, _ROUTE_ATTR, None)
            if isinstance(route, Route) and route.role == role:
                routes[route.message_type] = value
    return routes


def build_router(cls: type, role: str, fallback: Fallback) -> MessageRouter:
    router = MessageRouter(fallback)
    for message_type, method in collect_routes(cls, role).items():
        router.register(message_type, method)
    return router
