"""Base middleware class for commands.

Middleware components wrap command handling to provide cross-cutting
concerns like logging, context propagation or retries.
"""

import inspect
from collections.abc import Callable, Coroutine
from typing import Any, ClassVar

from pydantic import BaseModel

from ...routing import INTERCEPT, MessageRouter, build_router

Handler = Callable[[BaseModel], Coroutine[Any, Any, Any]]


def _forward(message: BaseModel, instance: "Middleware", next: Handler) -> Any:
    return next(message)


class Middleware:
    """Base class for middleware with annotation-based routing.

    Each middleware receives the command and the next handler of the chain,
    and decides whether and how to call it. Methods decorated with
    ``@intercepts`` are selected by the annotation of their command
    parameter; commands that no interceptor matches go straight to the next
    handler.

    Examples:
        Intercept all commands:

        >>> class TimingMiddleware(Middleware):
        ...     @intercepts
        ...     async def time_command(self, cmd: Command, next: Handler) -> Any:
        ...         started = time.monotonic()
        ...         try:
        ...             return await next(cmd)
        ...         finally:
        ...             self.durations.append(time.monotonic() - started)

        Intercept a specific command type:

        >>> class NoSelfGreetingMiddleware(Middleware):
        ...     @intercepts
        ...     async def check(self, cmd: GreetPerson, next: Handler) -> Any:
        ...         if cmd.name == "me":
        ...             raise ValueError("Cannot greet yourself")
        ...         return await next(cmd)
    """

    _command_router: ClassVar[MessageRouter]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._command_router = build_router(cls, INTERCEPT, _forward)

    async def intercept(self, message: BaseModel, next: Handler) -> Any:
        result = self._command_router.route(self, message, next)
        if inspect.isawaitable(result):
            return await result
        return result
