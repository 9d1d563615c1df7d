"""Context propagation middleware for correlation and causation tracking."""

from typing import Any

from ...context import ExecutionContext, use_context
from ...domain import Command
from ...routing import intercepts
from .base import Handler, Middleware


class ContextPropagationMiddleware(Middleware):
    """Middleware making each command's ids the current execution context.

    Events and notifications raised while the command is handled pick up
    the context automatically:

    - correlation_id: taken from the command, or generated at entry points
    - causation_id: taken from the command, or the correlation_id
    - command_id: always the command's own id

    The previous context is restored once the command completes, even on
    failure. ``ApplicationBuilder`` puts this middleware first so that every
    other middleware sees the context.
    """

    @intercepts
    async def propagate_context(self, command: Command, next: Handler) -> Any:
        with use_context(ExecutionContext.of_command(command)):
            return await next(command)
