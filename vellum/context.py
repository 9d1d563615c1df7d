"""Correlation and causation tracking for the message being handled."""

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from ulid import ULID

if TYPE_CHECKING:
    from .domain import Command


@dataclass(frozen=True)
class ExecutionContext:
    """Ids linking everything a unit of work produces to its trigger.

    Aggregates stamp the context onto the events and notifications they
    raise, and ``InMemoryBus`` groups replies by the correlation id.

    Attributes:
        correlation_id: Id of the whole logical operation. It stays the same
            for every message the operation causes.
        causation_id: Id of whatever directly caused the current message.
        command_id: Id of the command being handled. Events raised while
            handling it use this as their causation id.

    Examples:
        >>> ctx = ExecutionContext.create()
        >>> ctx.causation_id == ctx.correlation_id
        True
    """

    correlation_id: ULID | None = None
    causation_id: ULID | None = None
    command_id: ULID | None = None

    @classmethod
    def create(cls, correlation_id: ULID | None = None) -> "ExecutionContext":
        """Start a new logical operation.

        Nothing caused an operation started here, so the causation id refers
        back to the correlation id. A correlation id is generated when none
        is given.
        """
        if correlation_id is None:
            correlation_id = ULID()
        return cls(correlation_id=correlation_id, causation_id=correlation_id)

    @classmethod
    def of_command(cls, command: "Command") -> "ExecutionContext":
        """Context for handling ``command``.

        Ids carried by the command are kept. A command without a correlation
        id starts a new operation.
        """
        ctx = cls.create(command.correlation_id)
        if command.causation_id is not None:
            ctx = replace(ctx, causation_id=command.causation_id)
        return ctx.for_command(command.command_id)

    def for_command(self, command_id: ULID) -> "ExecutionContext":
        return replace(self, command_id=command_id)


_current: contextvars.ContextVar[ExecutionContext | None] = contextvars.ContextVar(
    "vellum_execution_context", default=None
)


def get_context() -> ExecutionContext:
    """The current context, or an empty one when none is set."""
    return _current.get() or ExecutionContext()


def set_context(context: ExecutionContext) -> None:
    _current.set(context)


def clear_context() -> None:
    _current.set(None)


@contextmanager
def use_context(context: ExecutionContext) -> Iterator[ExecutionContext]:
    """Make ``context`` current for the duration of the block.

    The previous context is restored on exit, also when the block raises.
    Every asyncio task works on its own copy of the context, so concurrent
    units of work never see each other's ids.
    """
    token = _current.set(context)
    try:
        yield context
    finally:
        _current.reset(token)
