"""Concurrency retry middleware for handling optimistic locking conflicts."""

import asyncio
import logging
from typing import Any

from ...domain import Command, OptimisticLockingError
from ...routing import intercepts
from .base import Handler, Middleware
from .logging import command_log_fields

LOGGER = logging.getLogger(__name__)


class ConcurrencyRetryMiddleware(Middleware):
    """Middleware re-running commands that lose an optimistic locking race.

    Every attempt passes through the rest of the chain, so the command runs
    in a fresh unit of work that reloads its aggregates. Once
    ``max_attempts`` conflicts have occurred, an OptimisticLockingError
    chained to the last conflict is raised.

    A command carrying a stale version fails on every attempt. Retrying
    only helps commands whose requested versions are still acceptable once
    the concurrent write is visible.

    Examples:
        >>> middleware = ConcurrencyRetryMiddleware(max_attempts=3, retry_delay=0.1)
    """

    __slots__ = ("max_attempts", "retry_delay")

    def __init__(self, max_attempts: int, retry_delay: float):
        """Initialize the concurrency retry middleware.

        Args:
            max_attempts: Attempts including the first one.
            retry_delay: Seconds to wait before each retry.

        Raises:
            ValueError: If max_attempts <= 0 or retry_delay < 0.
        """
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if retry_delay < 0:
            raise ValueError("retry_delay must be non-negative")
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

    @intercepts
    async def retry_on_conflict(self, command: Command, next: Handler) -> Any:
        attempt = 1
        while True:
            try:
                return await next(command)
            except OptimisticLockingError as conflict:
                LOGGER.warning(
                    f"Optimistic locking conflict, attempt {attempt}/{self.max_attempts}: {conflict}",
                    extra=command_log_fields(command),
                )
                if attempt == self.max_attempts:
                    raise OptimisticLockingError(
                        f"Max attempts ({self.max_attempts}) reached"
                    ) from conflict
            attempt += 1
            await asyncio.sleep(self.retry_delay)
