"""Logging middleware for command tracing."""

import logging
from typing import Any

from ...context import get_context
from ...domain import Command
from ...routing import intercepts
from .base import Handler, Middleware

LOGGER = logging.getLogger(__name__)


def command_log_fields(command: Command) -> dict[str, str]:
    """``extra`` fields identifying a command and its current context.

    Only type and ids are included, never command data, so that PII in
    payloads does not end up in logs.
    """
    fields = {
        "command_type": type(command).__name__,
        "command_id": str(command.command_id),
    }
    ctx = get_context()
    if ctx.correlation_id is not None:
        fields["correlation_id"] = str(ctx.correlation_id)
    if ctx.causation_id is not None:
        fields["causation_id"] = str(ctx.causation_id)
    return fields


class LoggingMiddleware(Middleware):
    """Middleware logging every command on arrival and on failure.

    Attributes:
        level: Numeric logging level used for both records.

    Examples:
        >>> app = (ApplicationBuilder()
        ...     .use_settings(VellumSettings(log_level="DEBUG"))
        ...     .build())
    """

    def __init__(self, level: str):
        """Initialize the logging middleware.

        Args:
            level: Case-insensitive level name, e.g. "INFO".

        Raises:
            ValueError: If ``level`` is not a known level name.
        """
        self.level = logging.getLevelName(level.upper())
        if not isinstance(self.level, int):
            raise ValueError(f"Unknown log level {level!r}")

    @intercepts
    async def log_command(self, command: Command, next: Handler) -> Any:
        fields = command_log_fields(command)
        LOGGER.log(self.level, "Received Command", extra=fields)
        try:
            return await next(command)
        except Exception as e:
            LOGGER.log(self.level, "Command failed", extra={**fields, "error": type(e).__name__})
            raise
