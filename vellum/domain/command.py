"""Command base class for messages that open a unit of work."""

from pydantic import BaseModel, Field
from ulid import ULID


class Command(BaseModel):
    """Base class for all commands in the system.

    A command is one inbound message. Handling it is one unit of work: the
    handler loads or creates aggregates through a repository, and every
    change is flushed together once the handler returns.

    Commands that act on an existing aggregate usually declare a
    ``VersionedId`` field holding the version the sender last saw, so that
    the repository can reject the command when the aggregate has moved on.

    Attributes:
        command_id: Unique identifier for this command instance.
        correlation_id: Optional correlation id for distributed tracing.
        causation_id: Optional id of what caused this command.

    Examples:
        >>> class GreetPerson(Command):
        ...     target: VersionedId
        ...     name: str
    """

    command_id: ULID = Field(default_factory=ULID)
    correlation_id: ULID | None = None
    causation_id: ULID | None = None
