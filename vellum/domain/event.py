from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

T = TypeVar("T", bound=BaseModel)


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class Event(BaseModel, Generic[T]):
    """A fact that happened to one aggregate, wrapped with its metadata.

    Events are created by ``AggregateRoot.emit()``, appended to the event
    store by the repository and then published through the bus. They are
    frozen once created.

    ``sequence_number`` is the version the aggregate reaches by applying
    the event, so the first event of every stream is number 1 and a stream
    of n events is at version n.

    Attributes:
        id: Unique id of this event.
        aggregate_id: Stable id of the aggregate that emitted it.
        data: Typed payload, e.g. ``PersonGreeted``.
        sequence_number: Position in the aggregate's stream, from 1.
        timestamp: UTC time of emission.
        correlation_id: Operation the event belongs to, from the context.
        causation_id: Command that caused it, from the context.

    Examples:
        >>> event = Event(
        ...     aggregate_id=greeter.id,
        ...     sequence_number=1,
        ...     data=PersonGreeted(message="Hi Erik"),
        ... )
    """

    model_config = ConfigDict(frozen=True)

    id: ULID = Field(default_factory=ULID)
    aggregate_id: ULID
    data: T
    sequence_number: int = Field(ge=1, description="Aggregate version after applying this event")
    timestamp: datetime = Field(default_factory=utc_now)
    correlation_id: ULID | None = None
    causation_id: ULID | None = None
