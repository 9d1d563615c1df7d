from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

from .event import utc_now

T = TypeVar("T", bound=BaseModel)


class Notification(BaseModel, Generic[T]):
    """Message addressed to whoever triggered the current unit of work.

    Notifications are the side channel of an aggregate root: where events
    are broadcast to every subscriber, a notification travels back to the
    originator of the message, e.g. to report a validation outcome. They are
    never stored in the event stream and never replayed.

    Attributes:
        id: Unique identifier for this notification
        aggregate_id: Stable id of the aggregate that raised it
        data: Typed notification payload
        timestamp: When the notification was raised (UTC timezone)
        correlation_id: Correlation id used to route the reply
        causation_id: Id of the message that caused the notification
    """

    model_config = ConfigDict(frozen=True)

    id: ULID = Field(default_factory=ULID)
    aggregate_id: ULID
    data: T
    timestamp: datetime = Field(default_factory=utc_now)
    correlation_id: ULID | None = None
    causation_id: ULID | None = None
