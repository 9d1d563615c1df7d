from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from pydantic import BaseModel, Field
from ulid import ULID

from ..context import get_context
from ..routing import EVENT, build_router, ignore_unhandled
from .event import Event
from .identity import VersionedId
from .notification import Notification

if TYPE_CHECKING:
    from ..routing import MessageRouter

T = TypeVar("T", bound=BaseModel)


def qualified_name(aggregate_type: type) -> str:
    """Fully qualified name of an aggregate class, e.g. ``app.orders.Order``."""
    return f"{aggregate_type.__module__}.{aggregate_type.__qualname__}"


class AggregateRoot(BaseModel):
    """Base class for event-sourced aggregate roots.

    An aggregate root owns its consistency boundary. Business methods never
    assign state directly: they ``emit`` events, and ``@applies_event``
    methods fold those events into the aggregate's state. The same appliers
    rebuild the aggregate when its history is loaded from an event store,
    so loading and changing go through one code path.

    Besides events, an aggregate can ``notify`` the caller of the current
    unit of work. Notifications are delivered by the repository through
    ``Bus.reply`` and are never stored.

    The identity's version always includes the unsaved events, i.e. it is
    the version the aggregate will have once the repository flushes it.
    ``committed_version`` is the version known to the event store.

    Examples:
        >>> class PersonGreeted(BaseModel):
        ...     message: str
        >>>
        >>> class Greeter(AggregateRoot):
        ...     greetings: list[str] = []
        ...
        ...     def greet_person(self, name: str) -> None:
        ...         self.emit(PersonGreeted(message=f"Hi {name}"))
        ...
        ...     @applies_event
        ...     def apply_greeted(self, evt: PersonGreeted) -> None:
        ...         self.greetings.append(evt.message)
        >>>
        >>> greeter = Greeter()
        >>> greeter.greet_person("Erik")
        >>> greeter.version, greeter.committed_version
        (1, 0)

    Attributes:
        identity: Stable id and current version of this aggregate.
        unsaved_events: Events emitted since the last flush. Excluded from
            serialization.
        notifications: Notifications raised since the last flush. Excluded
            from serialization.
    """

    identity: VersionedId = Field(default_factory=VersionedId.random)
    unsaved_events: list[Event[Any]] = Field(default_factory=list, exclude=True)
    notifications: list[Notification[Any]] = Field(default_factory=list, exclude=True)

    _event_router: ClassVar["MessageRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)  # type: ignore[arg-type]
        cls._event_router = build_router(cls, EVENT, ignore_unhandled)

    @property
    def id(self) -> ULID:
        return self.identity.id

    @property
    def version(self) -> int:
        return self.identity.version

    @property
    def committed_version(self) -> int:
        return self.identity.version - len(self.unsaved_events)

    def get_identity(self) -> VersionedId:
        return self.identity

    def apply(self, event: BaseModel) -> object:
        """Route an event payload to its registered applier method.

        Payloads without an applier are ignored.
        """
        return self._event_router.route(self, event)

    def emit(self, data: T) -> None:
        """Record a new event and apply it to the aggregate state.

        The version is incremented, the event is appended to the unsaved
        events with the current execution context attached, and the payload
        is applied.

        Args:
            data: The event payload describing what happened.
        """
        self.identity = self.identity.next_version()
        ctx = get_context()

        event: Event[T] = Event(
            aggregate_id=self.id,
            sequence_number=self.version,
            data=data,
            correlation_id=ctx.correlation_id,
            causation_id=ctx.command_id,
        )
        self.unsaved_events.append(event)
        self.apply(data)

    def notify(self, data: T) -> None:
        """Raise a notification for the caller of the current unit of work."""
        ctx = get_context()
        self.notifications.append(
            Notification(
                aggregate_id=self.id,
                data=data,
                correlation_id=ctx.correlation_id,
                causation_id=ctx.command_id,
            )
        )

    def load_from_history(self, events: Iterable[Event[Any]]) -> None:
        """Rebuild state by applying previously stored events in order.

        Replayed events are applied without being recorded as unsaved, and
        the identity moves to the sequence number of the last event.

        Raises:
            ValueError: If an event belongs to a different aggregate.
        """
        for event in events:
            if event.aggregate_id != self.id:
                raise ValueError(
                    f"Event {event.id} belongs to aggregate {event.aggregate_id}, not {self.id}"
                )
            self.apply(event.data)
            self.identity = self.identity.with_version(event.sequence_number)

    def get_unsaved_events(self) -> list[Event[Any]]:
        return self.unsaved_events

    def get_notifications(self) -> list[Notification[Any]]:
        return self.notifications

    def has_changes(self) -> bool:
        """Whether the aggregate has anything to flush."""
        return bool(self.unsaved_events or self.notifications)

    def clear_unsaved_events(self) -> None:
        """Forget unsaved events and notifications.

        Called by the repository once the events are stored, or when the
        unit of work is discarded.
        """
        self.unsaved_events.clear()
        self.notifications.clear()
