import logging
from typing import TYPE_CHECKING, TypeVar

from ...domain import AggregateRootNotFoundError, VersionedId, qualified_name
from ..bus import Bus
from ..eventstore import EventStore
from .session import Session

if TYPE_CHECKING:
    from ...domain import AggregateRoot

A = TypeVar("A", bound="AggregateRoot")

LOGGER = logging.getLogger(__name__)


class Repository:
    """Session-scoped access to event-sourced aggregates.

    A repository belongs to exactly one unit of work. Message handlers use
    ``get`` and ``add`` to obtain the aggregates they work on, and ``flush``
    commits everything at the end:

    - ``get`` returns the session's instance when the aggregate was already
      used in this unit of work, and loads it from the event store
      otherwise. Either way the requested version is verified.
    - ``add`` registers an aggregate created by the handler.
    - ``flush`` stores the unsaved events of every changed aggregate, then
      publishes them and replies its notifications through the bus.

    Errors from the event store and the bus are never caught here. Retrying
    a unit of work after an ``OptimisticLockingError`` is the caller's
    decision (see ``ConcurrencyRetryMiddleware``).

    Examples:
        >>> repository = Repository(InMemoryEventStore(), InMemoryBus())
        >>> greeter = Greeter()
        >>> repository.add(greeter)
        >>> greeter.greet_person("Erik")
        >>> await repository.flush()
    """

    __slots__ = ("event_store", "bus", "_session")

    def __init__(self, event_store: EventStore, bus: Bus):
        self.event_store = event_store
        self.bus = bus
        self._session = Session()

    @property
    def session(self) -> Session:
        return self._session

    async def get(self, aggregate_type: type[A], identity: VersionedId) -> A:
        """Get the aggregate with ``identity.id``, loading it at most once.

        Args:
            aggregate_type: Expected class of the aggregate.
            identity: Stable id of the aggregate and the version the caller
                based its request on.

        Returns:
            The single in-session instance of the aggregate.

        Raises:
            AggregateRootNotFoundError: If no aggregate of ``aggregate_type``
                exists for the id.
            OptimisticLockingError: If the requested version is stale.
        """
        if (resident := self._session.get(identity.id)) is not None:
            if not isinstance(resident, aggregate_type):
                raise AggregateRootNotFoundError(qualified_name(aggregate_type), identity.id)
            await self.event_store.verify_version(resident, identity)
            return resident

        aggregate = await self.event_store.load_event_source(aggregate_type, identity)
        if aggregate is None:
            raise AggregateRootNotFoundError(qualified_name(aggregate_type), identity.id)

        await self.event_store.verify_version(aggregate, identity)
        self._session.track_loaded(aggregate)
        LOGGER.debug(
            "Loaded aggregate",
            extra={
                "aggregate_type": qualified_name(aggregate_type),
                "aggregate_id": str(aggregate.id),
                "version": aggregate.version,
            },
        )
        return aggregate

    def add(self, aggregate: "AggregateRoot") -> None:
        """Register a newly created aggregate with this unit of work.

        Adding the instance that is already registered does nothing.

        Raises:
            IllegalSessionStateError: If the session holds a different
                instance with the same id.
        """
        self._session.track_new(aggregate)
        LOGGER.debug(
            "Added aggregate",
            extra={
                "aggregate_type": qualified_name(type(aggregate)),
                "aggregate_id": str(aggregate.id),
            },
        )

    async def flush(self) -> None:
        """Commit every changed aggregate of the unit of work.

        For each aggregate with unsaved events or notifications, in the
        order they entered the session: store its events, clear them, then
        publish the events and reply the notifications. Aggregates without
        changes cause no calls at all.

        The session is discarded afterwards, also when a call fails. Calls
        already made for earlier aggregates are not undone.
        """
        session, self._session = self._session, Session()

        for aggregate in session:
            events = list(aggregate.get_unsaved_events())
            notifications = list(aggregate.get_notifications())
            if not events and not notifications:
                continue

            new = session.is_new(aggregate.id)
            await self.event_store.store_event_source(aggregate, new=new)
            aggregate.clear_unsaved_events()
            await self.bus.publish(events)
            await self.bus.reply(notifications)

            LOGGER.debug(
                "Flushed aggregate",
                extra={
                    "aggregate_type": qualified_name(type(aggregate)),
                    "aggregate_id": str(aggregate.id),
                    "version": aggregate.version,
                    "new": new,
                    "events": len(events),
                    "notifications": len(notifications),
                },
            )

    def discard(self) -> None:
        """Drop the session without storing or publishing anything.

        Unsaved events and notifications of the session's aggregates are
        cleared so that nothing produced by a failed handler can leak out.
        """
        session, self._session = self._session, Session()
        for aggregate in session:
            aggregate.clear_unsaved_events()
