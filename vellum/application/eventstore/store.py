"""Event store interfaces and implementations for event-sourced aggregates."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from ulid import ULID

from ...domain import Event, OptimisticLockingError, VersionedId

if TYPE_CHECKING:
    from ...domain import AggregateRoot

A = TypeVar("A", bound="AggregateRoot")


class EventStore(ABC):
    """Abstract interface for durable event source persistence.

    The event store keeps one append-only stream of events per aggregate
    and rebuilds aggregates from those streams. It is also the authority on
    aggregate versions: the repository asks it to verify the version a
    caller requested before handing out an aggregate.

    Key responsibilities:
    - **Loading**: Rebuild an aggregate of a given type from its history
    - **Storing**: Append an aggregate's unsaved events to its stream
    - **Concurrency Control**: Reject stale versions optimistically, never
      by blocking

    Implementations are shared by concurrent units of work and must be
    safe for that.
    """

    @abstractmethod
    async def load_event_source(
        self,
        aggregate_type: type[A],
        identity: VersionedId,
    ) -> A | None:
        """Rebuild an aggregate from its stored events.

        Args:
            aggregate_type: Class of the aggregate to rebuild.
            identity: Identity requested by the caller. Only the stable id
                is used to find the stream; the version is checked
                separately through ``verify_version``.

        Returns:
            The rebuilt aggregate at its latest stored version, or None if
            no stream of that type exists for the id.
        """
        ...

    @abstractmethod
    async def store_event_source(self, aggregate: "AggregateRoot", *, new: bool = False) -> None:
        """Append the aggregate's unsaved events to its stream.

        The aggregate's unsaved events are left untouched; clearing them is
        the caller's job.

        Args:
            aggregate: Aggregate whose unsaved events are written.
            new: True for an aggregate created in the current unit of work.
                Its stream is created from the unsaved events and starts
                at the aggregate's ``committed_version``, which need not be
                0 for an aggregate built from earlier history.

        Raises:
            OptimisticLockingError: If the stream no longer is at the
                aggregate's ``committed_version``, or if a new aggregate
                uses the id of an existing stream.
        """
        ...

    @abstractmethod
    async def verify_version(
        self,
        aggregate: "AggregateRoot",
        requested: VersionedId,
    ) -> None:
        """Check that ``requested`` is not stale for ``aggregate``.

        Raises:
            OptimisticLockingError: If the requested version conflicts with
                the aggregate's authoritative version.
        """
        ...


@dataclass
class _Stream:
    aggregate_type: type["AggregateRoot"]
    events: list[Event[Any]] = field(default_factory=list)

    @property
    def version(self) -> int:
        return self.events[-1].sequence_number if self.events else 0


class InMemoryEventStore(EventStore):
    """Dictionary-based in-memory event store for testing.

    Keeps one list of events per aggregate id, tagged with the aggregate
    class that created it.

    This implementation is suitable for:
    - Unit tests (fast, no external dependencies)
    - Single-process applications and examples

    It is safe to share between asyncio tasks because no operation awaits
    while updating a stream. It is **NOT** durable: everything is lost when
    the process exits.
    """

    def __init__(self) -> None:
        self.streams: dict[ULID, _Stream] = {}

    async def load_event_source(
        self,
        aggregate_type: type[A],
        identity: VersionedId,
    ) -> A | None:
        """Rebuild an aggregate by replaying its whole stream.

        The aggregate is rebuilt as the class that created the stream, which
        may be a subclass of ``aggregate_type``. Returns None when there is
        no stream for the id, or when the stream was created by a class that
        is not an ``aggregate_type``.
        """
        stream = self.streams.get(identity.id)
        if stream is None or not issubclass(stream.aggregate_type, aggregate_type):
            return None

        aggregate = stream.aggregate_type(identity=VersionedId(id=identity.id, version=0))
        aggregate.load_from_history(stream.events)
        return aggregate  # type: ignore[return-value]

    async def store_event_source(self, aggregate: "AggregateRoot", *, new: bool = False) -> None:
        """Append unsaved events after checking the expected version.

        Raises:
            OptimisticLockingError: If another writer appended to the stream
                since the aggregate was loaded, or if a new aggregate reuses
                the id of an existing stream.
        """
        if not (events := aggregate.get_unsaved_events()):
            return

        stream = self.streams.get(aggregate.id)
        if new:
            if stream is not None:
                raise OptimisticLockingError(
                    f"Aggregate {aggregate.id} already exists at version {stream.version}"
                )
            self.streams[aggregate.id] = _Stream(type(aggregate), list(events))
            return

        stored_version = stream.version if stream else 0
        if stored_version != aggregate.committed_version:
            raise OptimisticLockingError(
                f"Aggregate {aggregate.id}: expected version {aggregate.committed_version}, "
                f"stored version is {stored_version}"
            )

        if stream is None:
            stream = self.streams[aggregate.id] = _Stream(type(aggregate))
        stream.events.extend(events)

    async def verify_version(
        self,
        aggregate: "AggregateRoot",
        requested: VersionedId,
    ) -> None:
        """Reject requests based on a version other than the current one.

        The check passes when the requested version lies between the
        aggregate's committed version and the version following its unsaved
        events. It fails when the stored stream moved past the committed
        version, when the request is older than the committed version, and
        when the request is ahead of anything the aggregate could reach.
        """
        stored = self.streams.get(aggregate.id)
        if stored is not None and stored.version != aggregate.committed_version:
            raise OptimisticLockingError(
                f"Aggregate {aggregate.id} was modified concurrently: "
                f"loaded at version {aggregate.committed_version}, stored version is {stored.version}"
            )
        if requested.version < aggregate.committed_version:
            raise OptimisticLockingError(
                f"Aggregate {aggregate.id}: requested version {requested.version} "
                f"is older than current version {aggregate.committed_version}"
            )
        if requested.version > aggregate.version + 1:
            raise OptimisticLockingError(
                f"Aggregate {aggregate.id}: requested version {requested.version} "
                f"is ahead of current version {aggregate.version}"
            )

    async def load_events(self, aggregate_id: ULID) -> list[Event[Any]]:
        """All stored events of an aggregate, in sequence order."""
        stream = self.streams.get(aggregate_id)
        return list(stream.events) if stream else []

    def version_of(self, aggregate_id: ULID) -> int:
        """Stored version of an aggregate, 0 if it has no stream."""
        stream = self.streams.get(aggregate_id)
        return stream.version if stream else 0
