from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from ..bus import Bus
from ..eventstore import EventStore
from .repository import Repository


class UnitOfWork:
    """Creates one repository per unit of work and commits it.

    ``begin`` encapsulates the whole lifecycle of a session: it yields a
    fresh repository, flushes it when the body completes, and discards it
    when the body raises. A failed handler therefore never stores or
    publishes anything.

    Every ``begin`` call gets its own repository, so units of work running
    concurrently in separate tasks never share session state. Only the
    event store and the bus are shared.

    Examples:
        >>> unit_of_work = UnitOfWork(InMemoryEventStore(), InMemoryBus())
        >>> async with unit_of_work.begin() as repository:
        ...     greeter = await repository.get(Greeter, command.target)
        ...     greeter.greet_person(command.name)
    """

    __slots__ = ("event_store", "bus")

    def __init__(self, event_store: EventStore, bus: Bus):
        self.event_store = event_store
        self.bus = bus

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[Repository]:
        repository = Repository(self.event_store, self.bus)

        try:
            yield repository
        except BaseException:
            repository.discard()
            raise

        await repository.flush()
