from collections.abc import Iterator
from typing import TYPE_CHECKING

from ulid import ULID

from ...domain import IllegalSessionStateError

if TYPE_CHECKING:
    from ...domain import AggregateRoot


class Session:
    """Identity map of the aggregates taking part in one unit of work.

    The session maps each stable aggregate id to exactly one in-memory
    instance. Loaded aggregates and newly added ones share the same map,
    so a handler can never end up with two live copies of one aggregate.

    A session is owned by a single repository and is not meant to be used
    from several tasks at once.
    """

    __slots__ = ("_aggregates", "_new_ids")

    def __init__(self) -> None:
        self._aggregates: dict[ULID, "AggregateRoot"] = {}
        self._new_ids: set[ULID] = set()

    def __len__(self) -> int:
        return len(self._aggregates)

    def __contains__(self, aggregate_id: object) -> bool:
        return aggregate_id in self._aggregates

    def __iter__(self) -> Iterator["AggregateRoot"]:
        return iter(list(self._aggregates.values()))

    def get(self, aggregate_id: ULID) -> "AggregateRoot | None":
        return self._aggregates.get(aggregate_id)

    def track_loaded(self, aggregate: "AggregateRoot") -> None:
        """Register an aggregate that was rebuilt from the event store."""
        self._register(aggregate)

    def track_new(self, aggregate: "AggregateRoot") -> None:
        """Register an aggregate created during this unit of work."""
        if aggregate.id not in self._aggregates:
            self._new_ids.add(aggregate.id)
        self._register(aggregate)

    def is_new(self, aggregate_id: ULID) -> bool:
        return aggregate_id in self._new_ids

    def _register(self, aggregate: "AggregateRoot") -> None:
        existing = self._aggregates.get(aggregate.id)
        if existing is None:
            self._aggregates[aggregate.id] = aggregate
        elif existing is not aggregate:
            raise IllegalSessionStateError(
                f"Session already holds a different instance of aggregate {aggregate.id}"
            )
