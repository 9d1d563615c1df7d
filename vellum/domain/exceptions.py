"""Exceptions raised by repositories and event stores."""

from ulid import ULID


class AggregateRootNotFoundError(Exception):
    """Raised when no aggregate of the requested type exists for an id.

    Attributes:
        aggregate_type: Fully qualified class name that was requested.
        aggregate_id: Stable id that was requested.
    """

    def __init__(self, aggregate_type: str, aggregate_id: ULID):
        super().__init__(f"Aggregate root {aggregate_type} with id {aggregate_id} not found")
        self.aggregate_type = aggregate_type
        self.aggregate_id = aggregate_id


class OptimisticLockingError(Exception):
    """Raised when an optimistic concurrency check fails.

    This exception indicates that the aggregate was modified after the
    version the caller based its decision on, either by another unit of
    work or because the caller holds a stale version.
    """

    pass


class IllegalSessionStateError(RuntimeError):
    """Raised when a session would hold two instances of one aggregate."""

    pass
