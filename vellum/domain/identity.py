"""Versioned identities for aggregate roots."""

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID


class VersionedId(BaseModel):
    """Identity of an aggregate at a specific point in its history.

    A versioned id pairs the stable identifier of an aggregate with the
    version the aggregate had when the id was observed. Commands carry a
    versioned id so the repository can detect that the aggregate changed
    after the caller last looked at it.

    VersionedId is an immutable value: equality and hashing are structural
    over ``(id, version)``, and deriving a new version never touches the
    original.

    Attributes:
        id: Stable 128-bit identifier shared by every version of the aggregate.
        version: Number of events applied to the aggregate. Never negative.

    Examples:
        >>> first = VersionedId.random()
        >>> first.version
        0
        >>> second = first.next_version()
        >>> second.id == first.id, second.version
        (True, 1)
        >>> second == first.with_version(1)
        True
    """

    model_config = ConfigDict(frozen=True)

    id: ULID = Field(default_factory=ULID)
    version: int = Field(default=0, ge=0)

    @classmethod
    def random(cls) -> "VersionedId":
        """Create an identity for a brand new aggregate at version 0."""
        return cls(id=ULID(), version=0)

    def with_version(self, version: int) -> "VersionedId":
        """Return the identity of the same aggregate at ``version``.

        Raises:
            pydantic.ValidationError: If ``version`` is negative.
        """
        return VersionedId(id=self.id, version=version)

    def next_version(self) -> "VersionedId":
        """Return the identity of the same aggregate one version later."""
        return VersionedId(id=self.id, version=self.version + 1)

    def __str__(self) -> str:
        return f"{self.id}@{self.version}"
