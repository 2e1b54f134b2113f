"""String-based identifier value object."""

from __future__ import annotations

import dataclasses
import uuid

from event_ledger.kernel.errors.domain import ValidationError


@dataclasses.dataclass(frozen=True, slots=True)
class EntityId:
    """Aggregate identifier backed by a UUID string.

    Examples::

        eid = EntityId.generate()           # new random id
        eid = EntityId.from_str("abc-123")  # from existing string
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValidationError("EntityId must not be empty", field="id")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> "EntityId":
        """Return a new random ``EntityId``."""
        return cls(str(uuid.uuid4()))

    @classmethod
    def from_str(cls, value: str) -> "EntityId":
        return cls(value)


def new_id() -> str:
    """Shorthand for ``str(EntityId.generate())``."""
    return str(EntityId.generate())


__all__ = ["EntityId", "new_id"]
