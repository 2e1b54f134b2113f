"""Infrastructure errors: I/O and payload (de)serialisation failures."""

from __future__ import annotations

from typing import Any

from event_ledger.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class SerializationError(InfrastructureError):
    """A stored payload could not be encoded or decoded."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        type_tag: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.type_tag = type_tag
        if type_tag is not None:
            self.detail.setdefault("type_tag", type_tag)


class UnknownEventTypeError(SerializationError):
    """No event class is registered for a stored ``type_tag``.

    Fatal for the read in progress: skipping the entry would corrupt replay.
    """

    default_code = "unknown_event_type"

    def __init__(self, type_tag: str) -> None:
        super().__init__(f"Unknown event type: {type_tag!r}", type_tag=type_tag)


__all__ = [
    "InfrastructureError",
    "SerializationError",
    "UnknownEventTypeError",
]
