"""Application event sourcing – StoredEvent."""

from __future__ import annotations

import dataclasses
from datetime import datetime


@dataclasses.dataclass(frozen=True)
class StoredEvent:
    """An event as persisted in the event store (one row per event)."""

    id: str
    """Equal to the domain event's ``event_id``."""

    aggregate_id: str

    aggregate_type: str
    """Stable name of the aggregate kind, e.g. ``"BankAccount"``."""

    type_tag: str
    """Discriminator used to pick the event class when decoding."""

    payload: str
    """Serialised event data (JSON text produced by the codec)."""

    version: int
    """1-based, contiguous sequence number within the aggregate's stream."""

    occurred_at: datetime
    """When the domain event was created. Informational only."""

    stored_at: datetime
    """When the store persisted the entry. Informational only."""


__all__ = ["StoredEvent"]
