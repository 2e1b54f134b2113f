"""Application – Event Sourcing."""

from event_ledger.application.event_sourcing.aggregate import (
    AggregateState,
    EventSourcedAggregate,
)
from event_ledger.application.event_sourcing.codec import (
    EventTypeRegistry,
    JsonEventCodec,
)
from event_ledger.application.event_sourcing.projector import (
    Projector,
    StateHistoryProjector,
    Timeline,
    VersionedState,
)
from event_ledger.application.event_sourcing.repository import EventSourcedRepository
from event_ledger.application.event_sourcing.store import (
    EventStore,
    InMemoryEventStore,
    OptimisticConcurrencyError,
)
from event_ledger.application.event_sourcing.stored_event import StoredEvent

__all__ = [
    "AggregateState",
    "EventSourcedAggregate",
    "EventSourcedRepository",
    "EventStore",
    "EventTypeRegistry",
    "InMemoryEventStore",
    "JsonEventCodec",
    "OptimisticConcurrencyError",
    "Projector",
    "StateHistoryProjector",
    "StoredEvent",
    "Timeline",
    "VersionedState",
]
