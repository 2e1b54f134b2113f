"""Application event sourcing – EventStore port and InMemoryEventStore."""

from __future__ import annotations

import abc
from typing import Sequence

from event_ledger.application.event_sourcing.codec import JsonEventCodec
from event_ledger.application.event_sourcing.stored_event import StoredEvent
from event_ledger.kernel.ddd.domain_event import DomainEvent
from event_ledger.kernel.errors import ConflictError
from event_ledger.kernel.time.clock import Clock, SystemClock
from event_ledger.observability.logging import get_logger


class OptimisticConcurrencyError(ConflictError):
    """Raised when an append's base version is not the stream's current version."""

    default_code = "concurrency_conflict"

    def __init__(self, aggregate_id: str, expected: int, actual: int | None) -> None:
        self.aggregate_id = aggregate_id
        self.expected = expected
        self.actual = actual
        found = "a concurrent write" if actual is None else f"version {actual}"
        super().__init__(
            f"Concurrency conflict on aggregate '{aggregate_id}': "
            f"expected version {expected}, found {found}",
            detail={"aggregate_id": aggregate_id, "expected": expected, "actual": actual},
        )


class EventStore(abc.ABC):
    """Port – durable append-only event log keyed by aggregate id.

    ``base_version`` passed to :meth:`append` is the version the caller's
    aggregate had before its uncommitted events were raised:

    - ``0`` for a brand-new aggregate;
    - otherwise the number of events the caller replayed.

    New events get versions ``base_version + 1 ..`` in list order. The
    store raises :class:`OptimisticConcurrencyError` if the stream has
    moved past ``base_version`` in the meantime.

    Read order is always ascending ``version``; ``occurred_at`` and
    ``stored_at`` are informational.
    """

    def __init__(self, codec: JsonEventCodec, clock: Clock | None = None) -> None:
        self._codec = codec
        self._clock: Clock = clock or SystemClock()
        self._log = get_logger(__name__, store=type(self).__name__)

    @property
    def codec(self) -> JsonEventCodec:
        return self._codec

    @abc.abstractmethod
    async def append(
        self,
        aggregate_id: str,
        aggregate_type: str,
        events: Sequence[DomainEvent],
        base_version: int,
    ) -> None:
        """Persist *events* atomically after *base_version*; no-op when empty."""

    @abc.abstractmethod
    async def list_events(self, aggregate_id: str) -> list[StoredEvent]:
        """Return the undecoded entries for *aggregate_id* in version order."""

    @abc.abstractmethod
    async def list_aggregate_ids(self, aggregate_type: str) -> set[str]:
        """Return the distinct ids of every aggregate of *aggregate_type*."""

    @abc.abstractmethod
    async def current_version(self, aggregate_id: str) -> int:
        """Return the highest stored version for *aggregate_id* (0 if none)."""

    async def load(self, aggregate_id: str) -> list[DomainEvent]:
        """Return the decoded events for *aggregate_id*; empty when unknown.

        Raises :class:`~event_ledger.kernel.errors.UnknownEventTypeError` or
        :class:`~event_ledger.kernel.errors.SerializationError` if any entry
        cannot be decoded.
        """
        return [self.decode(entry) for entry in await self.list_events(aggregate_id)]

    def decode(self, entry: StoredEvent) -> DomainEvent:
        return self._codec.decode(entry.type_tag, entry.payload)

    def _build_entries(
        self,
        aggregate_id: str,
        aggregate_type: str,
        events: Sequence[DomainEvent],
        base_version: int,
    ) -> list[StoredEvent]:
        stored_at = self._clock.now()
        entries: list[StoredEvent] = []
        for offset, event in enumerate(events, start=1):
            type_tag, payload = self._codec.encode(event)
            entries.append(
                StoredEvent(
                    id=event.event_id,
                    aggregate_id=aggregate_id,
                    aggregate_type=aggregate_type,
                    type_tag=type_tag,
                    payload=payload,
                    version=base_version + offset,
                    occurred_at=event.occurred_at,
                    stored_at=stored_at,
                )
            )
        return entries

    def _log_appended(self, entries: list[StoredEvent]) -> None:
        first, last = entries[0], entries[-1]
        self._log.info(
            "event_store.appended",
            aggregate_id=first.aggregate_id,
            aggregate_type=first.aggregate_type,
            from_version=first.version,
            to_version=last.version,
            type_tags=[e.type_tag for e in entries],
        )


class InMemoryEventStore(EventStore):
    """In-memory :class:`EventStore` for tests and local development.

    An append validates, encodes and writes its whole batch without
    suspending, so a cancelled task never leaves a partial batch behind.
    """

    def __init__(self, codec: JsonEventCodec, clock: Clock | None = None) -> None:
        super().__init__(codec, clock)
        # aggregate_id → entries ordered by version
        self._streams: dict[str, list[StoredEvent]] = {}

    async def append(
        self,
        aggregate_id: str,
        aggregate_type: str,
        events: Sequence[DomainEvent],
        base_version: int,
    ) -> None:
        if not events:
            return
        stream = self._streams.get(aggregate_id, [])
        actual_version = len(stream)
        if actual_version != base_version:
            self._log.warning(
                "event_store.conflict",
                aggregate_id=aggregate_id,
                expected=base_version,
                actual=actual_version,
            )
            raise OptimisticConcurrencyError(aggregate_id, base_version, actual_version)
        entries = self._build_entries(aggregate_id, aggregate_type, events, base_version)
        self._streams[aggregate_id] = stream + entries
        self._log_appended(entries)

    async def list_events(self, aggregate_id: str) -> list[StoredEvent]:
        return list(self._streams.get(aggregate_id, []))

    async def list_aggregate_ids(self, aggregate_type: str) -> set[str]:
        return {
            aggregate_id
            for aggregate_id, stream in self._streams.items()
            if stream and stream[0].aggregate_type == aggregate_type
        }

    async def current_version(self, aggregate_id: str) -> int:
        return len(self._streams.get(aggregate_id, []))

    def all_events(self, aggregate_id: str | None = None) -> list[StoredEvent]:
        """Return every stored entry, optionally filtered by *aggregate_id*."""
        if aggregate_id is not None:
            return list(self._streams.get(aggregate_id, []))
        return [e for stream in self._streams.values() for e in stream]


__all__ = ["EventStore", "InMemoryEventStore", "OptimisticConcurrencyError"]
