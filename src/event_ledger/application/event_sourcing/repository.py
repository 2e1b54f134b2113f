"""Application event sourcing – EventSourcedRepository."""

from __future__ import annotations

import abc
from typing import Generic, TypeVar

from event_ledger.application.event_sourcing.aggregate import EventSourcedAggregate
from event_ledger.application.event_sourcing.projector import (
    StateHistoryProjector,
    Timeline,
    VersionedState,
)
from event_ledger.application.event_sourcing.store import EventStore
from event_ledger.application.event_sourcing.stored_event import StoredEvent
from event_ledger.kernel.errors import InvalidVersionError, NotFoundError
from event_ledger.kernel.types.ids import EntityId
from event_ledger.kernel.types.result import Err, Ok, Result
from event_ledger.observability.logging import get_logger

T = TypeVar("T", bound=EventSourcedAggregate)


class EventSourcedRepository(Generic[T], abc.ABC):
    """Generic repository for event-sourced aggregates.

    This is the boundary a transport layer consumes. Subclasses implement
    :meth:`_aggregate_class` and :meth:`_create_empty`.

    Example::

        class OrderRepository(EventSourcedRepository[Order]):
            def _aggregate_class(self) -> type[Order]:
                return Order

            def _create_empty(self) -> Order:
                return Order()

        repo = OrderRepository(store=event_store)
        order = await repo.get_aggregate(order_id)
        order.cancel(...)
        await repo.save(order)
    """

    def __init__(self, store: EventStore) -> None:
        self._store = store
        self._log = get_logger(__name__, repository=type(self).__name__)

    @abc.abstractmethod
    def _aggregate_class(self) -> type[T]:
        """Return the concrete aggregate type (names its stored entries)."""

    @abc.abstractmethod
    def _create_empty(self) -> T:
        """Return a blank, unborn aggregate instance."""

    @property
    def aggregate_type(self) -> str:
        return self._aggregate_class().aggregate_type()

    @property
    def store(self) -> EventStore:
        return self._store

    async def save(self, aggregate: T) -> None:
        """Append pending events to the store, then clear the buffer."""
        events = aggregate.uncommitted_events
        if not events:
            return
        if aggregate.id is None:
            raise ValueError("Cannot save an aggregate that has no identity yet")

        base_version = aggregate.version - len(events)
        await self._store.append(aggregate.id, self.aggregate_type, events, base_version)
        aggregate.clear_uncommitted()

    async def get_aggregate(self, aggregate_id: str | EntityId) -> T | None:
        """Replay stored events; returns ``None`` when the stream is empty."""
        events = await self._store.load(str(aggregate_id))
        if not events:
            return None
        aggregate = self._create_empty()
        aggregate.load_from_history(events)
        return aggregate

    async def get_events(self, aggregate_id: str | EntityId) -> list[StoredEvent]:
        return await self._store.list_events(str(aggregate_id))

    async def get_aggregate_ids(self) -> set[str]:
        return await self._store.list_aggregate_ids(self.aggregate_type)

    async def get_timeline(
        self, aggregate_id: str | EntityId
    ) -> Result[Timeline, NotFoundError]:
        """Current state, decoded events and per-version history."""
        projector = await self._project(str(aggregate_id))
        if not projector.history:
            return Err(NotFoundError(self.aggregate_type, str(aggregate_id)))
        return Ok(projector.timeline())

    async def get_state_at_version(
        self, aggregate_id: str | EntityId, version: int
    ) -> Result[VersionedState, NotFoundError | InvalidVersionError]:
        """State after replaying exactly events ``1..version``."""
        projector = StateHistoryProjector(self._create_empty, self._store.codec)
        entries = await self._store.list_events(str(aggregate_id))
        result = await projector.state_at(entries, version)
        match result:
            case Err(NotFoundError()):
                return Err(NotFoundError(self.aggregate_type, str(aggregate_id)))
            case Err(InvalidVersionError() as error):
                self._log.info(
                    "repository.invalid_version",
                    aggregate_id=str(aggregate_id),
                    requested=version,
                    max_version=error.max_version,
                )
        return result

    async def _project(self, aggregate_id: str) -> StateHistoryProjector:
        projector = StateHistoryProjector(self._create_empty, self._store.codec)
        await projector.project_all(await self._store.list_events(aggregate_id))
        return projector


__all__ = ["EventSourcedRepository"]
