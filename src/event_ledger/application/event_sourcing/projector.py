"""Application event sourcing – projectors and the state-history builder."""

from __future__ import annotations

import abc
import dataclasses
from typing import Callable, Generic, TypeVar

from event_ledger.application.event_sourcing.aggregate import (
    AggregateState,
    EventSourcedAggregate,
)
from event_ledger.application.event_sourcing.codec import JsonEventCodec
from event_ledger.application.event_sourcing.stored_event import StoredEvent
from event_ledger.kernel.ddd.domain_event import DomainEvent
from event_ledger.kernel.errors import (
    InfrastructureError,
    InvalidVersionError,
    NotFoundError,
)
from event_ledger.kernel.types.result import Err, Ok, Result

E = TypeVar("E")
S = TypeVar("S", bound=AggregateState)


class Projector(Generic[E], abc.ABC):
    """Updates a read model by processing a stream of stored events.

    Subclass and implement :meth:`project` to handle each :class:`StoredEvent`.
    The type parameter *E* is the read-model entry type this projector produces.
    """

    @abc.abstractmethod
    async def project(self, event: StoredEvent) -> None:
        """Process a single stored event and update the read model."""

    async def project_all(self, events: list[StoredEvent]) -> None:
        """Process a list of events in order."""
        for event in events:
            await self.project(event)


@dataclasses.dataclass(frozen=True)
class VersionedState(Generic[S]):
    """Aggregate state as of applying events ``1..version``."""

    version: int
    state: S


@dataclasses.dataclass(frozen=True)
class Timeline(Generic[S]):
    """Current state, the decoded log and the state after every version.

    ``entries`` holds the stored form of ``events`` (same order).
    """

    current: VersionedState[S]
    events: list[DomainEvent]
    history: list[VersionedState[S]]
    entries: list[StoredEvent]


class StateHistoryProjector(Projector[VersionedState[S]]):
    """Replay a stored stream into a fresh aggregate, one event at a time.

    After each ``apply`` the aggregate's state is captured, so ``history[k-1]``
    is the state at version ``k``. Entries must arrive in contiguous version
    order starting at 1.

    Example::

        projector = StateHistoryProjector(BankAccount, codec)
        await projector.project_all(await store.list_events(account_id))
        projector.history[0].state   # state right after creation
    """

    def __init__(
        self,
        aggregate_factory: Callable[[], EventSourcedAggregate[S]],
        codec: JsonEventCodec,
    ) -> None:
        self._factory = aggregate_factory
        self._codec = codec
        self.reset()

    def reset(self) -> None:
        """Start over from an empty aggregate."""
        self._aggregate = self._factory()
        self.history: list[VersionedState[S]] = []
        self.events: list[DomainEvent] = []
        self.entries: list[StoredEvent] = []

    async def project(self, event: StoredEvent) -> None:
        expected = self._aggregate.version + 1
        if event.version != expected:
            raise InfrastructureError(
                f"Stream '{event.aggregate_id}' is not contiguous: "
                f"expected version {expected}, got {event.version}",
                detail={"aggregate_id": event.aggregate_id, "expected": expected},
            )
        domain_event = self._codec.decode(event.type_tag, event.payload)
        self._aggregate.apply(domain_event)
        self.events.append(domain_event)
        self.entries.append(event)
        self.history.append(VersionedState(self._aggregate.version, self._aggregate.state))

    async def build(self, stored_events: list[StoredEvent]) -> list[VersionedState[S]]:
        """Replay *stored_events* from scratch and return the state after each one."""
        self.reset()
        await self.project_all(stored_events)
        return list(self.history)

    async def state_at(
        self, stored_events: list[StoredEvent], version: int
    ) -> Result[VersionedState[S], NotFoundError | InvalidVersionError]:
        """State after replaying exactly events ``1..version``."""
        history = await self.build(stored_events)
        if not history:
            return Err(NotFoundError(self._aggregate.aggregate_type()))
        if version < 1 or version > len(history):
            return Err(InvalidVersionError(version, len(history)))
        return Ok(history[version - 1])

    def timeline(self) -> Timeline[S]:
        """Bundle what has been projected so far; needs at least one event."""
        if not self.history:
            raise ValueError("timeline() requires at least one projected event")
        return Timeline(
            current=self.history[-1],
            events=list(self.events),
            history=list(self.history),
            entries=list(self.entries),
        )


__all__ = ["Projector", "StateHistoryProjector", "Timeline", "VersionedState"]
