"""AggregateRoot – version counter and buffer of uncommitted events."""

from __future__ import annotations

import abc
from typing import Iterable

from event_ledger.kernel.ddd.domain_event import DomainEvent


class AggregateRoot(abc.ABC):
    """Aggregate root whose state only changes by applying events.

    ``version`` counts applied events. Events raised by domain operations
    are kept in an internal buffer until the repository confirms they were
    appended; callers only ever see a tuple copy of it.
    """

    _version: int
    _uncommitted: list[DomainEvent]

    def __init__(self) -> None:
        self._version = 0
        self._uncommitted = []

    @abc.abstractmethod
    def _when(self, event: DomainEvent) -> None:
        """Type-specific state transition for *event*. Must not touch ``version``."""

    def apply(self, event: DomainEvent) -> None:
        """Run the state transition for *event*, then bump the version."""
        self._when(event)
        self._version += 1

    def _raise_event(self, event: DomainEvent) -> None:
        """Apply a newly created event and record it as uncommitted."""
        self.apply(event)
        self._uncommitted.append(event)

    def load_from_history(self, events: Iterable[DomainEvent]) -> None:
        """Replay *events*, which must be the complete version-ordered prefix."""
        for event in events:
            self.apply(event)

    def clear_uncommitted(self) -> None:
        """Drop the buffer; only call after a confirmed durable append."""
        self._uncommitted.clear()

    @property
    def uncommitted_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._uncommitted)

    @property
    def version(self) -> int:
        return self._version


__all__ = ["AggregateRoot"]
