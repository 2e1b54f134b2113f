"""Ledger repository – BankAccount persistence through an EventStore."""

from __future__ import annotations

from event_ledger.application.event_sourcing.repository import EventSourcedRepository
from event_ledger.application.event_sourcing.store import EventStore
from event_ledger.kernel.time.clock import Clock, SystemClock
from event_ledger.ledger.account import BankAccount


class BankAccountRepository(EventSourcedRepository[BankAccount]):
    """Loads and saves :class:`BankAccount` aggregates.

    *clock* is handed to every rebuilt account; it only feeds the
    informational ``closed_at`` field.
    """

    def __init__(self, store: EventStore, clock: Clock | None = None) -> None:
        super().__init__(store)
        self._clock: Clock = clock or SystemClock()

    def _aggregate_class(self) -> type[BankAccount]:
        return BankAccount

    def _create_empty(self) -> BankAccount:
        return BankAccount(clock=self._clock)


__all__ = ["BankAccountRepository"]
