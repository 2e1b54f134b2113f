"""Application event sourcing – EventSourcedAggregate base class."""

from __future__ import annotations

import abc
import dataclasses
from typing import Generic, TypeVar

from event_ledger.kernel.ddd.aggregate import AggregateRoot
from event_ledger.kernel.ddd.domain_event import DomainEvent


@dataclasses.dataclass(frozen=True, kw_only=True)
class AggregateState:
    """Base for derived aggregate state. ``id`` stays ``None`` until creation."""

    id: str | None = None


S = TypeVar("S", bound=AggregateState)


class EventSourcedAggregate(AggregateRoot, Generic[S]):
    """Aggregate root whose whole state is a fold over its events.

    The fold is the only extension point: subclasses provide
    :meth:`initial_state` and :meth:`evolve`. State objects are frozen
    dataclasses, so a reference to :attr:`state` is already a snapshot.

    Example::

        @dataclasses.dataclass(frozen=True, kw_only=True)
        class OrderState(AggregateState):
            status: str = "NEW"

        class Order(EventSourcedAggregate[OrderState]):
            @classmethod
            def initial_state(cls) -> OrderState:
                return OrderState()

            def evolve(self, state: OrderState, event: DomainEvent) -> OrderState:
                match event:
                    case OrderPlaced(order_id=order_id):
                        return dataclasses.replace(state, id=order_id, status="PLACED")
                    case _:
                        raise TypeError(f"Order cannot apply {event.type_tag}")
    """

    def __init__(self) -> None:
        super().__init__()
        self._state: S = self.initial_state()

    @classmethod
    @abc.abstractmethod
    def initial_state(cls) -> S:
        """State of an empty, never-loaded aggregate."""

    @abc.abstractmethod
    def evolve(self, state: S, event: DomainEvent) -> S:
        """Return the state that results from applying *event* to *state*.

        Must depend only on its arguments so that replay is deterministic.
        """

    @classmethod
    def aggregate_type(cls) -> str:
        """Name used to tag stored events (defaults to the class name)."""
        return cls.__name__

    def _when(self, event: DomainEvent) -> None:
        self._state = self.evolve(self._state, event)

    @property
    def state(self) -> S:
        return self._state

    def snapshot(self) -> S:
        """Current state; frozen, so safe to keep after further events."""
        return self._state

    @property
    def id(self) -> str | None:
        return self._state.id

    @property
    def is_born(self) -> bool:
        """``True`` once the creation event has been applied."""
        return self._state.id is not None

    def __repr__(self) -> str:  # pragma: no cover
        return f"{type(self).__name__}(id={self.id!r}, version={self.version})"


__all__ = ["AggregateState", "EventSourcedAggregate"]
