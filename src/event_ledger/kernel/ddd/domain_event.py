"""Domain events – immutable, uniquely identified facts."""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any, ClassVar

from event_ledger.kernel.time.clock import utc_now
from event_ledger.kernel.types.ids import new_id


@dataclasses.dataclass(frozen=True, eq=False, kw_only=True)
class DomainEvent:
    """Base class for domain events.

    Subclasses declare their payload as keyword-only dataclass fields and a
    ``type_tag`` (defaults to the class name). Always decorate subclasses
    with ``eq=False`` so equality stays identity-based (by ``event_id``).

    Example::

        @dataclasses.dataclass(frozen=True, eq=False, kw_only=True)
        class MoneyDeposited(DomainEvent):
            type_tag: ClassVar[str] = "MoneyDeposited"

            account_id: str
            amount: Decimal
    """

    type_tag: ClassVar[str] = ""

    event_id: str = dataclasses.field(default_factory=new_id)
    occurred_at: datetime = dataclasses.field(default_factory=utc_now)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if not cls.__dict__.get("type_tag"):
            cls.type_tag = cls.__name__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DomainEvent):
            return NotImplemented
        return self.event_id == other.event_id

    def __hash__(self) -> int:
        return hash(self.event_id)


__all__ = ["DomainEvent"]
