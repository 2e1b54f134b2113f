"""DDD building blocks – public re-export surface."""

from event_ledger.kernel.ddd.aggregate import AggregateRoot
from event_ledger.kernel.ddd.domain_event import DomainEvent

__all__ = ["AggregateRoot", "DomainEvent"]
