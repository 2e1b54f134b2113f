"""
event_ledger – event-sourced aggregates, an append-only event store and
a bank-account ledger built on them.

Import path convention::

    from event_ledger.kernel.errors import DomainError
    from event_ledger.application.event_sourcing import EventSourcedAggregate
    from event_ledger.ledger import LedgerService
    from event_ledger.bootstrap import LedgerRuntime
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
