"""SQLAlchemy adapter – async event store and session factory."""
from event_ledger.adapters.sqlalchemy.event_store import SQLAlchemyEventStore, event_store_table
from event_ledger.adapters.sqlalchemy.session import SqlAlchemySessionFactory

__all__ = [
    "SQLAlchemyEventStore",
    "SqlAlchemySessionFactory",
    "event_store_table",
]
