"""SQLAlchemy adapter – SQLAlchemyEventStore."""
from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Callable, Sequence

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
    insert,
    select,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from event_ledger.application.event_sourcing.codec import JsonEventCodec
from event_ledger.application.event_sourcing.store import (
    EventStore,
    OptimisticConcurrencyError,
)
from event_ledger.application.event_sourcing.stored_event import StoredEvent
from event_ledger.kernel.ddd.domain_event import DomainEvent
from event_ledger.kernel.time.clock import Clock


def event_store_table(name: str = "event_store", metadata: MetaData | None = None) -> Table:
    """Return the ``Table`` holding one row per stored event."""
    return Table(
        name,
        metadata if metadata is not None else MetaData(),
        Column("id", String(64), primary_key=True),
        Column("aggregate_id", String(64), nullable=False),
        Column("aggregate_type", String(256), nullable=False),
        Column("type_tag", String(256), nullable=False),
        Column("payload", Text, nullable=False),
        Column("version", Integer, nullable=False),
        Column("occurred_at", DateTime(timezone=True), nullable=False),
        Column("stored_at", DateTime(timezone=True), nullable=False),
        UniqueConstraint("aggregate_id", "version", name=f"uq_{name}_aggregate_version"),
        Index(f"ix_{name}_aggregate_type", "aggregate_type"),
    )


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone=True columns.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class SQLAlchemyEventStore(EventStore):
    """Append-only event store on SQLAlchemy Core (async).

    Each :meth:`append` runs in its own transaction: the base-version
    check and the multi-row insert either commit together or roll back
    together (including on task cancellation). The ``(aggregate_id,
    version)`` pair is ``UNIQUE``, so a writer that slips past the version
    check still loses to the database, and that ``IntegrityError`` is
    surfaced as :class:`OptimisticConcurrencyError`.

    The store does not migrate the table. Call :meth:`create_table` once
    (app startup or a migration) before using it.

    Parameters
    ----------
    session_factory:
        Zero-argument callable returning an :class:`AsyncSession`, e.g.
        :class:`~event_ledger.adapters.sqlalchemy.SqlAlchemySessionFactory`.
    codec:
        Codec used to encode appended events and decode loaded ones.
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        codec: JsonEventCodec,
        clock: Clock | None = None,
        table_name: str = "event_store",
    ) -> None:
        super().__init__(codec, clock)
        self._sessions = session_factory
        self._metadata = MetaData()
        self._table = event_store_table(table_name, self._metadata)

    @property
    def table(self) -> Table:
        return self._table

    async def create_table(self, bind: Any) -> None:
        """Create the events table if it does not exist.

        Parameters
        ----------
        bind:
            An :class:`~sqlalchemy.ext.asyncio.AsyncEngine`.
        """
        async with bind.begin() as conn:
            await conn.run_sync(self._metadata.create_all)

    async def append(
        self,
        aggregate_id: str,
        aggregate_type: str,
        events: Sequence[DomainEvent],
        base_version: int,
    ) -> None:
        if not events:
            return
        entries = self._build_entries(aggregate_id, aggregate_type, events, base_version)
        rows = [
            {
                "id": e.id,
                "aggregate_id": e.aggregate_id,
                "aggregate_type": e.aggregate_type,
                "type_tag": e.type_tag,
                "payload": e.payload,
                "version": e.version,
                "occurred_at": e.occurred_at,
                "stored_at": e.stored_at,
            }
            for e in entries
        ]

        async with self._sessions() as session:
            async with session.begin():
                actual_version = await self._max_version(session, aggregate_id)
                if actual_version != base_version:
                    self._log.warning(
                        "event_store.conflict",
                        aggregate_id=aggregate_id,
                        expected=base_version,
                        actual=actual_version,
                    )
                    raise OptimisticConcurrencyError(aggregate_id, base_version, actual_version)
                try:
                    await session.execute(insert(self._table), rows)
                except IntegrityError as exc:
                    self._log.warning(
                        "event_store.conflict",
                        aggregate_id=aggregate_id,
                        expected=base_version,
                        actual=None,
                    )
                    raise OptimisticConcurrencyError(aggregate_id, base_version, None) from exc

        self._log_appended(entries)

    async def list_events(self, aggregate_id: str) -> list[StoredEvent]:
        t = self._table
        stmt = select(t).where(t.c.aggregate_id == aggregate_id).order_by(t.c.version)
        async with self._sessions() as session:
            rows = (await session.execute(stmt)).fetchall()
        return [
            StoredEvent(
                id=row.id,
                aggregate_id=row.aggregate_id,
                aggregate_type=row.aggregate_type,
                type_tag=row.type_tag,
                payload=row.payload,
                version=row.version,
                occurred_at=_aware(row.occurred_at),
                stored_at=_aware(row.stored_at),
            )
            for row in rows
        ]

    async def list_aggregate_ids(self, aggregate_type: str) -> set[str]:
        t = self._table
        stmt = select(t.c.aggregate_id).where(t.c.aggregate_type == aggregate_type).distinct()
        async with self._sessions() as session:
            result = await session.execute(stmt)
            return set(result.scalars().all())

    async def current_version(self, aggregate_id: str) -> int:
        async with self._sessions() as session:
            return await self._max_version(session, aggregate_id)

    async def _max_version(self, session: AsyncSession, aggregate_id: str) -> int:
        t = self._table
        stmt = select(func.coalesce(func.max(t.c.version), 0)).where(
            t.c.aggregate_id == aggregate_id
        )
        return int((await session.execute(stmt)).scalar_one())


__all__ = ["SQLAlchemyEventStore", "event_store_table"]
