"""Unit tests for the SQLAlchemy event store adapter.

Uses an in-memory SQLite database via *aiosqlite* – no running server needed.
"""
from __future__ import annotations

import asyncio
import dataclasses
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import MetaData, UniqueConstraint

from event_ledger.adapters.sqlalchemy import (
    SQLAlchemyEventStore,
    SqlAlchemySessionFactory,
    event_store_table,
)
from event_ledger.application.event_sourcing import (
    EventTypeRegistry,
    JsonEventCodec,
    OptimisticConcurrencyError,
)
from event_ledger.kernel.ddd import DomainEvent
from event_ledger.kernel.errors import UnknownEventTypeError
from event_ledger.kernel.time import FrozenClock
from event_ledger.ledger import ACCOUNT_EVENTS, BankAccount, BankAccountRepository

DB_URL = "sqlite+aiosqlite:///:memory:"
STORED_AT = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)


@dataclasses.dataclass(frozen=True, eq=False, kw_only=True)
class NoteAdded(DomainEvent):
    note_id: str
    text: str


@dataclasses.dataclass(frozen=True, eq=False, kw_only=True)
class NoteArchived(DomainEvent):
    note_id: str


def _codec() -> JsonEventCodec:
    return JsonEventCodec(EventTypeRegistry(NoteAdded, NoteArchived))


async def _setup(table_name: str = "event_store") -> tuple[SqlAlchemySessionFactory, SQLAlchemyEventStore]:
    factory = SqlAlchemySessionFactory(DB_URL)
    store = SQLAlchemyEventStore(
        factory, _codec(), clock=FrozenClock(STORED_AT), table_name=table_name
    )
    await store.create_table(factory.engine)
    return factory, store


# ---------------------------------------------------------------------------
# Table definition
# ---------------------------------------------------------------------------


class TestEventStoreTable:
    def test_columns(self) -> None:
        table = event_store_table("events", MetaData())
        assert set(table.c.keys()) == {
            "id",
            "aggregate_id",
            "aggregate_type",
            "type_tag",
            "payload",
            "version",
            "occurred_at",
            "stored_at",
        }
        assert [c.name for c in table.primary_key.columns] == ["id"]

    def test_unique_aggregate_version(self) -> None:
        table = event_store_table("events", MetaData())
        uniques = [c for c in table.constraints if isinstance(c, UniqueConstraint)]
        assert [sorted(col.name for col in u.columns) for u in uniques] == [
            ["aggregate_id", "version"]
        ]

    def test_aggregate_type_index(self) -> None:
        table = event_store_table("events", MetaData())
        assert any(
            [c.name for c in index.columns] == ["aggregate_type"] for index in table.indexes
        )


# ---------------------------------------------------------------------------
# SqlAlchemySessionFactory
# ---------------------------------------------------------------------------


class TestSessionFactory:
    def test_memory_database_shared_between_sessions(self) -> None:
        async def run() -> None:
            factory, store = await _setup()
            await store.append("n-1", "Note", [NoteAdded(note_id="n-1", text="hi")], 0)
            assert len(await store.list_events("n-1")) == 1
            await factory.dispose()

        asyncio.run(run())

    def test_returns_session(self) -> None:
        async def run() -> None:
            factory = SqlAlchemySessionFactory(DB_URL)
            async with factory() as session:
                assert session is not None
            await factory.dispose()

        asyncio.run(run())


# ---------------------------------------------------------------------------
# SQLAlchemyEventStore
# ---------------------------------------------------------------------------


class TestSQLAlchemyEventStore:
    def test_append_and_list(self) -> None:
        async def run() -> None:
            factory, store = await _setup()
            added = NoteAdded(note_id="n-1", text="hello")
            archived = NoteArchived(note_id="n-1")
            await store.append("n-1", "Note", [added, archived], 0)

            entries = await store.list_events("n-1")
            assert [e.version for e in entries] == [1, 2]
            assert [e.type_tag for e in entries] == ["NoteAdded", "NoteArchived"]
            assert entries[0].id == added.event_id
            assert entries[0].aggregate_type == "Note"
            assert entries[0].stored_at == STORED_AT
            assert entries[0].occurred_at == added.occurred_at
            await factory.dispose()

        asyncio.run(run())

    def test_load_decodes(self) -> None:
        async def run() -> None:
            factory, store = await _setup()
            added = NoteAdded(note_id="n-1", text="hello")
            await store.append("n-1", "Note", [added], 0)
            [event] = await store.load("n-1")
            assert isinstance(event, NoteAdded)
            assert event.event_id == added.event_id
            assert event.text == "hello"
            assert event.occurred_at == added.occurred_at
            await factory.dispose()

        asyncio.run(run())

    def test_load_empty_stream(self) -> None:
        async def run() -> None:
            factory, store = await _setup()
            assert await store.load("missing") == []
            assert await store.current_version("missing") == 0
            await factory.dispose()

        asyncio.run(run())

    def test_empty_append_is_noop(self) -> None:
        async def run() -> None:
            factory, store = await _setup()
            await store.append("n-1", "Note", [], 0)
            assert await store.current_version("n-1") == 0
            await factory.dispose()

        asyncio.run(run())

    def test_second_append_continues_versions(self) -> None:
        async def run() -> None:
            factory, store = await _setup()
            await store.append("n-1", "Note", [NoteAdded(note_id="n-1", text="a")], 0)
            await store.append("n-1", "Note", [NoteArchived(note_id="n-1")], 1)
            assert await store.current_version("n-1") == 2
            await factory.dispose()

        asyncio.run(run())

    def test_optimistic_concurrency_error(self) -> None:
        async def run() -> None:
            factory, store = await _setup()
            await store.append("n-1", "Note", [NoteAdded(note_id="n-1", text="a")], 0)
            with pytest.raises(OptimisticConcurrencyError) as info:
                await store.append("n-1", "Note", [NoteArchived(note_id="n-1")], 0)
            assert info.value.actual == 1
            assert await store.current_version("n-1") == 1
            await factory.dispose()

        asyncio.run(run())

    def test_base_version_ahead_of_stream_rejected(self) -> None:
        async def run() -> None:
            factory, store = await _setup()
            with pytest.raises(OptimisticConcurrencyError):
                await store.append("n-1", "Note", [NoteAdded(note_id="n-1", text="a")], 3)
            assert await store.list_events("n-1") == []
            await factory.dispose()

        asyncio.run(run())

    def test_list_aggregate_ids(self) -> None:
        async def run() -> None:
            factory, store = await _setup()
            await store.append("n-1", "Note", [NoteAdded(note_id="n-1", text="a")], 0)
            await store.append("n-1", "Note", [NoteArchived(note_id="n-1")], 1)
            await store.append("n-2", "Note", [NoteAdded(note_id="n-2", text="b")], 0)
            await store.append("x-1", "Other", [NoteAdded(note_id="x-1", text="c")], 0)
            assert await store.list_aggregate_ids("Note") == {"n-1", "n-2"}
            await factory.dispose()

        asyncio.run(run())

    def test_unknown_type_tag_is_fatal(self) -> None:
        async def run() -> None:
            factory, store = await _setup()
            await store.append("n-1", "Note", [NoteAdded(note_id="n-1", text="a")], 0)
            reader = SQLAlchemyEventStore(factory, JsonEventCodec(EventTypeRegistry(NoteArchived)))
            with pytest.raises(UnknownEventTypeError):
                await reader.load("n-1")
            await factory.dispose()

        asyncio.run(run())

    def test_custom_table_name(self) -> None:
        async def run() -> None:
            factory, store = await _setup("ledger_events")
            assert store.table.name == "ledger_events"
            await store.append("n-1", "Note", [NoteAdded(note_id="n-1", text="a")], 0)
            assert await store.current_version("n-1") == 1
            await factory.dispose()

        asyncio.run(run())


# ---------------------------------------------------------------------------
# Concurrent saves and cancellation
# ---------------------------------------------------------------------------


def _account(holder: str) -> BankAccount:
    return BankAccount.open(holder, Decimal("1")).unwrap()


async def _ledger(url: str = DB_URL) -> tuple[SqlAlchemySessionFactory, BankAccountRepository]:
    factory = SqlAlchemySessionFactory(url)
    store = SQLAlchemyEventStore(factory, JsonEventCodec(ACCOUNT_EVENTS))
    await store.create_table(factory.engine)
    return factory, BankAccountRepository(store)


class TestConcurrentSaves:
    def test_every_concurrent_save_is_stored(self) -> None:
        async def run() -> None:
            factory, repo = await _ledger()
            accounts = [_account(f"Holder {i}") for i in range(5)]
            await asyncio.gather(*(repo.save(a) for a in accounts))

            assert await repo.get_aggregate_ids() == {a.id for a in accounts}
            for account in accounts:
                assert [e.version for e in await repo.get_events(account.id)] == [1]  # type: ignore[arg-type]
            await factory.dispose()

        asyncio.run(run())

    def test_concurrent_multi_event_batches_stay_whole(self) -> None:
        async def run() -> None:
            factory, repo = await _ledger()
            accounts = [_account(f"Holder {i}") for i in range(4)]
            for account in accounts:
                account.deposit(Decimal("5"))
                account.withdraw(Decimal("2"))
            await asyncio.gather(*(repo.save(a) for a in accounts))

            for account in accounts:
                loaded = await repo.get_aggregate(account.id)  # type: ignore[arg-type]
                assert loaded is not None
                assert loaded.version == 3
                assert loaded.state.balance == Decimal("4")
            await factory.dispose()

        asyncio.run(run())

    def test_stale_writers_on_one_account(self) -> None:
        async def run() -> None:
            factory, repo = await _ledger()
            account = _account("Alice")
            await repo.save(account)
            first = await repo.get_aggregate(account.id)  # type: ignore[arg-type]
            second = await repo.get_aggregate(account.id)  # type: ignore[arg-type]
            assert first is not None and second is not None
            first.deposit(Decimal("1"))
            second.deposit(Decimal("2"))

            outcomes = await asyncio.gather(
                repo.save(first), repo.save(second), return_exceptions=True
            )
            assert outcomes[0] is None
            assert isinstance(outcomes[1], OptimisticConcurrencyError)
            assert [e.version for e in await repo.get_events(account.id)] == [1, 2]  # type: ignore[arg-type]
            assert len(second.uncommitted_events) == 1
            await factory.dispose()

        asyncio.run(run())


class TestCancelledAppend:
    def test_cancel_after_insert_leaves_no_rows(self, tmp_path: Path) -> None:
        url = f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}"

        async def run() -> None:
            factory, repo = await _ledger(url)
            inserted = asyncio.Event()

            def stalling_sessions() -> Any:
                session = factory()
                execute = session.execute

                async def execute_then_stall(statement: Any, *args: Any, **kwargs: Any) -> Any:
                    result = await execute(statement, *args, **kwargs)
                    if statement.is_insert:
                        inserted.set()
                        await asyncio.Event().wait()
                    return result

                session.execute = execute_then_stall  # type: ignore[method-assign]
                return session

            stalling = BankAccountRepository(
                SQLAlchemyEventStore(stalling_sessions, JsonEventCodec(ACCOUNT_EVENTS))
            )
            account = _account("Alice")
            account.deposit(Decimal("10"))
            account.withdraw(Decimal("3"))

            task = asyncio.create_task(stalling.save(account))
            await inserted.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

            assert await repo.get_events(account.id) == []  # type: ignore[arg-type]
            assert len(account.uncommitted_events) == 3
            assert account.version == 3

            await repo.save(account)
            assert [e.version for e in await repo.get_events(account.id)] == [1, 2, 3]  # type: ignore[arg-type]
            await factory.dispose()

        asyncio.run(run())
