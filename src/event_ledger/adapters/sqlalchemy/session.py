"""SQLAlchemy adapter – SqlAlchemySessionFactory."""
from __future__ import annotations

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool

from event_ledger.config.settings import LedgerSettings


class SqlAlchemySessionFactory:
    """Creates async SQLAlchemy sessions from an engine URL.

    An in-memory SQLite database lives only as long as its one connection,
    so such a URL gets a pool of exactly one connection. Sessions queue for
    it instead of sharing it, and each transaction runs on its own.
    """

    def __init__(self, database_url: str, **engine_kwargs: Any) -> None:
        url = make_url(database_url)
        if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
            engine_kwargs.setdefault("poolclass", AsyncAdaptedQueuePool)
            engine_kwargs.setdefault("pool_size", 1)
            engine_kwargs.setdefault("max_overflow", 0)
        self._engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: LedgerSettings) -> "SqlAlchemySessionFactory":
        return cls(settings.database_url, echo=settings.sql_echo)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    def __call__(self) -> AsyncSession:
        return self._session_factory()

    async def dispose(self) -> None:
        await self._engine.dispose()


__all__ = ["SqlAlchemySessionFactory"]
