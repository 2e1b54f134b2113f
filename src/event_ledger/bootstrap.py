"""Bootstrap – wire settings, logging, store, repository and service together."""
from __future__ import annotations

from typing import Any

from event_ledger.adapters.sqlalchemy import SQLAlchemyEventStore, SqlAlchemySessionFactory
from event_ledger.application.event_sourcing.codec import JsonEventCodec
from event_ledger.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    LedgerSettings,
    SettingsFactory,
)
from event_ledger.kernel.time.clock import Clock, SystemClock
from event_ledger.ledger.events import ACCOUNT_EVENTS
from event_ledger.ledger.repository import BankAccountRepository
from event_ledger.ledger.service import LedgerService
from event_ledger.observability.logging import configure_logging, get_logger


def load_settings(env_file: str | None = None, **overrides: Any) -> LedgerSettings:
    """Read ``LEDGER_*`` settings from the environment (and *env_file* first)."""
    loaders = [DotenvSettingsLoader(env_file)] if env_file else [EnvSettingsLoader()]
    return SettingsFactory.create(LedgerSettings, loaders, overrides or None)


class LedgerRuntime:
    """Owns the database engine and the objects built on top of it.

    Usage::

        async with LedgerRuntime(load_settings()) as runtime:
            result = await runtime.service.create_account("Alice", "100")
    """

    def __init__(
        self,
        settings: LedgerSettings | None = None,
        *,
        clock: Clock | None = None,
        configure_logs: bool = True,
    ) -> None:
        self.settings = settings or LedgerSettings()
        if configure_logs:
            configure_logging(self.settings.log_level, json=self.settings.log_json)
        self._log = get_logger(__name__)

        clock = clock or SystemClock()
        self.sessions = SqlAlchemySessionFactory.from_settings(self.settings)
        self.store = SQLAlchemyEventStore(
            self.sessions,
            JsonEventCodec(ACCOUNT_EVENTS),
            clock=clock,
            table_name=self.settings.table_name,
        )
        self.repository = BankAccountRepository(self.store, clock=clock)
        self.service = LedgerService(
            self.repository,
            default_currency=self.settings.default_currency,
            clock=clock,
        )

    async def start(self) -> None:
        await self.store.create_table(self.sessions.engine)
        self._log.info("ledger.started", table=self.settings.table_name)

    async def close(self) -> None:
        await self.sessions.dispose()
        self._log.info("ledger.stopped")

    async def __aenter__(self) -> "LedgerRuntime":
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


__all__ = ["LedgerRuntime", "load_settings"]
