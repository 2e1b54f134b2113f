"""LedgerService – bank-account use cases over the event-sourced repository.

Every method returns a ``Result``: domain failures come back as
``Err(error)`` with a human-readable ``error.message``. Store I/O errors
and undecodable stored events propagate as exceptions. A concurrent
writer that got there first is reported as
``Err(OptimisticConcurrencyError)``; the caller may reload and retry.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable

from event_ledger.application.event_sourcing.projector import VersionedState
from event_ledger.application.event_sourcing.store import OptimisticConcurrencyError
from event_ledger.application.event_sourcing.stored_event import StoredEvent
from event_ledger.kernel.errors import DomainError, InvalidVersionError
from event_ledger.kernel.time.clock import Clock
from event_ledger.kernel.types.result import Err, Ok, Result
from event_ledger.ledger.account import AccountState, Amount, BankAccount
from event_ledger.ledger.errors import AccountNotFoundError
from event_ledger.ledger.repository import BankAccountRepository
from event_ledger.observability.logging import Logger, get_logger


@dataclasses.dataclass(frozen=True)
class AccountView:
    """Read-only view of an account at some version."""

    id: str
    holder: str
    balance: Decimal
    currency: str
    is_closed: bool
    version: int

    @classmethod
    def of(cls, state: AccountState, version: int) -> "AccountView":
        if state.id is None:
            raise ValueError("Cannot view an account that has not been created")
        return cls(
            id=state.id,
            holder=state.holder,
            balance=state.balance,
            currency=state.currency,
            is_closed=state.is_closed,
            version=version,
        )

    @classmethod
    def from_versioned(cls, snapshot: VersionedState[AccountState]) -> "AccountView":
        return cls.of(snapshot.state, snapshot.version)

    @classmethod
    def from_account(cls, account: BankAccount) -> "AccountView":
        return cls.of(account.state, account.version)


@dataclasses.dataclass(frozen=True)
class EventView:
    """A stored event as shown in a timeline (payload left serialised)."""

    event_id: str
    type_tag: str
    payload: str
    version: int
    occurred_at: datetime

    @classmethod
    def from_stored(cls, entry: StoredEvent) -> "EventView":
        return cls(
            event_id=entry.id,
            type_tag=entry.type_tag,
            payload=entry.payload,
            version=entry.version,
            occurred_at=entry.occurred_at,
        )


@dataclasses.dataclass(frozen=True)
class TimelineView:
    current: AccountView
    events: list[EventView]
    history: list[AccountView]


class LedgerService:
    """Validates bank-account commands and persists the resulting events."""

    def __init__(
        self,
        repository: BankAccountRepository,
        *,
        default_currency: str = "USD",
        clock: Clock | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._repository = repository
        self._default_currency = default_currency
        self._clock = clock
        self._log = logger or get_logger(__name__)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_account(
        self,
        holder: str,
        initial_balance: Amount = Decimal("0"),
        currency: str | None = None,
    ) -> Result[AccountView, DomainError]:
        opened = BankAccount.open(
            holder,
            initial_balance,
            self._default_currency if currency is None else currency,
            clock=self._clock,
        )
        if isinstance(opened, Err):
            return self._rejected("create_account", opened.error)
        return await self._commit("create_account", opened.value)

    async def deposit(
        self, account_id: str, amount: Amount, description: str = ""
    ) -> Result[AccountView, DomainError]:
        return await self._execute(
            "deposit", account_id, lambda account: account.deposit(amount, description)
        )

    async def withdraw(
        self, account_id: str, amount: Amount, description: str = ""
    ) -> Result[AccountView, DomainError]:
        return await self._execute(
            "withdraw", account_id, lambda account: account.withdraw(amount, description)
        )

    async def change_holder(
        self, account_id: str, new_name: str
    ) -> Result[AccountView, DomainError]:
        return await self._execute(
            "change_holder", account_id, lambda account: account.change_holder(new_name)
        )

    async def close_account(self, account_id: str, reason: str) -> Result[AccountView, DomainError]:
        return await self._execute(
            "close_account", account_id, lambda account: account.close(reason)
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_account(self, account_id: str) -> Result[AccountView, AccountNotFoundError]:
        account = await self._repository.get_aggregate(account_id)
        if account is None:
            return Err(AccountNotFoundError(account_id))
        return Ok(AccountView.from_account(account))

    async def list_accounts(self) -> list[AccountView]:
        """Every account, ordered by holder name then id."""
        views: list[AccountView] = []
        for account_id in await self._repository.get_aggregate_ids():
            account = await self._repository.get_aggregate(account_id)
            if account is not None:
                views.append(AccountView.from_account(account))
        return sorted(views, key=lambda v: (v.holder, v.id))

    async def get_timeline(self, account_id: str) -> Result[TimelineView, AccountNotFoundError]:
        timeline = await self._repository.get_timeline(account_id)
        if isinstance(timeline, Err):
            return Err(AccountNotFoundError(account_id))
        value = timeline.value
        return Ok(
            TimelineView(
                current=AccountView.from_versioned(value.current),
                events=[EventView.from_stored(entry) for entry in value.entries],
                history=[AccountView.from_versioned(s) for s in value.history],
            )
        )

    async def get_state_at_version(
        self, account_id: str, version: int
    ) -> Result[AccountView, AccountNotFoundError | InvalidVersionError]:
        snapshot = await self._repository.get_state_at_version(account_id, version)
        match snapshot:
            case Ok(value):
                return Ok(AccountView.from_versioned(value))
            case Err(InvalidVersionError() as error):
                return Err(error)
            case _:
                return Err(AccountNotFoundError(account_id))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _execute(
        self,
        command: str,
        account_id: str,
        operation: Callable[[BankAccount], Result[Any, DomainError]],
    ) -> Result[AccountView, DomainError]:
        account = await self._repository.get_aggregate(account_id)
        if account is None:
            return self._rejected(command, AccountNotFoundError(account_id))
        outcome = operation(account)
        if isinstance(outcome, Err):
            return self._rejected(command, outcome.error, account_id=account_id)
        return await self._commit(command, account)

    async def _commit(self, command: str, account: BankAccount) -> Result[AccountView, DomainError]:
        try:
            await self._repository.save(account)
        except OptimisticConcurrencyError as exc:
            return self._rejected(command, exc, account_id=account.id)
        return self._applied(command, account)

    def _applied(self, command: str, account: BankAccount) -> Ok[AccountView]:
        self._log.info(
            "ledger.command_applied",
            command=command,
            account_id=account.id,
            version=account.version,
        )
        return Ok(AccountView.from_account(account))

    def _rejected(self, command: str, error: DomainError, **context: Any) -> Err[DomainError]:
        self._log.info(
            "ledger.command_rejected",
            command=command,
            code=error.code,
            reason=error.message,
            **context,
        )
        return Err(error)


__all__ = ["AccountView", "EventView", "LedgerService", "TimelineView"]
