"""BankAccount – the example event-sourced aggregate.

Every command validates against the current state and then either raises
exactly one event or returns ``Err`` without touching the aggregate.
"""

from __future__ import annotations

import dataclasses
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Final

from event_ledger.application.event_sourcing.aggregate import (
    AggregateState,
    EventSourcedAggregate,
)
from event_ledger.kernel.ddd.domain_event import DomainEvent
from event_ledger.kernel.errors import DomainError
from event_ledger.kernel.time.clock import Clock, SystemClock
from event_ledger.kernel.types.ids import new_id
from event_ledger.kernel.types.result import Err, Ok, Result
from event_ledger.ledger.errors import (
    AccountClosedError,
    AlreadyClosedError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidArgumentError,
    NoChangeError,
)
from event_ledger.ledger.events import (
    AccountClosed,
    AccountCreated,
    AccountHolderChanged,
    MoneyDeposited,
    MoneyWithdrawn,
)

_ISO4217: Final = re.compile(r"^[A-Z]{3}$")

Amount = Decimal | int | float | str


@dataclasses.dataclass(frozen=True, kw_only=True)
class AccountState(AggregateState):
    """Derived state of a bank account.

    ``closed_at`` is stamped from the aggregate's clock whenever the close
    event is applied, so it differs between replays and is left out of
    equality.
    """

    holder: str = ""
    balance: Decimal = Decimal("0")
    currency: str = "USD"
    is_closed: bool = False
    closed_at: datetime | None = dataclasses.field(default=None, compare=False)


def _parse_amount(value: Amount, field: str) -> Result[Decimal, InvalidAmountError]:
    if isinstance(value, bool):
        return Err(InvalidAmountError(f"{field} must be a number, not a boolean", field=field))
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        return Err(InvalidAmountError(f"{field} is not a number: {value!r}", field=field))
    if not amount.is_finite():
        return Err(InvalidAmountError(f"{field} must be finite", field=field))
    return Ok(amount)


def _check_description(description: object) -> Result[str, InvalidArgumentError]:
    if not isinstance(description, str):
        return Err(InvalidArgumentError("Description must be text.", field="description"))
    return Ok(description)


class BankAccount(EventSourcedAggregate[AccountState]):
    """Ledger account: holder name, balance, currency and a closed flag."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or SystemClock()
        super().__init__()

    @classmethod
    def initial_state(cls) -> AccountState:
        return AccountState()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @classmethod
    def open(
        cls,
        holder: str,
        initial_balance: Amount,
        currency: str = "USD",
        *,
        clock: Clock | None = None,
    ) -> Result["BankAccount", InvalidArgumentError]:
        """Create a new account by raising ``AccountCreated``."""
        if not holder or not holder.strip():
            return Err(InvalidArgumentError("Account holder name is required.", field="holder"))

        parsed = _parse_amount(initial_balance, "initial_balance")
        if isinstance(parsed, Err):
            return Err(InvalidArgumentError(parsed.error.message, field="initial_balance"))
        balance = parsed.value
        if balance < 0:
            return Err(
                InvalidArgumentError(
                    "Initial balance cannot be negative.", field="initial_balance"
                )
            )

        code = (currency or "").strip().upper()
        if not _ISO4217.match(code):
            return Err(
                InvalidArgumentError(
                    f"Currency must be an ISO 4217 code, got {currency!r}.", field="currency"
                )
            )

        account = cls(clock=clock)
        account._raise_event(
            AccountCreated(
                account_id=new_id(),
                account_holder=holder.strip(),
                initial_balance=balance,
                currency=code,
            )
        )
        return Ok(account)

    def deposit(self, amount: Amount, description: str = "") -> Result[MoneyDeposited, DomainError]:
        if self.state.is_closed:
            return Err(AccountClosedError("Cannot deposit to a closed account."))
        checked = _check_description(description)
        if isinstance(checked, Err):
            return checked
        parsed = _parse_amount(amount, "amount")
        if isinstance(parsed, Err):
            return parsed
        value = parsed.value
        if value <= 0:
            return Err(InvalidAmountError("Deposit amount must be positive.", field="amount"))

        event = MoneyDeposited(
            account_id=self._require_id(),
            amount=value,
            description=description,
            balance_after=self.state.balance + value,
        )
        self._raise_event(event)
        return Ok(event)

    def withdraw(self, amount: Amount, description: str = "") -> Result[MoneyWithdrawn, DomainError]:
        if self.state.is_closed:
            return Err(AccountClosedError("Cannot withdraw from a closed account."))
        checked = _check_description(description)
        if isinstance(checked, Err):
            return checked
        parsed = _parse_amount(amount, "amount")
        if isinstance(parsed, Err):
            return parsed
        value = parsed.value
        if value <= 0:
            return Err(InvalidAmountError("Withdrawal amount must be positive.", field="amount"))
        if value > self.state.balance:
            return Err(InsufficientFundsError(self.state.balance, value))

        event = MoneyWithdrawn(
            account_id=self._require_id(),
            amount=value,
            description=description,
            balance_after=self.state.balance - value,
        )
        self._raise_event(event)
        return Ok(event)

    def change_holder(self, new_name: str) -> Result[AccountHolderChanged, DomainError]:
        if self.state.is_closed:
            return Err(AccountClosedError("Cannot modify a closed account."))
        if not new_name or not new_name.strip():
            return Err(
                InvalidArgumentError("New account holder name is required.", field="new_name")
            )
        name = new_name.strip()
        if name == self.state.holder:
            return Err(NoChangeError("New name must be different from the current name.", field="new_name"))

        event = AccountHolderChanged(
            account_id=self._require_id(),
            old_name=self.state.holder,
            new_name=name,
        )
        self._raise_event(event)
        return Ok(event)

    def close(self, reason: str) -> Result[AccountClosed, DomainError]:
        if self.state.is_closed:
            return Err(AlreadyClosedError())
        if not reason or not reason.strip():
            return Err(InvalidArgumentError("A reason for closing is required.", field="reason"))

        event = AccountClosed(
            account_id=self._require_id(),
            reason=reason.strip(),
            final_balance=self.state.balance,
        )
        self._raise_event(event)
        return Ok(event)

    # ------------------------------------------------------------------
    # Fold
    # ------------------------------------------------------------------

    def evolve(self, state: AccountState, event: DomainEvent) -> AccountState:
        match event:
            case AccountCreated():
                return dataclasses.replace(
                    state,
                    id=event.account_id,
                    holder=event.account_holder,
                    balance=event.initial_balance,
                    currency=event.currency,
                )
            case MoneyDeposited(balance_after=balance) | MoneyWithdrawn(balance_after=balance):
                return dataclasses.replace(state, balance=balance)
            case AccountHolderChanged():
                return dataclasses.replace(state, holder=event.new_name)
            case AccountClosed():
                return dataclasses.replace(state, is_closed=True, closed_at=self._clock.now())
            case _:
                raise TypeError(f"BankAccount cannot apply {type(event).__name__}")

    def _require_id(self) -> str:
        if self.id is None:
            raise RuntimeError("BankAccount has not been created yet")
        return self.id


__all__ = ["AccountState", "Amount", "BankAccount"]
