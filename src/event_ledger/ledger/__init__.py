"""Ledger – the bank-account example domain."""

from event_ledger.ledger.account import AccountState, BankAccount
from event_ledger.ledger.errors import (
    AccountClosedError,
    AccountNotFoundError,
    AlreadyClosedError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidArgumentError,
    NoChangeError,
)
from event_ledger.ledger.events import (
    ACCOUNT_EVENTS,
    AccountClosed,
    AccountCreated,
    AccountHolderChanged,
    MoneyDeposited,
    MoneyWithdrawn,
)
from event_ledger.ledger.repository import BankAccountRepository
from event_ledger.ledger.service import AccountView, EventView, LedgerService, TimelineView

__all__ = [
    "ACCOUNT_EVENTS",
    "AccountClosed",
    "AccountClosedError",
    "AccountCreated",
    "AccountHolderChanged",
    "AccountNotFoundError",
    "AccountState",
    "AccountView",
    "AlreadyClosedError",
    "BankAccount",
    "BankAccountRepository",
    "EventView",
    "InsufficientFundsError",
    "InvalidAmountError",
    "InvalidArgumentError",
    "LedgerService",
    "MoneyDeposited",
    "MoneyWithdrawn",
    "NoChangeError",
    "TimelineView",
]
