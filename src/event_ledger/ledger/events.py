"""Ledger events – every state change of a bank account."""

from __future__ import annotations

import dataclasses
from decimal import Decimal
from typing import ClassVar

from event_ledger.application.event_sourcing.codec import EventTypeRegistry
from event_ledger.kernel.ddd.domain_event import DomainEvent


@dataclasses.dataclass(frozen=True, eq=False, kw_only=True)
class AccountCreated(DomainEvent):
    type_tag: ClassVar[str] = "AccountCreated"

    account_id: str
    account_holder: str
    initial_balance: Decimal
    currency: str


@dataclasses.dataclass(frozen=True, eq=False, kw_only=True)
class MoneyDeposited(DomainEvent):
    """``balance_after`` is stored so replay never recomputes arithmetic."""

    type_tag: ClassVar[str] = "MoneyDeposited"

    account_id: str
    amount: Decimal
    description: str
    balance_after: Decimal


@dataclasses.dataclass(frozen=True, eq=False, kw_only=True)
class MoneyWithdrawn(DomainEvent):
    type_tag: ClassVar[str] = "MoneyWithdrawn"

    account_id: str
    amount: Decimal
    description: str
    balance_after: Decimal


@dataclasses.dataclass(frozen=True, eq=False, kw_only=True)
class AccountHolderChanged(DomainEvent):
    type_tag: ClassVar[str] = "AccountHolderChanged"

    account_id: str
    old_name: str
    new_name: str


@dataclasses.dataclass(frozen=True, eq=False, kw_only=True)
class AccountClosed(DomainEvent):
    type_tag: ClassVar[str] = "AccountClosed"

    account_id: str
    reason: str
    final_balance: Decimal


type AccountEvent = (
    AccountCreated | MoneyDeposited | MoneyWithdrawn | AccountHolderChanged | AccountClosed
)

ACCOUNT_EVENTS = EventTypeRegistry(
    AccountCreated,
    MoneyDeposited,
    MoneyWithdrawn,
    AccountHolderChanged,
    AccountClosed,
)
"""Registry of every event a :class:`~event_ledger.ledger.account.BankAccount` raises."""


__all__ = [
    "ACCOUNT_EVENTS",
    "AccountClosed",
    "AccountCreated",
    "AccountEvent",
    "AccountHolderChanged",
    "MoneyDeposited",
    "MoneyWithdrawn",
]
