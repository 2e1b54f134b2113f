"""Ledger errors – typed failures of bank-account commands."""

from __future__ import annotations

from decimal import Decimal

from event_ledger.kernel.errors import DomainError, NotFoundError, ValidationError


class InvalidArgumentError(ValidationError):
    """A required text input is blank or otherwise malformed."""

    default_code = "invalid_argument"


class InvalidAmountError(ValidationError):
    """A monetary amount is not a positive finite number."""

    default_code = "invalid_amount"


class NoChangeError(ValidationError):
    """The command would leave the account exactly as it is."""

    default_code = "no_change"


class InsufficientFundsError(DomainError):
    default_code = "insufficient_funds"

    def __init__(self, balance: Decimal, requested: Decimal) -> None:
        super().__init__(
            "Insufficient funds.",
            detail={"balance": str(balance), "requested": str(requested)},
        )
        self.balance = balance
        self.requested = requested


class AccountClosedError(DomainError):
    """The account is closed and no longer accepts changes."""

    default_code = "account_closed"


class AlreadyClosedError(DomainError):
    default_code = "already_closed"

    def __init__(self, message: str = "Account is already closed.") -> None:
        super().__init__(message)


class AccountNotFoundError(NotFoundError):
    default_code = "account_not_found"

    def __init__(self, account_id: str) -> None:
        super().__init__("Account", account_id)
        self.account_id = account_id


__all__ = [
    "AccountClosedError",
    "AccountNotFoundError",
    "AlreadyClosedError",
    "InsufficientFundsError",
    "InvalidAmountError",
    "InvalidArgumentError",
    "NoChangeError",
]
