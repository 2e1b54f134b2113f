"""Domain errors: business rule violations and lookup failures."""

from __future__ import annotations

from typing import Any

from event_ledger.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised (or returned inside ``Err``) when a domain rule is violated."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Command input does not meet validation rules.

    ``field`` names the offending input when there is a single one.
    """

    default_code = "validation_error"

    def __init__(self, message: str, *, field: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.field = field
        if field is not None:
            self.detail.setdefault("field", field)


class NotFoundError(DomainError):
    """The requested aggregate does not exist (its stream is empty)."""

    default_code = "not_found"

    def __init__(self, resource: str, identifier: Any = None, **kwargs: Any) -> None:
        msg = f"{resource} not found"
        if identifier is not None:
            msg = f"{resource} '{identifier}' not found"
        super().__init__(msg, **kwargs)
        self.resource = resource
        self.identifier = identifier


class ConflictError(DomainError):
    """The operation conflicts with the state already persisted."""

    default_code = "conflict"


class InvalidVersionError(DomainError):
    """A time-travel request asked for a version outside ``1..max_version``."""

    default_code = "invalid_version"

    def __init__(self, requested: int, max_version: int, *, min_version: int = 1) -> None:
        super().__init__(
            f"Invalid version {requested}. Valid range is {min_version} to {max_version}.",
            detail={
                "requested": requested,
                "min_version": min_version,
                "max_version": max_version,
            },
        )
        self.requested = requested
        self.min_version = min_version
        self.max_version = max_version


__all__ = [
    "ConflictError",
    "DomainError",
    "InvalidVersionError",
    "NotFoundError",
    "ValidationError",
]
