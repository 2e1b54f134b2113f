"""Kernel – framework-agnostic building blocks."""

from event_ledger.kernel.errors import (
    ApplicationError,
    BaseError,
    ConflictError,
    DomainError,
    InfrastructureError,
    InvalidVersionError,
    NotFoundError,
    SerializationError,
    UnknownEventTypeError,
    ValidationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConflictError",
    "DomainError",
    "InfrastructureError",
    "InvalidVersionError",
    "NotFoundError",
    "SerializationError",
    "UnknownEventTypeError",
    "ValidationError",
]
