"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError               (domain.py)
    │   ├── ValidationError
    │   ├── NotFoundError
    │   ├── ConflictError
    │   └── InvalidVersionError
    ├── ApplicationError          (application.py)
    └── InfrastructureError       (infrastructure.py)
        └── SerializationError
            └── UnknownEventTypeError
"""

from event_ledger.kernel.errors.application import ApplicationError
from event_ledger.kernel.errors.base import BaseError
from event_ledger.kernel.errors.domain import (
    ConflictError,
    DomainError,
    InvalidVersionError,
    NotFoundError,
    ValidationError,
)
from event_ledger.kernel.errors.infrastructure import (
    InfrastructureError,
    SerializationError,
    UnknownEventTypeError,
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
