"""Application-layer errors."""

from __future__ import annotations

from event_ledger.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application concern (configuration, wiring)."""

    default_code = "application_error"


__all__ = ["ApplicationError"]
