"""Observability – structured logging helpers."""
from event_ledger.observability.logging.factory import (
    JsonLoggerFactory,
    configure_logging,
    get_logger,
)
from event_ledger.observability.logging.protocol import Logger

__all__ = ["JsonLoggerFactory", "Logger", "configure_logging", "get_logger"]
