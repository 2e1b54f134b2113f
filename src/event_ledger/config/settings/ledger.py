"""Config settings – LedgerSettings."""
from __future__ import annotations

import dataclasses
import logging
import re

from event_ledger.config.settings.base import Settings
from event_ledger.config.validation.errors import InvalidSettingValueError

_ISO4217 = re.compile(r"^[A-Z]{3}$")
_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclasses.dataclass
class LedgerSettings(Settings):
    """Runtime settings for the ledger, read from ``LEDGER_*`` variables."""

    _prefix = "LEDGER"

    database_url: str = "sqlite+aiosqlite:///:memory:"
    table_name: str = "event_store"
    default_currency: str = "USD"
    log_level: str = "INFO"
    log_json: bool = True
    sql_echo: bool = False

    def _validate(self) -> None:
        if not self.database_url.strip():
            raise InvalidSettingValueError("database_url", self.database_url, "must not be empty")
        if not _TABLE_NAME.match(self.table_name):
            raise InvalidSettingValueError("table_name", self.table_name, "must be a SQL identifier")
        if not _ISO4217.match(self.default_currency):
            raise InvalidSettingValueError(
                "default_currency", self.default_currency, "must be an ISO 4217 code"
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise InvalidSettingValueError("log_level", self.log_level, "unknown log level")


__all__ = ["LedgerSettings"]
