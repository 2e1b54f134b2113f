"""Config – 12-factor settings and loaders."""

from event_ledger.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    LedgerSettings,
    Settings,
    SettingsFactory,
    SettingsLoader,
)
from event_ledger.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "LedgerSettings",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
