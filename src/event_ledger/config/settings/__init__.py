"""Config settings – 12-factor env-based configuration."""
from event_ledger.config.settings.base import Settings
from event_ledger.config.settings.factory import SettingsFactory
from event_ledger.config.settings.ledger import LedgerSettings
from event_ledger.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "LedgerSettings",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
