"""Config validation – errors raised while building ledger settings."""
from event_ledger.kernel.errors import ApplicationError


class ConfigError(ApplicationError):
    """A settings source could not be read or the settings could not be built."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """No source supplied a value for a field without a default."""
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(
            f"No value for required setting '{setting_name}'",
            detail={"setting": setting_name},
        )
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting could not be coerced, or failed ``_validate``."""
    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"Setting '{setting_name}' rejected ({reason}): {value!r}",
            detail={"setting": setting_name, "reason": reason},
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
