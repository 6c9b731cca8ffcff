"""Config validation errors – raised while building ``CacheSettings``."""
from chms_cache.kernel.errors import ApplicationError


class ConfigError(ApplicationError):
    """Configuration could not be loaded or was rejected; raised at startup."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """A setting without a default has no ``<PREFIX>_<FIELD>`` variable."""
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(
            f"Required setting '{setting_name}' is missing",
            detail={"setting": setting_name},
        )
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting is present but unusable, e.g. ``CACHE_DEFAULT_TTL=-1``."""
    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {value!r}: {reason}",
            detail={"setting": setting_name, "reason": reason},
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
