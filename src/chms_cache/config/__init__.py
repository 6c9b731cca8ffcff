"""Config – 12-factor settings and loaders."""

from chms_cache.config.settings import EnvSettingsLoader, Settings, SettingsFactory, SettingsLoader
from chms_cache.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
