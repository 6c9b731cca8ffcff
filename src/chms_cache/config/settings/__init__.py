"""Config settings – 12-factor env-based configuration."""
from chms_cache.config.settings.base import Settings
from chms_cache.config.settings.factory import SettingsFactory
from chms_cache.config.settings.loaders import EnvSettingsLoader, SettingsLoader

__all__ = ["EnvSettingsLoader", "Settings", "SettingsFactory", "SettingsLoader"]
