"""Config settings – 12-factor env-based configuration."""
from clubgate.config.settings.base import Settings
from clubgate.config.settings.factory import SettingsFactory
from clubgate.config.settings.loaders import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    SettingsLoader,
    coerce_setting,
)

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
    "coerce_setting",
]
