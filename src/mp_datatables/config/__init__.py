"""Config – 12-factor settings and loaders."""

from mp_datatables.config.settings import DotenvSettingsLoader, EnvSettingsLoader, Settings, SettingsLoader
from mp_datatables.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
