"""Config validation errors."""
from mp_datatables.config.validation.errors import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
