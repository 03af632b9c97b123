"""Config validation errors."""
from clubgate.config.validation.errors import (
    ConfigurationError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    PortInUseError,
)

__all__ = [
    "ConfigurationError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "PortInUseError",
]
