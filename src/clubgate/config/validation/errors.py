"""Config validation errors."""
from clubgate.kernel.errors import ApplicationError


class ConfigurationError(ApplicationError):
    """Configuration is invalid or loading / saving it failed.

    Fatal to starting the webhook listener, never to the host process.
    """
    default_code = "configuration_error"


class MissingRequiredSettingError(ConfigurationError):
    """A required environment variable / setting is absent."""
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(f"Required setting '{setting_name}' is missing")
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigurationError):
    """A setting's value is present but semantically invalid."""
    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {value!r}: {reason}"
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


class PortInUseError(ConfigurationError):
    """The listener port is already bound by another process."""
    default_code = "port_in_use"

    def __init__(self, host: str, port: int, *, cause: BaseException | None = None) -> None:
        super().__init__(
            f"Port {port} on {host} is already in use",
            detail={"host": host, "port": port},
            cause=cause,
        )
        self.host = host
        self.port = port


__all__ = [
    "ConfigurationError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "PortInUseError",
]
