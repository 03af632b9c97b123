"""Config – settings, secrets and persisted webhook configuration."""
from clubgate.config.preferences import PreferencesSettingsLoader, PreferencesStore
from clubgate.config.secrets import (
    WEBHOOK_API_KEY,
    WEBHOOK_HMAC_SECRET,
    InMemorySecretStore,
    SecretRef,
    SecretStore,
)
from clubgate.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    Settings,
    SettingsFactory,
    SettingsLoader,
)
from clubgate.config.validation import (
    ConfigurationError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    PortInUseError,
)
from clubgate.config.webhook import DEFAULT_LISTEN_PORT, WebhookConfig, WebhookConfigRepository

__all__ = [
    "DEFAULT_LISTEN_PORT",
    "ConfigurationError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InMemorySecretStore",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "PortInUseError",
    "PreferencesSettingsLoader",
    "PreferencesStore",
    "SecretRef",
    "SecretStore",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
    "WEBHOOK_API_KEY",
    "WEBHOOK_HMAC_SECRET",
    "WebhookConfig",
    "WebhookConfigRepository",
]
