"""Config – webhook listener settings and their persistence.

``WebhookConfig`` is loaded once at startup, environment and ``.env`` first,
then the operator's saved preferences on top.  It changes only through
:meth:`WebhookConfigRepository.save`, which validates before it writes and
writes every field in one atomic replace.
"""
from __future__ import annotations

import asyncio
import dataclasses
import secrets
from typing import Any, Sequence

from clubgate.config.preferences import PreferencesSettingsLoader, PreferencesStore
from clubgate.config.secrets import WEBHOOK_API_KEY, WEBHOOK_HMAC_SECRET, SecretStore
from clubgate.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    Settings,
    SettingsFactory,
    SettingsLoader,
)
from clubgate.config.validation import ConfigurationError, InvalidSettingValueError
from clubgate.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LISTEN_PORT = 8080
HEALTH_PATH = "/health"
METRICS_PATH = "/metrics"
_SECRET_FIELDS = frozenset({"api_key", "hmac_secret"})


@dataclasses.dataclass
class WebhookConfig(Settings):
    """Listener configuration.  Environment keys are ``WEBHOOK_<FIELD>``."""

    _prefix = "WEBHOOK"

    listen_port: int = DEFAULT_LISTEN_PORT
    callback_url: str = ""
    api_key: str = ""
    hmac_secret: str = ""
    webhooks_enabled: bool = False
    hmac_enabled: bool = True
    host: str = "127.0.0.1"
    webhook_path: str = "/webhook"
    registration_url: str = ""
    require_api_key: bool = False
    allowed_event_types: frozenset[str] = frozenset()

    def _validate(self) -> None:
        if isinstance(self.listen_port, bool) or not isinstance(self.listen_port, int):
            raise InvalidSettingValueError("listen_port", self.listen_port, "must be an integer")
        if not 1 <= self.listen_port <= 65535:
            raise InvalidSettingValueError("listen_port", self.listen_port, "must be between 1 and 65535")
        if not self.webhook_path.startswith("/"):
            raise InvalidSettingValueError("webhook_path", self.webhook_path, "must start with '/'")
        if self.webhook_path in (HEALTH_PATH, METRICS_PATH):
            raise InvalidSettingValueError("webhook_path", self.webhook_path, "collides with a built-in route")
        if self.hmac_enabled and not self.hmac_secret.strip():
            raise InvalidSettingValueError("hmac_secret", "", "required when hmac_enabled is true")
        if self.require_api_key and not self.api_key.strip():
            raise InvalidSettingValueError("api_key", "", "required when require_api_key is true")
        self.allowed_event_types = frozenset(self.allowed_event_types)

    @property
    def effective_callback_url(self) -> str:
        """The URL the external server should call, derived when not set."""
        if self.callback_url:
            return self.callback_url
        return f"http://localhost:{self.listen_port}{self.webhook_path}"

    def accepts_event_type(self, event_type: str) -> bool:
        return not self.allowed_event_types or event_type in self.allowed_event_types

    def to_preferences(self) -> dict[str, Any]:
        values = dataclasses.asdict(self)
        values["allowed_event_types"] = sorted(self.allowed_event_types)
        return values

    def redacted(self) -> dict[str, Any]:
        """Field values safe to log."""
        return {
            k: ("[REDACTED]" if k in _SECRET_FIELDS and v else v)
            for k, v in self.to_preferences().items()
        }


class WebhookConfigRepository:
    """Load and save :class:`WebhookConfig`.

    Parameters
    ----------
    preferences:
        Durable store for operator-edited values.
    secrets:
        Process-local store that receives the api key and HMAC secret after
        every successful load or save.
    loaders:
        Sources read before the preferences file.  Defaults to ``.env`` then
        the environment.
    """

    def __init__(
        self,
        preferences: PreferencesStore,
        secrets: SecretStore,
        loaders: Sequence[SettingsLoader] | None = None,
    ) -> None:
        self._preferences = preferences
        self._secrets = secrets
        self._loaders: list[SettingsLoader] = (
            list(loaders) if loaders is not None else [DotenvSettingsLoader(), EnvSettingsLoader()]
        )
        self._current: WebhookConfig | None = None

    @property
    def current(self) -> WebhookConfig | None:
        return self._current

    async def load(self) -> WebhookConfig:
        """Read the layered configuration.

        When HMAC verification is on but no secret exists yet (first run), a
        random secret is generated and the validated configuration is
        persisted through :meth:`save`, so the listener never starts with an
        empty key.  A load that fails validation writes nothing.
        """
        config, provisioned = await asyncio.to_thread(self._load_sync)
        if provisioned:
            config = await self.save(config)
            logger.warning("webhook_config.hmac_secret_provisioned", path=str(self._preferences.path))
        else:
            await self._publish_secrets(config)
            self._current = config
        logger.info("webhook_config.loaded", **config.redacted())
        return config

    def _load_sync(self) -> tuple[WebhookConfig, bool]:
        values: dict[str, Any] = {}
        for loader in [*self._loaders, PreferencesSettingsLoader(self._preferences)]:
            values.update(loader.load_values(WebhookConfig))

        provision = bool(values.get("hmac_enabled", True)) and not str(values.get("hmac_secret", "")).strip()
        if provision:
            values["hmac_secret"] = secrets.token_urlsafe(32)
        return SettingsFactory.create(WebhookConfig, overrides=values), provision

    async def save(self, config: WebhookConfig) -> WebhookConfig:
        """Persist *config*; on failure nothing is written and the prior values stand."""
        try:
            validated = dataclasses.replace(config)
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid webhook configuration: {exc}", cause=exc) from exc
        await asyncio.to_thread(self._preferences.put_many, validated.to_preferences())
        await self._publish_secrets(validated)
        self._current = validated
        logger.info("webhook_config.saved", **validated.redacted())
        return validated

    async def _publish_secrets(self, config: WebhookConfig) -> None:
        await self._secrets.set(WEBHOOK_API_KEY, config.api_key)
        await self._secrets.set(WEBHOOK_HMAC_SECRET, config.hmac_secret)


__all__ = ["DEFAULT_LISTEN_PORT", "HEALTH_PATH", "METRICS_PATH", "WebhookConfig", "WebhookConfigRepository"]
