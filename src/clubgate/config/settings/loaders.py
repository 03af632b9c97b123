"""Config settings – EnvSettingsLoader, DotenvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
import typing
from typing import Any, TypeVar

from dotenv import load_dotenv

from clubgate.config.settings.base import Settings
from clubgate.config.validation import ConfigurationError, InvalidSettingValueError

T = TypeVar("T", bound=Settings)

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


def coerce_setting(name: str, value: Any, type_hint: Any) -> Any:
    """Coerce a raw (usually string) value into the declared field type."""
    origin = typing.get_origin(type_hint)
    try:
        if type_hint is bool:
            if isinstance(value, bool):
                return value
            lowered = str(value).strip().lower()
            if lowered in _TRUTHY:
                return True
            if lowered in _FALSY:
                return False
            raise ValueError("expected a boolean")
        if type_hint is int:
            if isinstance(value, bool):
                raise ValueError("expected an integer")
            return int(value)
        if type_hint is float:
            return float(value)
        if origin in (list, frozenset, set, tuple):
            items = value if isinstance(value, (list, tuple, set, frozenset)) else str(value).split(",")
            cleaned = [str(v).strip() for v in items if str(v).strip()]
            return origin(cleaned)
    except (TypeError, ValueError) as exc:
        raise InvalidSettingValueError(name, value, str(exc)) from exc
    return value if value is None else str(value)


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load_values(self, settings_class: type[T]) -> dict[str, Any]:
        """Return only the fields this source defines, already coerced."""

    def load(self, settings_class: type[T]) -> T:
        try:
            return settings_class(**self.load_values(settings_class))
        except ConfigurationError:
            raise
        except Exception as exc:
            raise ConfigurationError(f"Failed to load settings: {exc}", cause=exc) from exc


class EnvSettingsLoader(SettingsLoader):
    """Load settings from OS environment variables (``<PREFIX>_<FIELD>``)."""

    def load_values(self, settings_class: type[T]) -> dict[str, Any]:
        prefix = getattr(settings_class, "_prefix", "").upper()
        hints = typing.get_type_hints(settings_class)
        values: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            env_key = f"{prefix}_{field.name}".upper().lstrip("_")
            raw = os.environ.get(env_key)
            if raw is None:
                continue
            values[field.name] = coerce_setting(env_key, raw, hints.get(field.name, str))
        return values


class DotenvSettingsLoader(SettingsLoader):
    """Load a ``.env`` file into the environment, then read it like ``EnvSettingsLoader``."""

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load_values(self, settings_class: type[T]) -> dict[str, Any]:
        load_dotenv(self._env_file, override=self._override)
        return EnvSettingsLoader().load_values(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader", "coerce_setting"]
