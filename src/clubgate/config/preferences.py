"""Config – durable key/value preferences file.

Holds the operator's webhook settings between runs.  Every write replaces the
whole file through a temporary sibling and ``os.replace`` so a crash mid-save
leaves either the old or the new content on disk, never a mix.
"""
from __future__ import annotations

import dataclasses
import json
import os
import tempfile
import threading
import typing
from pathlib import Path
from typing import Any, Mapping, TypeVar

from clubgate.config.settings.base import Settings
from clubgate.config.settings.loaders import SettingsLoader, coerce_setting
from clubgate.config.validation import ConfigurationError
from clubgate.observability.logging import get_logger

T = TypeVar("T", bound=Settings)

logger = get_logger(__name__)


class PreferencesStore:
    """JSON file of flat ``str -> scalar`` preferences."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        """Return all stored preferences (empty when the file does not exist)."""
        with self._lock:
            return self._read()

    def get(self, key: str, default: Any = None) -> Any:
        return self.load().get(key, default)

    def put_many(self, values: Mapping[str, Any]) -> None:
        """Merge *values* into the stored preferences in one atomic write."""
        with self._lock:
            merged = self._read()
            merged.update(values)
            self._write(merged)

    def clear(self) -> None:
        with self._lock:
            self._write({})

    def _read(self) -> dict[str, Any]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise ConfigurationError(f"Cannot read preferences at {self._path}", cause=exc) from exc
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Preferences file {self._path} is not valid JSON", cause=exc) from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"Preferences file {self._path} must hold a JSON object")
        return data

    def _write(self, data: Mapping[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=self._path.name + ".", suffix=".tmp", dir=str(self._path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
                json.dump(dict(data), fh, indent=2, sort_keys=True, ensure_ascii=False)
                fh.write("\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
        except OSError as exc:
            raise ConfigurationError(f"Cannot write preferences at {self._path}", cause=exc) from exc
        finally:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
        logger.debug("preferences.written", path=str(self._path), keys=sorted(data))


class PreferencesSettingsLoader(SettingsLoader):
    """Read settings fields stored under their own names in a :class:`PreferencesStore`."""

    def __init__(self, store: PreferencesStore) -> None:
        self._store = store

    def load_values(self, settings_class: type[T]) -> dict[str, Any]:
        stored = self._store.load()
        hints = typing.get_type_hints(settings_class)
        return {
            field.name: coerce_setting(field.name, stored[field.name], hints.get(field.name, str))
            for field in dataclasses.fields(settings_class)  # type: ignore[arg-type]
            if field.name in stored
        }


__all__ = ["PreferencesSettingsLoader", "PreferencesStore"]
