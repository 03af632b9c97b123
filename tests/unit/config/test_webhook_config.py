"""Unit tests – WebhookConfig, PreferencesStore and WebhookConfigRepository."""
from __future__ import annotations

import asyncio
import dataclasses
import json
from pathlib import Path

import pytest

from clubgate.config import (
    WEBHOOK_API_KEY,
    WEBHOOK_HMAC_SECRET,
    ConfigurationError,
    InMemorySecretStore,
    InvalidSettingValueError,
    PreferencesStore,
    SettingsLoader,
    WebhookConfig,
    WebhookConfigRepository,
)


class _DictLoader(SettingsLoader):
    def __init__(self, values: dict) -> None:
        self._values = values

    def load_values(self, settings_class):  # type: ignore[override]
        return dict(self._values)


def _config(**overrides) -> WebhookConfig:
    values = {"hmac_secret": "s3cret", **overrides}
    return WebhookConfig(**values)


# ---------------------------------------------------------------------------
# WebhookConfig validation
# ---------------------------------------------------------------------------
class TestWebhookConfig:
    def test_defaults(self) -> None:
        cfg = _config()
        assert cfg.listen_port == 8080
        assert cfg.host == "127.0.0.1"
        assert cfg.webhook_path == "/webhook"
        assert cfg.hmac_enabled is True
        assert cfg.effective_callback_url == "http://localhost:8080/webhook"

    @pytest.mark.parametrize("port", [0, 65536, -1])
    def test_port_range(self, port: int) -> None:
        with pytest.raises(InvalidSettingValueError):
            _config(listen_port=port)

    def test_hmac_requires_secret(self) -> None:
        with pytest.raises(ConfigurationError):
            WebhookConfig(hmac_enabled=True, hmac_secret="  ")

    def test_hmac_disabled_needs_no_secret(self) -> None:
        assert WebhookConfig(hmac_enabled=False).hmac_secret == ""

    def test_path_must_start_with_slash(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            _config(webhook_path="webhook")

    @pytest.mark.parametrize("path", ["/health", "/metrics"])
    def test_path_cannot_shadow_builtin_routes(self, path: str) -> None:
        with pytest.raises(InvalidSettingValueError):
            _config(webhook_path=path)

    def test_require_api_key_needs_key(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            _config(require_api_key=True)

    def test_allowed_event_types(self) -> None:
        cfg = _config(allowed_event_types=frozenset({"new_student"}))
        assert cfg.accepts_event_type("new_student")
        assert not cfg.accepts_event_type("attendance")
        assert _config().accepts_event_type("anything")

    def test_redacted_hides_secrets(self) -> None:
        red = _config(api_key="k").redacted()
        assert red["hmac_secret"] == "[REDACTED]"
        assert red["api_key"] == "[REDACTED]"
        assert red["listen_port"] == 8080


# ---------------------------------------------------------------------------
# PreferencesStore
# ---------------------------------------------------------------------------
class TestPreferencesStore:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert PreferencesStore(tmp_path / "prefs.json").load() == {}

    def test_put_many_merges_and_persists(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "prefs.json"
        store = PreferencesStore(path)
        store.put_many({"a": 1})
        store.put_many({"b": "two"})
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": 1, "b": "two"}
        assert PreferencesStore(path).get("b") == "two"

    def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        store = PreferencesStore(tmp_path / "prefs.json")
        store.put_many({"a": 1})
        assert [p.name for p in tmp_path.iterdir()] == ["prefs.json"]

    def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "prefs.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            PreferencesStore(path).load()

    def test_clear(self, tmp_path: Path) -> None:
        store = PreferencesStore(tmp_path / "prefs.json")
        store.put_many({"a": 1})
        store.clear()
        assert store.load() == {}


# ---------------------------------------------------------------------------
# WebhookConfigRepository
# ---------------------------------------------------------------------------
class TestWebhookConfigRepository:
    def _repo(self, tmp_path: Path, env: dict | None = None) -> tuple[WebhookConfigRepository, InMemorySecretStore, PreferencesStore]:
        prefs = PreferencesStore(tmp_path / "prefs.json")
        secrets = InMemorySecretStore()
        return WebhookConfigRepository(prefs, secrets, loaders=[_DictLoader(env or {})]), secrets, prefs

    def test_preferences_override_environment(self, tmp_path: Path) -> None:
        repo, secrets, prefs = self._repo(tmp_path, {"listen_port": 7000, "hmac_secret": "env-secret"})
        prefs.put_many({"listen_port": 9001})
        cfg = asyncio.run(repo.load())
        assert cfg.listen_port == 9001
        assert cfg.hmac_secret == "env-secret"
        assert repo.current is cfg
        assert secrets.get_or_default(WEBHOOK_HMAC_SECRET) == "env-secret"

    def test_first_load_provisions_hmac_secret(self, tmp_path: Path) -> None:
        repo, _, prefs = self._repo(tmp_path)
        cfg = asyncio.run(repo.load())
        assert len(cfg.hmac_secret) >= 43
        assert prefs.get("hmac_secret") == cfg.hmac_secret

    def test_invalid_first_load_does_not_provision_secret(self, tmp_path: Path) -> None:
        repo, secrets, prefs = self._repo(tmp_path)
        prefs.put_many({"listen_port": 70000})
        before = prefs.path.read_bytes()
        with pytest.raises(ConfigurationError):
            asyncio.run(repo.load())
        assert prefs.path.read_bytes() == before
        assert prefs.get("hmac_secret") is None
        assert repo.current is None
        assert secrets.get_or_default(WEBHOOK_HMAC_SECRET) == ""

    def test_save_persists_all_fields_and_updates_secrets(self, tmp_path: Path) -> None:
        repo, secrets, prefs = self._repo(tmp_path)
        cfg = _config(listen_port=9001, api_key="key-1", allowed_event_types=frozenset({"b", "a"}))
        saved = asyncio.run(repo.save(cfg))
        stored = prefs.load()
        assert stored["listen_port"] == 9001
        assert stored["allowed_event_types"] == ["a", "b"]
        assert secrets.get_or_default(WEBHOOK_API_KEY) == "key-1"
        assert repo.current is saved

        reloaded = asyncio.run(self._repo(tmp_path)[0].load())
        assert reloaded == saved

    def test_invalid_save_writes_nothing(self, tmp_path: Path) -> None:
        repo, secrets, prefs = self._repo(tmp_path)
        good = asyncio.run(repo.save(_config(listen_port=9001)))
        before = prefs.load()

        bad = dataclasses.replace(good)
        bad.listen_port = 70000
        with pytest.raises(ConfigurationError):
            asyncio.run(repo.save(bad))

        assert prefs.load() == before
        assert repo.current is good
        assert secrets.get_or_default(WEBHOOK_HMAC_SECRET) == "s3cret"
