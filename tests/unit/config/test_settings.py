"""Unit tests – settings loaders and factory."""
from __future__ import annotations

import dataclasses

import pytest

from clubgate.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    Settings,
    SettingsFactory,
    SettingsLoader,
    coerce_setting,
)
from clubgate.config.validation import (
    ConfigurationError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)


@dataclasses.dataclass
class _AppSettings(Settings):
    _prefix = "APP"

    name: str
    port: int = 8080
    debug: bool = False
    tags: frozenset[str] = frozenset()

    def _validate(self) -> None:
        if self.port < 1:
            raise InvalidSettingValueError("port", self.port, "must be positive")


class _DictLoader(SettingsLoader):
    def __init__(self, values: dict) -> None:
        self._values = values

    def load_values(self, settings_class):  # type: ignore[override]
        return dict(self._values)


# ---------------------------------------------------------------------------
# coerce_setting
# ---------------------------------------------------------------------------
class TestCoerceSetting:
    @pytest.mark.parametrize("raw", ["1", "true", "YES", "on"])
    def test_truthy(self, raw: str) -> None:
        assert coerce_setting("x", raw, bool) is True

    @pytest.mark.parametrize("raw", ["0", "false", "No", "off", ""])
    def test_falsy(self, raw: str) -> None:
        assert coerce_setting("x", raw, bool) is False

    def test_bad_bool(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            coerce_setting("x", "maybe", bool)

    def test_int(self) -> None:
        assert coerce_setting("x", "9001", int) == 9001

    def test_bad_int(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            coerce_setting("x", "nine", int)

    def test_frozenset_from_csv(self) -> None:
        assert coerce_setting("x", "a, b,,c", frozenset[str]) == frozenset({"a", "b", "c"})

    def test_frozenset_from_list(self) -> None:
        assert coerce_setting("x", ["a", "b"], frozenset[str]) == frozenset({"a", "b"})


# ---------------------------------------------------------------------------
# EnvSettingsLoader / DotenvSettingsLoader
# ---------------------------------------------------------------------------
class TestEnvSettingsLoader:
    def test_reads_prefixed_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_NAME", "clubs")
        monkeypatch.setenv("APP_PORT", "9001")
        monkeypatch.setenv("APP_DEBUG", "true")
        monkeypatch.setenv("APP_TAGS", "x,y")
        settings = EnvSettingsLoader().load(_AppSettings)
        assert settings == _AppSettings(name="clubs", port=9001, debug=True, tags=frozenset({"x", "y"}))

    def test_only_present_fields_are_returned(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("APP_PORT", raising=False)
        monkeypatch.setenv("APP_NAME", "clubs")
        assert "port" not in EnvSettingsLoader().load_values(_AppSettings)

    def test_dotenv_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("APP_NAME", raising=False)
        monkeypatch.delenv("APP_PORT", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("APP_NAME=fromfile\nAPP_PORT=7000\n", encoding="utf-8")
        values = DotenvSettingsLoader(str(env_file)).load_values(_AppSettings)
        assert values["name"] == "fromfile"
        assert values["port"] == 7000
        monkeypatch.delenv("APP_NAME", raising=False)
        monkeypatch.delenv("APP_PORT", raising=False)


# ---------------------------------------------------------------------------
# SettingsFactory
# ---------------------------------------------------------------------------
class TestSettingsFactory:
    def test_later_loaders_win(self) -> None:
        settings = SettingsFactory.create(
            _AppSettings,
            loaders=[_DictLoader({"name": "a", "port": 1}), _DictLoader({"port": 2})],
        )
        assert settings.name == "a"
        assert settings.port == 2

    def test_overrides_win(self) -> None:
        settings = SettingsFactory.create(_AppSettings, loaders=[_DictLoader({"name": "a"})], overrides={"name": "b"})
        assert settings.name == "b"

    def test_missing_required(self) -> None:
        with pytest.raises(MissingRequiredSettingError) as exc_info:
            SettingsFactory.create(_AppSettings, loaders=[_DictLoader({"port": 1})])
        assert exc_info.value.setting_name == "name"

    def test_validation_runs_once_on_merged_values(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            SettingsFactory.create(_AppSettings, loaders=[_DictLoader({"name": "a", "port": 0})])

    def test_unknown_field_wrapped(self) -> None:
        with pytest.raises(ConfigurationError):
            SettingsFactory.create(_AppSettings, overrides={"name": "a", "nope": 1})
