"""Tests for moneta.config."""

import stat
from pathlib import Path

import pytest

from moneta.config import (
    create_default_config,
    get_config_path,
    get_language,
    get_log_level,
    get_profile,
    load_config,
    update_profile,
)
from moneta.i18n import Language


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "moneta" / "config.toml"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("MONETA_LANG", "LANG", "MONETA_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestConfigFile:
    """Tests for creating and reading the config file."""

    def test_xdg_config_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should live under XDG_CONFIG_HOME."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert get_config_path() == tmp_path / "moneta" / "config.toml"

    def test_default_config_permissions(self, config_path: Path) -> None:
        """Should create the file readable only by its owner."""
        create_default_config(config_path)

        assert stat.S_IMODE(config_path.stat().st_mode) == 0o600

    def test_default_config_content(self, config_path: Path) -> None:
        """Should write the default profile."""
        create_default_config(config_path)
        config = load_config(config_path)

        assert config["log_level"] == "WARNING"
        assert config["profile"]["currency"] == "BRL"
        assert config["profile"]["date_format"] == "DD/MM/YYYY"
        assert config["profile"]["hide_values"] is False

    def test_missing_file_raises(self, config_path: Path) -> None:
        """load_config should not invent a file."""
        with pytest.raises(FileNotFoundError):
            load_config(config_path)


class TestProfile:
    """Tests for get_profile and update_profile."""

    def test_defaults_without_file(self, config_path: Path) -> None:
        """Should fall back to defaults when there is no config."""
        profile = get_profile(config_path)

        assert profile["currency"] == "BRL"
        assert profile["language"] == ""

    def test_update_persists(self, config_path: Path) -> None:
        """Should save changes and keep other keys."""
        create_default_config(config_path)
        update_profile({"name": "Ana", "hide_values": True}, config_path)

        profile = get_profile(config_path)
        assert profile["name"] == "Ana"
        assert profile["hide_values"] is True
        assert profile["currency"] == "BRL"
        assert load_config(config_path)["log_level"] == "WARNING"

    def test_update_creates_file(self, config_path: Path) -> None:
        """Should create the config when it is missing."""
        update_profile({"currency": "EUR"}, config_path)

        assert get_profile(config_path)["currency"] == "EUR"

    def test_unknown_key_rejected(self, config_path: Path) -> None:
        """Should refuse keys that are not profile settings."""
        with pytest.raises(KeyError):
            update_profile({"color": "red"}, config_path)


class TestLanguage:
    """Tests for get_language."""

    def test_profile_language_wins(self, config_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A configured language should beat the environment."""
        monkeypatch.setenv("MONETA_LANG", "en-US")
        update_profile({"language": "es-ES"}, config_path)

        assert get_language(config_path) == Language.ES_ES

    def test_moneta_lang(self, config_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """MONETA_LANG should be used when the profile has no language."""
        monkeypatch.setenv("MONETA_LANG", "en-US,pt;q=0.5")
        monkeypatch.setenv("LANG", "es_ES.UTF-8")

        assert get_language(config_path) == Language.EN_US

    def test_lang(self, config_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """LANG should be the last resort."""
        monkeypatch.setenv("LANG", "es_ES.UTF-8")

        assert get_language(config_path) == Language.ES_ES

    def test_default(self, config_path: Path) -> None:
        """No preference anywhere should give pt-BR."""
        assert get_language(config_path) == Language.PT_BR


class TestLogLevel:
    """Tests for get_log_level."""

    def test_env_wins(self, config_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """MONETA_LOG_LEVEL should override the config."""
        monkeypatch.setenv("MONETA_LOG_LEVEL", "debug")
        create_default_config(config_path)

        assert get_log_level(config_path) == "DEBUG"

    def test_config_default(self, config_path: Path) -> None:
        """Should default to WARNING."""
        assert get_log_level(config_path) == "WARNING"
