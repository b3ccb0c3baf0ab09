"""Configuration file management for moneta."""

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from moneta.domain.models import Currency, DateFormat
from moneta.i18n import Language, resolve_language

DEFAULT_PROFILE: dict[str, Any] = {
    "name": "",
    "language": "",
    "currency": Currency.BRL.value,
    "date_format": DateFormat.DAY_FIRST.value,
    "hide_values": False,
}

DEFAULT_LOG_LEVEL = "WARNING"


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "moneta" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    default_config: dict[str, Any] = {
        "log_level": DEFAULT_LOG_LEVEL,
        "profile": dict(DEFAULT_PROFILE),
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(default_config, f)

    os.chmod(config_path, 0o600)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def load_config_or_default(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration, falling back to defaults when the file is missing."""
    try:
        return load_config(config_path)
    except FileNotFoundError:
        return {"log_level": DEFAULT_LOG_LEVEL, "profile": dict(DEFAULT_PROFILE)}


def get_profile(config_path: Path | None = None) -> dict[str, Any]:
    """Get the user profile with defaults filled in.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Profile dictionary (name, language, currency, date_format, hide_values).
    """
    config = load_config_or_default(config_path)
    profile = dict(DEFAULT_PROFILE)
    profile.update(config.get("profile", {}))
    return profile


def update_profile(changes: dict[str, Any], config_path: Path | None = None) -> dict[str, Any]:
    """Update profile keys and save the config.

    Args:
        changes: Profile keys to overwrite. Unknown keys raise KeyError.
        config_path: Path to config file. If None, uses default location.

    Returns:
        The updated profile.

    Raises:
        KeyError: If a key is not a profile setting.
    """
    for key in changes:
        if key not in DEFAULT_PROFILE:
            raise KeyError(key)

    config = load_config_or_default(config_path)
    profile = dict(DEFAULT_PROFILE)
    profile.update(config.get("profile", {}))
    profile.update(changes)
    config["profile"] = profile
    save_config(config, config_path)
    return profile


def get_language(config_path: Path | None = None) -> Language:
    """Resolve the language for user-facing messages.

    The profile language wins; otherwise MONETA_LANG, then LANG, are parsed.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        A supported language.
    """
    configured = get_profile(config_path).get("language")
    if configured:
        return resolve_language(str(configured))
    return resolve_language(os.environ.get("MONETA_LANG") or os.environ.get("LANG"))


def get_log_level(config_path: Path | None = None) -> str:
    """Get the log level name from MONETA_LOG_LEVEL or the config file."""
    env_level = os.environ.get("MONETA_LOG_LEVEL")
    if env_level:
        return env_level.upper()
    return str(load_config_or_default(config_path).get("log_level", DEFAULT_LOG_LEVEL)).upper()
