"""Configuration file management for tally."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from tally.rates import API_URL

DEFAULT_RATES_TIMEOUT = 10.0


@dataclass(frozen=True)
class Settings:
    """Resolved configuration with defaults applied."""

    rates_url: str = API_URL
    rates_timeout: float | None = DEFAULT_RATES_TIMEOUT
    offline: bool = False


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
    return get_xdg_config_home() / "tally" / "config.toml"


def default_config() -> dict[str, Any]:
    """Default configuration written by 'tally init'."""
    return {
        "rates_url": API_URL,
        "rates_timeout": DEFAULT_RATES_TIMEOUT,
        "offline": False,
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    save_config(default_config(), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If config file is not valid TOML.
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


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings, using defaults for a missing file or missing keys.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Settings.

    Raises:
        tomllib.TOMLDecodeError: If config file exists but is not valid TOML.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        return Settings()

    timeout = config.get("rates_timeout", DEFAULT_RATES_TIMEOUT)
    if not isinstance(timeout, (int, float)) or timeout <= 0:
        timeout = None

    return Settings(
        rates_url=str(config.get("rates_url") or API_URL),
        rates_timeout=float(timeout) if timeout is not None else None,
        offline=bool(config.get("offline", False)),
    )
