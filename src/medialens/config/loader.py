"""Settings loader and singleton manager.

This module handles:
- Environment variable loading from an optional .env file
- Configuration file loading from TOML
- Thread-safe singleton pattern for the Settings instance
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import toml
from dotenv import load_dotenv
from pydantic import ValidationError

from medialens.config.models.settings import Settings
from medialens.shared.errors import create_config_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS: tuple[Path, ...] = (
    Path("config/medialens.toml"),
    Path("medialens.toml"),
    Path.home() / ".medialens" / "config.toml",
)


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking pattern to ensure thread-safety
    while minimizing lock overhead.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance (thread-safe).

        Returns:
            The global Settings instance, loading it if necessary.
        """
        # First check (without lock for performance)
        if self._instance is None:
            # Second check (with lock for thread-safety)
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()

        return self._instance

    def reload_config(self) -> Settings:
        """Reload the global settings instance from configuration files.

        Returns:
            The reloaded Settings instance.
        """
        with self._lock:
            self._instance = load_settings()

        return self._instance


def _load_env_file(env_file: Path = Path(".env")) -> None:
    """Load MEDIALENS_* overrides from a .env file if one exists."""
    if env_file.exists():
        load_dotenv(env_file, override=False)
        logger.debug("Loaded environment overrides from %s", env_file)


def _load_toml(config_path: Path) -> Settings:
    try:
        return Settings.from_toml_file(config_path)
    except (toml.TomlDecodeError, ValidationError) as e:
        raise create_config_error(
            f"Invalid configuration file {config_path}: {e}",
            config_key=str(config_path),
            operation="load_settings",
            original_error=e,
        ) from e


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from TOML configuration file or environment.

    Args:
        config_path: Optional path to TOML configuration file. If None, tries
                    the default locations, then environment variables only.

    Returns:
        Settings instance loaded from the specified source

    Raises:
        ApplicationError: If a configuration file exists but is invalid
    """
    _load_env_file()

    if config_path:
        config_path = Path(config_path)
        if config_path.exists():
            return _load_toml(config_path)
        logger.warning("Configuration file not found: %s, using defaults", config_path)
        return Settings()

    for default_path in DEFAULT_CONFIG_PATHS:
        if default_path.exists():
            return _load_toml(default_path)

    try:
        return Settings()
    except ValidationError as e:
        raise create_config_error(
            f"Invalid configuration from environment: {e}",
            operation="load_settings",
            original_error=e,
        ) from e


# Global loader instance
_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe).

    Returns:
        The global Settings instance, loading it if necessary.
    """
    return _loader.get_config()


def reload_config() -> Settings:
    """Reload the global settings instance from configuration files.

    Returns:
        The reloaded Settings instance.
    """
    return _loader.reload_config()


__all__ = ["DEFAULT_CONFIG_PATHS", "SettingsLoader", "get_config", "load_settings", "reload_config"]
