"""
Configuration management for mediapause.

This module loads the MPRIS protocol constants (bus name prefix, object
path, interface names) from a TOML file and provides access to them
through a lazily loaded singleton.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Path to the config directory
CONFIG_DIR = Path(__file__).parent

# Environment variable that points at an alternative config file
CONFIG_ENV_VAR = "MEDIAPAUSE_CONFIG"

DEFAULT_NAME_PREFIX = "org.mpris.MediaPlayer2."
DEFAULT_OBJECT_PATH = "/org/mpris/MediaPlayer2"
DEFAULT_PLAYER_INTERFACE = "org.mpris.MediaPlayer2.Player"
DEFAULT_PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"
DEFAULT_STATUS_PROPERTY = "PlaybackStatus"
DEFAULT_PLAYING_VALUE = "Playing"


@dataclass(frozen=True)
class MprisConfig:
    """Where and how to talk to MPRIS players on the session bus."""

    name_prefix: str = DEFAULT_NAME_PREFIX
    object_path: str = DEFAULT_OBJECT_PATH
    player_interface: str = DEFAULT_PLAYER_INTERFACE
    properties_interface: str = DEFAULT_PROPERTIES_INTERFACE
    status_property: str = DEFAULT_STATUS_PROPERTY
    playing_value: str = DEFAULT_PLAYING_VALUE

    def is_player_name(self, name: str) -> bool:
        """Check if a bus name belongs to an MPRIS player."""
        return name.startswith(self.name_prefix)


def _parse_config(data: dict[str, Any]) -> MprisConfig:
    """Build an MprisConfig from parsed TOML, falling back to MPRIS defaults."""
    mpris = data.get("mpris", {})
    status = data.get("status", {})

    return MprisConfig(
        name_prefix=str(mpris.get("name_prefix", DEFAULT_NAME_PREFIX)),
        object_path=str(mpris.get("object_path", DEFAULT_OBJECT_PATH)),
        player_interface=str(mpris.get("player_interface", DEFAULT_PLAYER_INTERFACE)),
        properties_interface=str(
            mpris.get("properties_interface", DEFAULT_PROPERTIES_INTERFACE)
        ),
        status_property=str(status.get("property", DEFAULT_STATUS_PROPERTY)),
        playing_value=str(status.get("playing_value", DEFAULT_PLAYING_VALUE)),
    )


def default_config_path() -> Path:
    """
    Resolve the config file to load.

    Returns:
        The path named by $MEDIAPAUSE_CONFIG if set, else the bundled mpris.toml.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return CONFIG_DIR / "mpris.toml"


def load_config(config_path: Path | None = None) -> MprisConfig:
    """
    Load MPRIS configuration from a TOML file.

    Args:
        config_path: Path to the TOML file. If None, uses default location.

    Returns:
        Loaded MprisConfig instance.
    """
    if config_path is None:
        config_path = default_config_path()

    logger.debug("Loading config from %s", config_path)

    with config_path.open("rb") as f:
        data = tomllib.load(f)

    return _parse_config(data)


# Global singleton instance (lazy loaded)
_config: MprisConfig | None = None


def get_config() -> MprisConfig:
    """
    Get the global configuration (lazy loaded singleton).

    Returns:
        The MprisConfig instance.
    """
    global _config

    if _config is None:
        _config = load_config()

    return _config


def reload_config(config_path: Path | None = None) -> MprisConfig:
    """
    Force reload of the configuration.

    Args:
        config_path: Optional path to load instead of the default.

    Returns:
        The newly loaded MprisConfig instance.
    """
    global _config
    _config = load_config(config_path)
    return _config
