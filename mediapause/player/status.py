"""
Playback State Prober - reads an MPRIS player's PlaybackStatus.

Players differ in how the property value arrives: most wrap it in a
variant as Properties.Get requires, some hand back the bare string.
decode_playback_status() accepts both.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from dbus_fast import Variant

from mediapause.config import MprisConfig, get_config
from mediapause.errors import BusError

if TYPE_CHECKING:
    from mediapause.bus.session import SessionBus

logger = logging.getLogger(__name__)


class PlaybackStatus(Enum):
    """Classified playback status of a player."""

    PLAYING = "playing"
    NOT_PLAYING = "not_playing"
    UNKNOWN = "unknown"  # Read failed or the reply had an unexpected shape


def decode_playback_status(payload: Any) -> str | None:
    """
    Extract the status string from a Properties.Get reply payload.

    Args:
        payload: A bare string, or a variant wrapping one.

    Returns:
        The status string, or None if the payload has any other shape.
    """
    if isinstance(payload, str):
        return payload

    if isinstance(payload, Variant) and payload.signature == "s":
        return payload.value

    return None


def classify_playback_status(status: str | None, playing_value: str = "Playing") -> PlaybackStatus:
    """Map a decoded status string onto PlaybackStatus (exact, case-sensitive)."""
    if status is None:
        return PlaybackStatus.UNKNOWN
    if status == playing_value:
        return PlaybackStatus.PLAYING
    return PlaybackStatus.NOT_PLAYING


class StatusProber:
    """Queries players for their playback status. Never raises."""

    def __init__(self, bus: SessionBus, config: MprisConfig | None = None) -> None:
        self._bus = bus
        self._config = config or get_config()

    async def probe(self, player: str) -> PlaybackStatus:
        """
        Read and classify a player's PlaybackStatus property.

        Args:
            player: Bus name of the player.

        Returns:
            PLAYING, NOT_PLAYING, or UNKNOWN if the status could not be read.
        """
        config = self._config

        try:
            payload = await self._bus.get_property(
                player,
                config.object_path,
                config.player_interface,
                config.status_property,
                properties_interface=config.properties_interface,
            )
        except BusError as e:
            logger.debug("Could not read playback status of %s: %s", player, e)
            return PlaybackStatus.UNKNOWN

        status = decode_playback_status(payload)
        if status is None:
            logger.debug("Unexpected PlaybackStatus payload from %s: %r", player, payload)

        result = classify_playback_status(status, config.playing_value)
        logger.debug("Player %s has status: %s", player, status if status is not None else "?")
        return result

    async def is_playing(self, player: str) -> bool:
        """Check if a player is currently playing."""
        return await self.probe(player) is PlaybackStatus.PLAYING
