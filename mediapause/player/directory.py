"""
Player Directory - finds MPRIS media players on the session bus.

A player is any registered bus name under the MPRIS namespace prefix.
The directory is read-only: it only ever lists names.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mediapause.config import MprisConfig, get_config
from mediapause.errors import BusError

if TYPE_CHECKING:
    from mediapause.bus.session import SessionBus

logger = logging.getLogger(__name__)


class PlayerDirectory:
    """
    Enumerates MPRIS players registered on the session bus.

    Players come and go with their processes, so every call queries the
    bus afresh; nothing is cached.
    """

    def __init__(self, bus: SessionBus, config: MprisConfig | None = None) -> None:
        """
        Initialize the directory.

        Args:
            bus: Session bus to query.
            config: MPRIS constants. Defaults to the global config.
        """
        self._bus = bus
        self._config = config or get_config()

    async def discover_players(self) -> list[str]:
        """
        List the bus names of all MPRIS players.

        Connection and enumeration failures are logged and reported as
        an empty directory, so callers can always proceed.

        Returns:
            Player bus names, in the order the bus reported them.
        """
        try:
            names = await self._bus.list_names()
        except BusError as e:
            logger.warning("Failed to list D-Bus names: %s", e)
            return []

        players = [name for name in names if self._config.is_player_name(name)]

        if not players:
            logger.debug("No MPRIS media players found")
        else:
            logger.debug("Found %d MPRIS player(s): %s", len(players), players)

        return players
