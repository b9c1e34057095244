"""
Command Dispatcher - sends MPRIS transport commands to a player.

Each command is an argument-less method on the player interface. The
dispatcher makes exactly one attempt; fallback across players belongs
to the controller.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from mediapause.config import MprisConfig, get_config
from mediapause.errors import BusError, DispatchError

if TYPE_CHECKING:
    from mediapause.bus.session import SessionBus

logger = logging.getLogger(__name__)


class PlayerCommand(Enum):
    """MPRIS player methods, valued by their D-Bus member name."""

    PLAY = "Play"
    PAUSE = "Pause"
    PLAY_PAUSE = "PlayPause"


class CommandDispatcher:
    """Delivers PlayerCommands to individual players."""

    def __init__(self, bus: SessionBus, config: MprisConfig | None = None) -> None:
        self._bus = bus
        self._config = config or get_config()

    async def dispatch(self, command: PlayerCommand, player: str) -> None:
        """
        Send a command to a specific player.

        Args:
            command: The command to send.
            player: Bus name of the target player.

        Raises:
            DispatchError: If the bus is unreachable or the player rejects
                or does not answer the call.
        """
        logger.debug("Sending %s command to player: %s", command.value, player)

        try:
            await self._bus.call_method(
                player,
                self._config.object_path,
                self._config.player_interface,
                command.value,
            )
        except BusError as e:
            raise DispatchError(command.value, player, str(e)) from e
