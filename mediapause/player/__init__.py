"""
MPRIS player access for mediapause.

This package finds media players on the session bus, reads their
playback status, and sends them transport commands.
"""

from mediapause.player.commands import CommandDispatcher, PlayerCommand
from mediapause.player.directory import PlayerDirectory
from mediapause.player.status import PlaybackStatus, StatusProber, decode_playback_status

__all__ = [
    "CommandDispatcher",
    "PlaybackStatus",
    "PlayerCommand",
    "PlayerDirectory",
    "StatusProber",
    "decode_playback_status",
]
