"""
mediapause - Pause desktop media for a session, then resume exactly it.

mediapause talks to MPRIS2 media players over the D-Bus session bus. A
host application calls send_pause() before starting e.g. a voice session
and send_play() afterwards; only the players that were actually playing
are resumed.
"""

__version__ = "0.1.0"
__author__ = "mediapause Contributors"
__license__ = "GPL-2.0"

from mediapause.controller import (
    MediaController,
    get_controller,
    send_pause,
    send_play,
    send_play_pause,
    set_controller,
)

__all__ = [
    "MediaController",
    "__version__",
    "get_controller",
    "send_pause",
    "send_play",
    "send_play_pause",
    "set_controller",
]
