"""
Session bus access for mediapause.

This package wraps the dbus-fast asyncio client with the handful of
primitives the MPRIS layer needs.
"""

from mediapause.bus.session import SessionBus

__all__ = [
    "SessionBus",
]
