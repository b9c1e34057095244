"""
Exception hierarchy for mediapause.

Internal components raise these; the controller absorbs them so that the
host-facing operations never raise.
"""

from __future__ import annotations


class MediaPauseError(Exception):
    """Base class for all mediapause errors."""


class BusError(MediaPauseError):
    """A session bus operation failed."""


class BusConnectionError(BusError):
    """The session bus could not be reached."""


class BusCallError(BusError):
    """A bus call returned an error reply or failed in transit."""

    def __init__(self, message: str, error_name: str | None = None) -> None:
        super().__init__(message)
        self.error_name = error_name

    def __str__(self) -> str:
        message = super().__str__()
        if self.error_name:
            return f"{self.error_name}: {message}"
        return message


class DispatchError(MediaPauseError):
    """A player command could not be delivered."""

    def __init__(self, command: str, player: str, message: str) -> None:
        super().__init__(f"{command} -> {player}: {message}")
        self.command = command
        self.player = player
        self.message = message
