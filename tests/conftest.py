"""
Shared fixtures for mediapause tests.

FakeBus stands in for SessionBus: it serves a fixed list of bus names,
canned PlaybackStatus payloads, and records every method call.
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from dbus_fast import Variant

from mediapause.config import MprisConfig
from mediapause.controller import MediaController, PausedPlayers
from mediapause.errors import BusCallError, BusConnectionError

UNKNOWN_METHOD = "org.freedesktop.DBus.Error.UnknownMethod"


class FakeBus:
    """In-memory session bus with scriptable players."""

    def __init__(self) -> None:
        self.names: list[str] = ["org.freedesktop.DBus", ":1.1"]
        self.statuses: dict[str, Any] = {}
        self.failing: set[tuple[str, str]] = set()
        self.unreadable: set[str] = set()
        self.unreachable = False
        self.calls: list[tuple[str, str]] = []
        self.gates: dict[tuple[str, str], asyncio.Event] = {}
        self.closed = False

    def add_player(self, name: str, status: str | Any = "Stopped") -> str:
        """Register a player; plain strings are wrapped in a variant."""
        player = f"org.mpris.MediaPlayer2.{name}"
        self.names.append(player)
        self.statuses[player] = Variant("s", status) if isinstance(status, str) else status
        return player

    def fail(self, player: str, member: str) -> None:
        """Make a method call to a player return an error reply."""
        self.failing.add((player, member))

    def hold(self, player: str, member: str) -> asyncio.Event:
        """Block a method call to a player until the returned event is set."""
        gate = asyncio.Event()
        self.gates[(player, member)] = gate
        return gate

    def commands(self, member: str | None = None) -> list[tuple[str, str]]:
        """Recorded (member, player) calls, optionally filtered by member."""
        return [call for call in self.calls if member is None or call[0] == member]

    async def list_names(self) -> list[str]:
        if self.unreachable:
            raise BusConnectionError("Failed to connect to D-Bus session: no bus")
        return list(self.names)

    async def get_property(
        self,
        destination: str,
        path: str,
        interface: str,
        name: str,
        *,
        properties_interface: str = "org.freedesktop.DBus.Properties",
    ) -> Any:
        if self.unreachable:
            raise BusConnectionError("Failed to connect to D-Bus session: no bus")
        if destination in self.unreadable or destination not in self.statuses:
            raise BusCallError("No such property", error_name=UNKNOWN_METHOD)
        return self.statuses[destination]

    async def call_method(self, destination: str, path: str, interface: str, member: str) -> None:
        if self.unreachable:
            raise BusConnectionError("Failed to connect to D-Bus session: no bus")
        self.calls.append((member, destination))
        gate = self.gates.get((destination, member))
        if gate is not None:
            await gate.wait()
        if (destination, member) in self.failing:
            raise BusCallError(f"{member} failed", error_name=UNKNOWN_METHOD)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def config() -> MprisConfig:
    return MprisConfig()


@pytest.fixture
def bus() -> FakeBus:
    return FakeBus()


@pytest.fixture
def controller(bus: FakeBus, config: MprisConfig) -> MediaController:
    return MediaController(bus=bus, config=config, paused=PausedPlayers())  # type: ignore[arg-type]
