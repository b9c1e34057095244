"""
Tests for the MPRIS player layer.

Tests player discovery, PlaybackStatus decoding and probing, and
command dispatch.
"""

import pytest
from dbus_fast import Variant

from mediapause.config import MprisConfig
from mediapause.errors import DispatchError
from mediapause.player import (
    CommandDispatcher,
    PlaybackStatus,
    PlayerCommand,
    PlayerDirectory,
    StatusProber,
    decode_playback_status,
)
from mediapause.player.status import classify_playback_status


class TestDecodePlaybackStatus:
    """Tests for decode_playback_status()."""

    def test_bare_string(self) -> None:
        """A bare string is returned as-is."""
        assert decode_playback_status("Playing") == "Playing"

    def test_string_variant(self) -> None:
        """A string variant is unwrapped."""
        assert decode_playback_status(Variant("s", "Paused")) == "Paused"

    def test_non_string_variant(self) -> None:
        """A variant holding anything but a string is not understood."""
        assert decode_playback_status(Variant("i", 1)) is None
        assert decode_playback_status(Variant("as", ["Playing"])) is None

    def test_other_shapes(self) -> None:
        """Other payload types are not understood."""
        assert decode_playback_status(None) is None
        assert decode_playback_status(1) is None
        assert decode_playback_status(["Playing"]) is None


class TestClassifyPlaybackStatus:
    """Tests for classify_playback_status()."""

    def test_playing(self) -> None:
        assert classify_playback_status("Playing") is PlaybackStatus.PLAYING

    def test_match_is_case_sensitive(self) -> None:
        """Only the exact literal counts as playing."""
        assert classify_playback_status("playing") is PlaybackStatus.NOT_PLAYING
        assert classify_playback_status("Playing ") is PlaybackStatus.NOT_PLAYING

    def test_other_states(self) -> None:
        assert classify_playback_status("Paused") is PlaybackStatus.NOT_PLAYING
        assert classify_playback_status("Stopped") is PlaybackStatus.NOT_PLAYING

    def test_undecodable(self) -> None:
        assert classify_playback_status(None) is PlaybackStatus.UNKNOWN


class TestPlayerDirectory:
    """Tests for PlayerDirectory."""

    @pytest.mark.asyncio
    async def test_filters_and_keeps_order(self, bus, config: MprisConfig) -> None:
        """Only MPRIS names are returned, in bus order."""
        bus.names = [
            "org.mpris.MediaPlayer2.vlc",
            ":1.42",
            "org.freedesktop.Notifications",
            "org.mpris.MediaPlayer2.firefox.instance_1_23",
            "org.mpris.MediaPlayer2",
        ]
        directory = PlayerDirectory(bus, config)

        assert await directory.discover_players() == [
            "org.mpris.MediaPlayer2.vlc",
            "org.mpris.MediaPlayer2.firefox.instance_1_23",
        ]

    @pytest.mark.asyncio
    async def test_no_players(self, bus, config: MprisConfig) -> None:
        """Zero matches is an empty list, not an error."""
        assert await PlayerDirectory(bus, config).discover_players() == []

    @pytest.mark.asyncio
    async def test_unreachable_bus(self, bus, config: MprisConfig) -> None:
        """Bus failures yield an empty directory."""
        bus.add_player("vlc", "Playing")
        bus.unreachable = True

        assert await PlayerDirectory(bus, config).discover_players() == []

    @pytest.mark.asyncio
    async def test_custom_prefix(self, bus) -> None:
        """The namespace prefix comes from config."""
        bus.names = ["com.example.Player.one", "org.mpris.MediaPlayer2.vlc"]
        directory = PlayerDirectory(bus, MprisConfig(name_prefix="com.example.Player."))

        assert await directory.discover_players() == ["com.example.Player.one"]


class TestStatusProber:
    """Tests for StatusProber."""

    @pytest.mark.asyncio
    async def test_probe_playing(self, bus, config: MprisConfig) -> None:
        player = bus.add_player("vlc", "Playing")
        prober = StatusProber(bus, config)

        assert await prober.probe(player) is PlaybackStatus.PLAYING
        assert await prober.is_playing(player) is True

    @pytest.mark.asyncio
    async def test_probe_stopped(self, bus, config: MprisConfig) -> None:
        player = bus.add_player("vlc", "Stopped")

        assert await StatusProber(bus, config).probe(player) is PlaybackStatus.NOT_PLAYING

    @pytest.mark.asyncio
    async def test_probe_failure_is_unknown(self, bus, config: MprisConfig) -> None:
        """A failed read folds to UNKNOWN instead of raising."""
        player = bus.add_player("vlc", "Playing")
        bus.unreadable.add(player)
        prober = StatusProber(bus, config)

        assert await prober.probe(player) is PlaybackStatus.UNKNOWN
        assert await prober.is_playing(player) is False

    @pytest.mark.asyncio
    async def test_probe_odd_payload_is_unknown(self, bus, config: MprisConfig) -> None:
        """A non-string payload is UNKNOWN."""
        player = bus.add_player("vlc", Variant("b", True))

        assert await StatusProber(bus, config).probe(player) is PlaybackStatus.UNKNOWN

    @pytest.mark.asyncio
    async def test_probe_unreachable_bus(self, bus, config: MprisConfig) -> None:
        player = bus.add_player("vlc", "Playing")
        bus.unreachable = True

        assert await StatusProber(bus, config).probe(player) is PlaybackStatus.UNKNOWN


class TestCommandDispatcher:
    """Tests for CommandDispatcher."""

    def test_command_member_names(self) -> None:
        """Commands map onto the MPRIS method names."""
        assert PlayerCommand.PLAY.value == "Play"
        assert PlayerCommand.PAUSE.value == "Pause"
        assert PlayerCommand.PLAY_PAUSE.value == "PlayPause"

    @pytest.mark.asyncio
    async def test_dispatch_success(self, bus, config: MprisConfig) -> None:
        player = bus.add_player("vlc")

        await CommandDispatcher(bus, config).dispatch(PlayerCommand.PAUSE, player)

        assert bus.calls == [("Pause", player)]

    @pytest.mark.asyncio
    async def test_dispatch_error_reply(self, bus, config: MprisConfig) -> None:
        """An error reply becomes a DispatchError carrying the bus message."""
        player = bus.add_player("vlc")
        bus.fail(player, "Play")

        with pytest.raises(DispatchError) as exc_info:
            await CommandDispatcher(bus, config).dispatch(PlayerCommand.PLAY, player)

        assert exc_info.value.command == "Play"
        assert exc_info.value.player == player
        assert "Play failed" in exc_info.value.message
        assert bus.calls == [("Play", player)]

    @pytest.mark.asyncio
    async def test_dispatch_unreachable_bus(self, bus, config: MprisConfig) -> None:
        """A connection failure is also a DispatchError."""
        bus.unreachable = True

        with pytest.raises(DispatchError):
            await CommandDispatcher(bus, config).dispatch(
                PlayerCommand.PLAY_PAUSE, "org.mpris.MediaPlayer2.vlc"
            )
