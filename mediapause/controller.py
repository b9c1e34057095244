"""
Media Controller - pauses playing media and later resumes exactly it.

The controller is the stateful core of mediapause. It keeps track of the
players it paused itself so that a later resume never starts media the
user had stopped on their own.

States:
- Idle: nothing is tracked, resume is a no-op
- Suspended: at least one player was paused by us and awaits resume

All operations are best-effort. A player that cannot be reached is logged
and skipped; it never blocks the others and no error reaches the caller.
"""

from __future__ import annotations

import asyncio
import logging

from mediapause.bus.session import SessionBus
from mediapause.config import MprisConfig, get_config
from mediapause.errors import DispatchError
from mediapause.player.commands import CommandDispatcher, PlayerCommand
from mediapause.player.directory import PlayerDirectory
from mediapause.player.status import PlaybackStatus, StatusProber

logger = logging.getLogger(__name__)


class PausedPlayers:
    """
    The set of players this process paused, in the order they were paused.

    Thread-safety: guarded by an asyncio lock that is only held for a
    snapshot, replace or clear, never across bus I/O. The lock is created
    per event loop, so the process-wide controller survives repeated
    asyncio.run() calls.
    """

    def __init__(self) -> None:
        self._players: list[str] = []
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    @property
    def locked(self) -> bool:
        """Check if the lock is currently held."""
        return self._lock is not None and self._lock.locked()

    def _get_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def snapshot(self) -> list[str]:
        """Return a copy of the tracked players."""
        async with self._get_lock():
            return list(self._players)

    async def replace(self, players: list[str]) -> None:
        """Track exactly these players, discarding any previous contents."""
        async with self._get_lock():
            self._players = list(players)

    async def clear(self) -> None:
        """Forget all tracked players."""
        async with self._get_lock():
            self._players.clear()

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, player: str) -> bool:
        return player in self._players

    def __bool__(self) -> bool:
        """True while at least one player is awaiting resume."""
        return bool(self._players)


class MediaController:
    """
    Pauses, resumes and toggles MPRIS media players.

    Usage:
        controller = MediaController()
        await controller.pause()   # pause everything that is playing
        ...                        # e.g. run a voice session
        await controller.resume()  # resume only what we paused
        await controller.close()

    Per-player bus calls within one operation are awaited one after
    another. Concurrent pause/resume calls are not coordinated beyond the
    PausedPlayers lock; the last writer wins.
    """

    def __init__(
        self,
        bus: SessionBus | None = None,
        config: MprisConfig | None = None,
        paused: PausedPlayers | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            bus: Session bus to use. A lazily connecting SessionBus is
                 created if not given.
            config: MPRIS constants. Defaults to the global config.
            paused: Tracking state. A fresh, empty one is created if not given.
        """
        self._config = config or get_config()
        self.bus = bus if bus is not None else SessionBus()
        self.paused = paused if paused is not None else PausedPlayers()

        self.directory = PlayerDirectory(self.bus, self._config)
        self.prober = StatusProber(self.bus, self._config)
        self.dispatcher = CommandDispatcher(self.bus, self._config)

    @property
    def is_suspended(self) -> bool:
        """Check if there are paused players awaiting resume."""
        return bool(self.paused)

    async def paused_players(self) -> list[str]:
        """Get the players currently awaiting resume."""
        return await self.paused.snapshot()

    async def pause(self) -> list[str]:
        """
        Pause every player that is currently playing.

        Players that are not playing are left alone and not tracked, so a
        later resume cannot start them. If at least one player was paused,
        the tracked set is replaced by this call's players.

        Returns:
            The players paused by this call.
        """
        players = await self.directory.discover_players()
        if not players:
            logger.debug("No MPRIS media players found, nothing to pause")
            return []

        logger.debug("Checking %d MPRIS player(s) for playback", len(players))

        paused: list[str] = []

        for player in players:
            status = await self.prober.probe(player)

            if status is PlaybackStatus.UNKNOWN:
                logger.debug("Could not check playback status for player %s, skipping", player)
                continue
            if status is not PlaybackStatus.PLAYING:
                logger.debug("Player %s is not playing, skipping", player)
                continue

            logger.debug("Player %s is playing, pausing it", player)
            try:
                await self.dispatcher.dispatch(PlayerCommand.PAUSE, player)
            except DispatchError as e:
                logger.warning("Failed to pause player %s: %s", player, e.message)
                continue

            logger.debug("Successfully paused player: %s", player)
            paused.append(player)

        if not paused:
            logger.debug("No playing players found to pause")
            return []

        logger.debug("Paused %d player(s), storing for resume: %s", len(paused), paused)
        await self.paused.replace(paused)
        return paused

    async def resume(self) -> int:
        """
        Send Play to every player paused by the last pause().

        Each player is tried once. The tracked set is cleared afterwards
        whatever the outcome, so a player that failed to resume is not
        retried by a later call.

        Returns:
            The number of players that accepted the Play command.
        """
        players = await self.paused.snapshot()
        if not players:
            logger.debug("No media was paused by us, skipping play command")
            return 0

        logger.debug("Resuming %d previously paused player(s): %s", len(players), players)

        resumed = 0
        for player in players:
            try:
                await self.dispatcher.dispatch(PlayerCommand.PLAY, player)
            except DispatchError as e:
                logger.warning("Failed to resume player %s: %s", player, e.message)
                continue

            logger.debug("Successfully resumed player: %s", player)
            resumed += 1

        logger.debug("Resumed %d/%d players successfully", resumed, len(players))

        await self.paused.clear()
        return resumed

    async def toggle(self) -> tuple[str, bool] | None:
        """
        Send PlayPause to the most plausible active player.

        The first playing player in directory order is preferred, then the
        first player at all. If it rejects the command, the remaining
        players are tried in directory order. Does not touch the tracked
        set.

        Returns:
            (player, was_playing) for the player that accepted the command,
            where was_playing is its status just before the toggle, or None.
        """
        players = await self.directory.discover_players()
        if not players:
            logger.debug("No MPRIS media player found, nothing to toggle")
            return None

        preferred = None
        for player in players:
            if await self.prober.is_playing(player):
                preferred = player
                break

        was_playing = preferred is not None
        if was_playing:
            logger.debug("Using active player: %s", preferred)
        else:
            preferred = players[0]
            logger.debug("No active player found, using first available: %s", preferred)

        try:
            await self.dispatcher.dispatch(PlayerCommand.PLAY_PAUSE, preferred)
        except DispatchError as e:
            logger.debug("Failed to send PlayPause to preferred player %s: %s", preferred, e.message)
            logger.warning("Preferred player failed, trying other players as fallback")
        else:
            logger.debug("Sent play/pause command to %s", preferred)
            return preferred, was_playing

        last_error: DispatchError | None = None
        for player in players:
            if player == preferred:
                continue

            was_playing = await self.prober.is_playing(player)
            logger.debug("Trying fallback player: %s (playing: %s)", player, was_playing)
            try:
                await self.dispatcher.dispatch(PlayerCommand.PLAY_PAUSE, player)
            except DispatchError as e:
                logger.debug("Failed to send PlayPause to %s: %s", player, e.message)
                last_error = e
                continue

            logger.debug("Sent play/pause command to fallback player %s", player)
            return player, was_playing

        if last_error is not None:
            logger.warning(
                "Failed to send PlayPause to all MPRIS players. Last error: %s",
                last_error.message,
            )
        else:
            logger.warning("No other MPRIS players available to send PlayPause")
        return None

    async def is_playing(self) -> bool:
        """Check if the first discovered player is playing."""
        players = await self.directory.discover_players()
        if not players:
            return False
        return await self.prober.is_playing(players[0])

    async def status(self) -> dict[str, PlaybackStatus]:
        """
        Probe every discovered player.

        Returns:
            Player bus name -> PlaybackStatus, in directory order.
        """
        players = await self.directory.discover_players()
        return {player: await self.prober.probe(player) for player in players}

    async def close(self) -> None:
        """Close the bus connection. Tracked players are kept."""
        await self.bus.close()


# Global controller instance (lazy created)
_controller: MediaController | None = None


def get_controller() -> MediaController:
    """
    Get the process-wide controller (lazy created singleton).

    Returns:
        The MediaController instance.
    """
    global _controller

    if _controller is None:
        _controller = MediaController()

    return _controller


def set_controller(controller: MediaController | None) -> None:
    """
    Replace the process-wide controller.

    Passing None drops it; the next get_controller() creates a fresh one
    with nothing tracked.
    """
    global _controller
    _controller = controller


async def send_pause() -> None:
    """Pause all playing media players, remembering which ones for send_play()."""
    try:
        await get_controller().pause()
    except Exception as e:
        logger.warning("Failed to pause media: %s", e)


async def send_play() -> None:
    """Resume the media players paused by the last send_pause(), if any."""
    try:
        await get_controller().resume()
    except Exception as e:
        logger.warning("Failed to resume media: %s", e)


async def send_play_pause() -> None:
    """Toggle play/pause on the active media player."""
    try:
        toggled = await get_controller().toggle()
    except Exception as e:
        logger.warning("Failed to send play/pause command: %s", e)
        return

    if toggled is not None:
        logger.debug("Sent play/pause command to media player")
