"""
mediapause - Entry Point

Run with: python -m mediapause {pause,resume,toggle,status,list}
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from mediapause import __version__
from mediapause.config import reload_config
from mediapause.controller import MediaController

logger = logging.getLogger("mediapause")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("dbus_fast").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="mediapause",
        description="Pause and resume MPRIS media players over D-Bus",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to an MPRIS config TOML file (default: bundled mpris.toml)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    pause = subparsers.add_parser("pause", help="Pause every playing player")
    pause.add_argument(
        "--hold",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Wait this long, then resume the paused players",
    )

    subparsers.add_parser(
        "resume", help="Resume players paused earlier in this process (no-op otherwise)"
    )
    subparsers.add_parser("toggle", help="Send PlayPause to the active player")
    subparsers.add_parser("status", help="Show the playback status of every player")
    subparsers.add_parser("list", help="List the MPRIS players on the session bus")

    return parser.parse_args(argv)


async def run_command(args: argparse.Namespace) -> None:
    """Run a single CLI command against a fresh controller."""
    controller = MediaController()

    try:
        if args.command == "pause":
            paused = await controller.pause()
            logger.info("Paused %d player(s): %s", len(paused), ", ".join(paused) or "-")
            if args.hold is not None and paused:
                logger.info("Holding for %.1fs before resuming", args.hold)
                try:
                    await asyncio.sleep(args.hold)
                finally:
                    resumed = await controller.resume()
                    logger.info("Resumed %d/%d player(s)", resumed, len(paused))

        elif args.command == "resume":
            resumed = await controller.resume()
            logger.info("Resumed %d player(s)", resumed)

        elif args.command == "toggle":
            toggled = await controller.toggle()
            if toggled is None:
                logger.info("No player accepted PlayPause")
            else:
                player, was_playing = toggled
                logger.info(
                    "Sent PlayPause to %s (was %s)", player, "playing" if was_playing else "not playing"
                )

        elif args.command == "status":
            for player, status in (await controller.status()).items():
                print(f"{player}\t{status.value}")

        elif args.command == "list":
            for player in await controller.directory.discover_players():
                print(player)
    finally:
        await controller.close()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    try:
        if args.config is not None:
            reload_config(args.config)
        asyncio.run(run_command(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception("Fatal error: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
