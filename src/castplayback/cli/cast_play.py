"""Command-line interface for castplayback.

This module provides the `cast-play` command, which loads a JSON catalog,
plays one of its tracks on a named Chromecast and prints playback status
changes until the requested duration has elapsed.
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from typing import NoReturn

import castplayback
from castplayback.chromecast import ChromecastClient
from castplayback.media_id import create_media_id


class ConsoleCallback(castplayback.PlaybackCallback):
    """Playback callback printing host notifications to stdout."""

    def __init__(self) -> None:
        """Initialize the callback."""
        self.errors: list[str] = []
        self.completed = False

    def on_completion(self) -> None:
        self.completed = True
        print("Playback completed.")

    def on_playback_status_changed(self, state: castplayback.PlaybackState) -> None:
        print(f"Status: {state.name}")

    def on_error(self, message: str) -> None:
        self.errors.append(message)
        print(f"Error: {message}", file=sys.stderr)

    def set_current_media_id(self, media_id: castplayback.MediaID) -> None:
        print(f"Now playing: {media_id}")


async def play_track(  # noqa: PLR0913
    device: str,
    catalog_url: str,
    media_id: str,
    *,
    categories: Sequence[str] = (),
    position: int | None = None,
    duration: float = 30.0,
    timeout: float = 15.0,
) -> bool:
    """Play a catalog track on a Chromecast and report its progress.

    :param device: Friendly name of the Chromecast.
    :param catalog_url: URL of the JSON catalog.
    :param media_id: Media id of the track to play.
    :param categories: Optional browse categories the track is played from.
    :param position: Optional position in milliseconds to seek to.
    :param duration: Time in seconds to follow playback.
    :param timeout: Discovery and connection timeout in seconds.
    :returns: True when no playback error was reported.
    """
    catalog = await castplayback.JsonCatalogSource(catalog_url).fetch()
    print(f"Loaded {len(catalog)} track(s) from {catalog_url}")

    client = await asyncio.to_thread(ChromecastClient.discover, device, timeout=timeout)
    callback = ConsoleCallback()
    playback = castplayback.CastPlayback(client, catalog)
    playback.set_callback(callback)

    try:
        await asyncio.to_thread(client.connect, timeout)
        playback.start()

        if categories:
            media_id = create_media_id(media_id, *categories)
        await asyncio.to_thread(playback.play, castplayback.QueueItem(castplayback.MediaID(media_id)))
        if position is not None and not callback.errors:
            await asyncio.to_thread(playback.seek_to, position)

        # Status arrives on the pychromecast thread while we wait.
        loop_time = asyncio.get_running_loop().time
        deadline = loop_time() + duration
        while loop_time() < deadline and not callback.completed and not callback.errors:
            await asyncio.sleep(0.5)

        print(f"Position: {playback.get_current_stream_position()}ms")
    finally:
        # Always unsubscribe and release the cast session.
        playback.stop(notify=True)
        await asyncio.to_thread(client.disconnect)

    return not callback.errors


def main() -> NoReturn:
    """Entry point for cast-play command."""
    parser = argparse.ArgumentParser(
        description="Play a catalog track on a Chromecast."
    )
    parser.add_argument("media_id", help="Media id of the track to play")
    parser.add_argument(
        "-d", "--device", required=True, help="Friendly name of the Chromecast"
    )
    parser.add_argument(
        "-c", "--catalog", required=True, help="URL of the JSON music catalog"
    )
    parser.add_argument(
        "--category",
        action="append",
        default=[],
        help="Browse category the track is played from (repeatable)",
    )
    parser.add_argument(
        "-p",
        "--position",
        type=int,
        default=None,
        help="Position in milliseconds to seek to after loading",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=30.0,
        help="Seconds to follow playback before stopping (default: 30.0)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=15.0,
        help="Discovery timeout in seconds (default: 15.0)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (e.g., -v for INFO, -vv for DEBUG)",
    )

    args = parser.parse_args()

    # Configure logging
    log_level = logging.CRITICAL
    if args.verbose == 1:
        log_level = logging.INFO
    elif args.verbose >= 2:  # noqa: PLR2004
        log_level = logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        ok = asyncio.run(
            play_track(
                args.device,
                args.catalog,
                args.media_id,
                categories=args.category,
                position=args.position,
                duration=args.duration,
                timeout=args.timeout,
            )
        )
    except KeyboardInterrupt:
        print("\nPlayback cancelled by user.")
        sys.exit(130)
    except Exception as e:
        print(f"\nError during playback: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
