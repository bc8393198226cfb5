#!/usr/bin/env python3
"""
CLI tool to play a highlight reel against the simulated player.

Usage:
    python scripts/play_reel_cli.py <intervals.json> [--video-id <id>] [--output <file>]

The intervals file holds a list (or an object with an "intervals" list) of
{"id", "name", "start_time", "end_time", "reason"} entries. Times may be
seconds or "M:SS" / "H:MM:SS" strings.

Example:
    python scripts/play_reel_cli.py ./reel.json --settle-initial 0.5 --settle-seek 0.2
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from highlight_reel.models.interval import HighlightInterval
from highlight_reel.playback.config import PlaybackConfig
from highlight_reel.playback.controller import PlaybackController
from highlight_reel.playback.simulated_player import SimulatedPlayer
from highlight_reel.utils.timefmt import format_time, parse_time_to_seconds
from highlight_reel.workers.reel_runner import start_reel_with_retry


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
)
logger = logging.getLogger(__name__)


def load_intervals(path: Path) -> List[HighlightInterval]:
    """Load highlight intervals from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Intervals file not found: {path}")

    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("intervals", [])

    intervals = []
    for i, item in enumerate(data):
        item = dict(item)
        item.setdefault("id", f"highlight-{i + 1}")
        for key in ("start_time", "end_time"):
            if isinstance(item.get(key), str):
                item[key] = parse_time_to_seconds(item[key])
        intervals.append(HighlightInterval(**item))
    return intervals


async def play_reel(
    intervals: List[HighlightInterval],
    video_id: str,
    config: Optional[PlaybackConfig] = None,
) -> list:
    """
    Play the reel to the end and return the interval change events.

    Args:
        intervals: Highlight intervals
        video_id: Video id given to the simulated player
        config: Optional timing override
    """
    if not intervals:
        raise ValueError("No highlight intervals to play")
    config = config or PlaybackConfig()
    loop = asyncio.get_running_loop()
    finished = asyncio.Event()
    events = []

    def on_change(interval_id):
        events.append({"interval_id": interval_id, "at": round(loop.time() - started_at, 3)})
        if interval_id is None:
            finished.set()

    player = SimulatedPlayer(video_id)
    controller = PlaybackController(config=config)
    controller.on_interval_change(on_change)

    started_at = loop.time()
    player.load()
    await controller.bind(player, player.ready)
    controller.set_intervals(intervals)

    total = sum(interval.duration for interval in intervals)
    logger.info(f"Playing {len(intervals)} highlights ({format_time(total)} total)")

    try:
        await start_reel_with_retry(
            controller,
            max_attempts=config.start_retry_attempts,
            backoff_seconds=config.start_retry_backoff_seconds,
        )
        await finished.wait()
    finally:
        controller.destroy()

    return events


def main():
    parser = argparse.ArgumentParser(
        description="Play a highlight reel against the simulated player",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Play a reel and print the interval change events
    python scripts/play_reel_cli.py reel.json

    # Write events to a file with custom settling delays
    python scripts/play_reel_cli.py reel.json --settle-initial 1.0 --output events.json
        """
    )

    parser.add_argument(
        "intervals_path",
        type=Path,
        help="Path to the intervals JSON file"
    )

    parser.add_argument(
        "--video-id", "-v",
        default="simulated",
        help="Video id for the simulated player"
    )

    parser.add_argument(
        "--settle-initial",
        type=float,
        default=0.5,
        help="Settling delay before the first highlight (seconds)"
    )

    parser.add_argument(
        "--settle-seek",
        type=float,
        default=0.2,
        help="Settling delay before later highlights (seconds)"
    )

    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Write events JSON here instead of stdout"
    )

    args = parser.parse_args()

    # Run
    try:
        config = PlaybackConfig(
            initial_settle_seconds=args.settle_initial,
            seek_settle_seconds=args.settle_seek,
            start_initial_delay_seconds=0.0,
        )
        intervals = load_intervals(args.intervals_path)
        events = asyncio.run(play_reel(intervals, args.video_id, config))
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Error: {e}")
        sys.exit(1)

    payload = json.dumps({"video_id": args.video_id, "events": events}, indent=2)
    if args.output:
        args.output.write_text(payload)
        logger.info(f"Events written to: {args.output}")
    else:
        print(payload)


if __name__ == "__main__":
    main()
