"""Background reel starter using asyncio."""
import asyncio
import enum
import logging
from typing import Optional

from highlight_reel.playback.config import PlaybackConfig
from highlight_reel.playback.controller import PlaybackController
from highlight_reel.playback.errors import EmptyReelError, PlayerNotReadyError, ReelStartError

logger = logging.getLogger(__name__)


class StartStatus(str, enum.Enum):
    """Reel start status enumeration."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


async def start_reel_with_retry(
    controller: PlaybackController,
    max_attempts: int,
    backoff_seconds: float,
    initial_delay: float = 0.0,
) -> int:
    """
    Start the reel, retrying while the player is not ready yet.

    Args:
        controller: Controller with a bound player and intervals
        max_attempts: Attempts before giving up
        backoff_seconds: Fixed wait between attempts
        initial_delay: Wait before the first attempt

    Returns:
        The attempt number that succeeded

    Raises:
        ReelStartError: If every attempt failed
    """
    if initial_delay > 0:
        await asyncio.sleep(initial_delay)

    last_error: Optional[Exception] = None
    for attempt in range(1, max_attempts + 1):
        try:
            controller.play_reel()
            logger.info(f"Highlight reel started (attempt {attempt}/{max_attempts})")
            return attempt
        except (PlayerNotReadyError, EmptyReelError) as e:
            last_error = e
            controller.pause_all()
            if attempt < max_attempts:
                logger.info(
                    f"Failed to start highlights (attempt {attempt}/{max_attempts}), "
                    f"retrying in {backoff_seconds}s: {e}"
                )
                await asyncio.sleep(backoff_seconds)

    logger.error(f"Failed to start highlights after {max_attempts} attempts: {last_error}")
    raise ReelStartError(f"Failed to start highlights after {max_attempts} attempts: {last_error}") from last_error


class ReelRunner:
    """Runs one reel start at a time as a background task."""

    def __init__(self, config: PlaybackConfig):
        self.config = config
        self._task: Optional[asyncio.Task] = None
        self.status = StartStatus.PENDING
        self.attempts = 0
        self.error: Optional[str] = None

    def start(self, controller: PlaybackController) -> bool:
        """
        Start the reel in the background with bounded retries.

        Returns:
            True if a start was scheduled, False if one is already running
        """
        if self.is_running():
            logger.warning("Reel start is already running")
            return False

        self.status = StartStatus.RUNNING
        self.attempts = 0
        self.error = None
        self._task = asyncio.create_task(self._run(controller))
        return True

    async def _run(self, controller: PlaybackController):
        """Run a start with error handling and status updates."""
        try:
            self.attempts = await start_reel_with_retry(
                controller,
                max_attempts=self.config.start_retry_attempts,
                backoff_seconds=self.config.start_retry_backoff_seconds,
                initial_delay=self.config.start_initial_delay_seconds,
            )
            self.status = StartStatus.COMPLETED

        except asyncio.CancelledError:
            self.status = StartStatus.CANCELLED
            logger.info("Reel start was cancelled")

        except ReelStartError as e:
            self.status = StartStatus.FAILED
            self.attempts = self.config.start_retry_attempts
            self.error = str(e)

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def wait(self):
        """Wait for the current start to settle."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def cancel(self) -> bool:
        """Cancel a running start."""
        if not self.is_running():
            return False
        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)
        return True

    async def shutdown(self):
        await self.cancel()
        self._task = None
