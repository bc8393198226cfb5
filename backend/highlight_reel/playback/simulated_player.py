"""In-process player with a virtual playhead.

Behaves like the embedded web player the engine was built for: it loads
asynchronously, reports readiness through a ReadySignal, and keeps a
playhead that advances with wall-clock time while playing.
"""
import logging
import time
from typing import Callable, Optional

from highlight_reel.playback.player import PlayerState, ReadySignal
from highlight_reel.playback.scheduler import AsyncioScheduler, Scheduler

logger = logging.getLogger(__name__)

# Error code the embedded player reports for an invalid video id
INVALID_PARAMETER_ERROR = 2


class PlayerDestroyedError(RuntimeError):
    """A command was sent to a player that has been destroyed."""
    pass


class PlayerLoadError(RuntimeError):
    """The player could not load the requested video."""

    def __init__(self, code: int, message: str):
        super().__init__(f"Player error {code}: {message}")
        self.code = code


class SimulatedPlayer:
    """ExternalPlayer implementation backed by a monotonic clock."""

    def __init__(
        self,
        video_id: str,
        duration: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        scheduler: Optional[Scheduler] = None,
    ):
        self.video_id = video_id
        self.duration = duration
        self.ready = ReadySignal()
        self._clock = clock
        self._scheduler = scheduler or AsyncioScheduler()
        self._state = PlayerState.UNSTARTED
        self._position = 0.0
        self._playing_since: Optional[float] = None
        self._destroyed = False
        self.command_log = []

    def load(self, delay: float = 0.0):
        """Start loading the video; the ready signal fires after delay seconds."""
        if delay > 0:
            self._scheduler.call_later(delay, self._finish_loading)
        else:
            self._finish_loading()

    def _finish_loading(self):
        if self._destroyed:
            return
        if not self.video_id:
            logger.error("Simulated player cannot load an empty video id")
            self.ready.set_error(PlayerLoadError(INVALID_PARAMETER_ERROR, "invalid video id"))
            return
        self._state = PlayerState.CUED
        logger.debug(f"Simulated player ready for {self.video_id}")
        self.ready.set_ready()

    def _check_alive(self):
        if self._destroyed:
            raise PlayerDestroyedError("Player has been destroyed")

    def _clamp(self, seconds: float) -> float:
        seconds = max(0.0, seconds)
        if self.duration is not None:
            seconds = min(seconds, self.duration)
        return seconds

    # -------------------------------------------------------------------------
    # ExternalPlayer
    # -------------------------------------------------------------------------

    def seek_to(self, seconds: float, allow_seek_ahead: bool):
        self._check_alive()
        self.command_log.append(("seek_to", seconds))
        self._position = self._clamp(seconds)
        if self._playing_since is not None:
            self._playing_since = self._clock()

    def play_video(self):
        self._check_alive()
        self.command_log.append(("play_video",))
        if self._playing_since is None:
            self._playing_since = self._clock()
        self._state = PlayerState.PLAYING

    def pause_video(self):
        self._check_alive()
        self.command_log.append(("pause_video",))
        self._position = self.get_current_time()
        self._playing_since = None
        self._state = PlayerState.PAUSED

    def get_player_state(self) -> int:
        self._check_alive()
        if self._state == PlayerState.PLAYING and self.duration is not None:
            if self.get_current_time() >= self.duration:
                return PlayerState.ENDED
        return self._state

    def get_current_time(self) -> float:
        self._check_alive()
        if self._playing_since is None:
            return self._position
        return self._clamp(self._position + (self._clock() - self._playing_since))

    def destroy(self):
        self._check_alive()
        self.command_log.append(("destroy",))
        self._playing_since = None
        self._destroyed = True
