"""Highlight interval playback controller.

Drives one external player through the reel's discontinuous time ranges.
Every segment goes through the same chain:

1. notify observers, seek to the interval start, play
2. wait a settling delay (the player's seek completion is not observable)
3. wait the interval duration
4. advance to the next interval, or pause and finish after the last one

Only one timer of that chain is ever live. Every control operation
cancels it before touching the player, so a stale timer can never resume
playback after the state has moved on.
"""
import asyncio
import enum
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional

from highlight_reel.models.interval import HighlightInterval, ReelProgress, SegmentProgress
from highlight_reel.playback.config import PlaybackConfig, DEFAULT_PLAYBACK_CONFIG
from highlight_reel.playback.errors import (
    EmptyReelError,
    IntervalNotFoundError,
    PlayerBindError,
    PlayerNotReadyError,
)
from highlight_reel.playback.interval_store import IntervalStore
from highlight_reel.playback.player import ExternalPlayer, PlayerState, is_player_ready
from highlight_reel.playback.scheduler import AsyncioScheduler, PendingTransition, Scheduler
from highlight_reel.utils.timefmt import format_time

logger = logging.getLogger(__name__)

IntervalChangeCallback = Callable[[Optional[str]], None]


class PlaybackState(str, enum.Enum):
    """Playback controller state."""
    IDLE = "idle"  # No player bound
    PARKED = "parked"  # Holding a current interval, not advancing
    SEQUENCING = "sequencing"  # Auto-advancing through the reel
    FINISHED = "finished"  # Reel played to the end


class PlaybackController:
    """State machine that plays a reel of highlight intervals on one player."""

    def __init__(
        self,
        config: PlaybackConfig = DEFAULT_PLAYBACK_CONFIG,
        scheduler: Optional[Scheduler] = None,
        store: Optional[IntervalStore] = None,
    ):
        self.config = config
        self._store = store if store is not None else IntervalStore()
        self._pending = PendingTransition(scheduler or AsyncioScheduler())
        self._player: Optional[ExternalPlayer] = None
        self._state = PlaybackState.IDLE
        self._observer: Optional[IntervalChangeCallback] = None
        self._first_segment_pending = True
        self._last_notified: Optional[str] = None

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_sequencing(self) -> bool:
        return self._state == PlaybackState.SEQUENCING

    @property
    def player(self) -> Optional[ExternalPlayer]:
        return self._player

    @property
    def store(self) -> IntervalStore:
        return self._store

    @property
    def has_pending_transition(self) -> bool:
        return self._pending.is_armed

    @property
    def pending_transition(self) -> Optional[str]:
        """Label of the live timer ("settle", "segment", "parked-segment")."""
        return self._pending.label

    def current_interval(self) -> Optional[HighlightInterval]:
        return self._store.current_interval()

    def progress(self) -> ReelProgress:
        return self._store.progress()

    def is_currently_playing(self) -> bool:
        """Check if the reel is sequencing and the player reports PLAYING."""
        if not self.is_sequencing or not is_player_ready(self._player):
            return False
        try:
            return self._player.get_player_state() == PlayerState.PLAYING
        except Exception as e:
            logger.warning(f"Failed to get player state: {e}")
            return False

    def segment_progress(self) -> SegmentProgress:
        """Get the playhead position within the current interval."""
        interval = self._store.current_interval()
        if interval is None:
            return SegmentProgress(elapsed=0.0, duration=0.0, percentage=0.0)

        current_time = interval.start_time
        if self._player is not None:
            try:
                current_time = float(self._player.get_current_time())
            except Exception as e:
                logger.warning(f"Failed to get current time: {e}")

        elapsed = max(0.0, min(current_time - interval.start_time, interval.duration))
        percentage = (elapsed / interval.duration) * 100 if interval.duration > 0 else 0.0
        return SegmentProgress(
            elapsed=elapsed,
            duration=interval.duration,
            percentage=max(0.0, min(100.0, percentage)),
        )

    # =========================================================================
    # Binding & lifecycle
    # =========================================================================

    async def bind(self, player: ExternalPlayer, ready: Any):
        """
        Bind an external player once it signals ready.

        Args:
            player: The player to drive
            ready: Awaitable, or an object with an async wait() method,
                   that completes when the player has loaded and raises
                   if it failed to load

        Raises:
            PlayerBindError: If already bound or the player failed to load
        """
        if self._player is not None:
            raise PlayerBindError("A player is already bound; destroy it first")

        waiter: Awaitable = ready.wait() if hasattr(ready, "wait") else ready
        try:
            await waiter
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Player failed to initialize: {e}")
            raise PlayerBindError(f"Player failed to initialize: {e}") from e

        if self.config.ready_grace_seconds > 0:
            await asyncio.sleep(self.config.ready_grace_seconds)

        self._player = player
        self._state = PlaybackState.PARKED
        self._first_segment_pending = True
        logger.info(f"Player bound (control methods ready: {is_player_ready(player)})")

    def destroy(self):
        """Stop playback, destroy the player and clear all session state."""
        self._pending.cancel()
        if self._player is not None:
            self._command("pause_video")
            self._command("destroy")
        self._player = None
        self._store.clear()
        self._state = PlaybackState.IDLE
        self._first_segment_pending = True
        self._observer = None
        self._last_notified = None
        logger.info("Playback session destroyed")

    def on_interval_change(self, callback: Optional[IntervalChangeCallback]):
        """Register the observer for interval changes (replaces any previous one)."""
        self._observer = callback

    def set_intervals(self, intervals: Iterable[HighlightInterval]):
        """
        Replace the reel.

        Discards any pending transition, stops sequencing (pausing the
        player if it was advancing) and moves the cursor to the first
        interval. The observer hears about the new current interval when it
        differs from the last one announced.

        Raises:
            ValueError: If two intervals share an id
        """
        self._store.set_intervals(intervals)
        self._pending.cancel()
        if self.is_sequencing:
            self._command("pause_video")
        self._state = PlaybackState.PARKED if self._player is not None else PlaybackState.IDLE
        self._first_segment_pending = True
        logger.info(f"Loaded {len(self._store)} highlight intervals")

        current = self._store.current_interval()
        if current is None:
            self._notify(None)
        elif self._last_notified is not None and self._last_notified != current.id:
            self._notify(current.id)

    # =========================================================================
    # Playback control
    # =========================================================================

    def play_reel(self):
        """
        Play the whole reel from the first interval.

        Raises:
            PlayerNotReadyError: If no player is bound or it lacks its commands
            EmptyReelError: If there are no intervals
        """
        self._require_player()
        if len(self._store) == 0:
            raise EmptyReelError("No highlight intervals to play")

        self.pause_all()
        self._store.move_to(0)
        self._state = PlaybackState.SEQUENCING
        self._start_segment()

    def pause_all(self):
        """Cancel the pending transition and pause the player."""
        self._pending.cancel()
        if self._player is None:
            logger.debug("pause_all: no player bound")
            return

        logger.info("Pausing highlight reel")
        self._state = PlaybackState.PARKED
        self._command("pause_video")

    def resume_or_start_from_current(self):
        """
        Start sequencing from the current interval without resetting the cursor.

        Raises:
            PlayerNotReadyError: If no player is bound or it lacks its commands
            EmptyReelError: If there are no intervals
        """
        self._require_player()
        if self._store.current_interval() is None:
            raise EmptyReelError("No highlight intervals to play")

        if self.is_sequencing:
            # Already sequencing; only resume a player paused from outside
            self._command("play_video")
            return

        self._pending.cancel()
        self._state = PlaybackState.SEQUENCING
        self._start_segment()

    def play_specific_interval_by_id(self, interval_id: str):
        """
        Play one interval and pause at its end, without auto-advancing.

        Raises:
            IntervalNotFoundError: If no interval has that id
            PlayerNotReadyError: If no player is bound or it lacks its commands
        """
        index = self._store.index_of(interval_id)
        if index is None:
            raise IntervalNotFoundError(f"Highlight {interval_id} not found")
        self._require_player()

        self._pending.cancel()
        self._state = PlaybackState.PARKED
        interval = self._store.move_to(index)
        self._notify(interval.id)

        if not self._seek_and_play(interval):
            return
        delay = self._settle_delay()
        self._first_segment_pending = False
        self._pending.arm(
            delay,
            self._on_settled,
            interval.duration,
            self._on_parked_segment_end,
            "parked-segment",
            label="settle",
        )

    def seek_to_index(self, index: int):
        """
        Park at the interval at index and seek to its start without playing.

        Out-of-range indices are logged and ignored.

        Raises:
            PlayerNotReadyError: If no player is bound or it lacks its commands
        """
        if not self._store.is_valid_index(index):
            logger.error(f"Invalid highlight index: {index}")
            return
        self._require_player()

        self.pause_all()
        interval = self._store.move_to(index)
        logger.info(
            f"Seeking to highlight {index + 1}/{len(self._store)}: "
            f"{format_time(interval.start_time)} - {format_time(interval.end_time)}"
        )
        self._command("seek_to", interval.start_time, True)
        self._notify(interval.id)

    def seek_to_index_and_play(self, index: int):
        """
        Jump to the interval at index and sequence onwards from there.

        Out-of-range indices are logged and ignored.

        Raises:
            PlayerNotReadyError: If no player is bound or it lacks its commands
        """
        if not self._store.is_valid_index(index):
            logger.error(f"Invalid highlight index: {index}")
            return
        self._require_player()

        self._pending.cancel()
        self._store.move_to(index)
        self._state = PlaybackState.SEQUENCING
        self._start_segment()

    def skip_next(self):
        """Move to the next interval. A no-op at the last one."""
        if not self._store.has_next():
            logger.info("Already at last highlight")
            return
        self._skip_to(self._store.current_index + 1)

    def skip_previous(self):
        """Move to the previous interval. A no-op at the first one."""
        if not self._store.has_previous():
            logger.info("Already at first highlight")
            return
        self._skip_to(self._store.current_index - 1)

    def seek_within_current(self, fraction: float):
        """
        Seek to a fraction of the way through the current interval.

        When sequencing, the segment timer is re-armed for the remainder.

        Raises:
            ValueError: If fraction is outside [0, 1]
            EmptyReelError: If there is no current interval
            PlayerNotReadyError: If no player is bound or it lacks its commands
        """
        if not 0.0 <= fraction <= 1.0:
            raise ValueError("Fraction must be between 0 and 1")
        interval = self._store.current_interval()
        if interval is None:
            raise EmptyReelError("No current highlight to seek within")
        self._require_player()

        self._pending.cancel()
        target = interval.start_time + fraction * interval.duration
        logger.info(f"Seeking within highlight {interval.id} to {format_time(target)}")
        if not self._command("seek_to", target, True):
            if self.is_sequencing:
                logger.warning(f"Could not seek within highlight {interval.id}; parking")
                self._state = PlaybackState.PARKED
            return

        if self.is_sequencing:
            self._pending.arm(
                self.config.seek_settle_seconds,
                self._on_settled,
                interval.end_time - target,
                self._on_segment_end,
                "segment",
                label="settle",
            )

    # =========================================================================
    # Internals
    # =========================================================================

    def _require_player(self) -> ExternalPlayer:
        if self._player is None:
            raise PlayerNotReadyError("No player bound")
        if not is_player_ready(self._player):
            raise PlayerNotReadyError("Player is not ready yet")
        return self._player

    def _command(self, name: str, *args) -> bool:
        """Issue a player command, degrading failures to a warning."""
        if self._player is None:
            return False
        try:
            getattr(self._player, name)(*args)
            return True
        except Exception as e:
            logger.warning(f"Player command {name} failed: {e}")
            return False

    def _notify(self, interval_id: Optional[str]):
        self._last_notified = interval_id
        if self._observer is None:
            return
        try:
            self._observer(interval_id)
        except Exception as e:
            logger.warning(f"Interval change observer failed: {e}")

    def _settle_delay(self) -> float:
        if self._first_segment_pending:
            return self.config.initial_settle_seconds
        return self.config.seek_settle_seconds

    def _seek_and_play(self, interval: HighlightInterval) -> bool:
        ok = self._command("seek_to", interval.start_time, True) and self._command("play_video")
        if not ok:
            logger.warning(f"Could not start highlight {interval.id}; parking")
            self._state = PlaybackState.PARKED
        return ok

    def _start_segment(self):
        """Play the current interval and arm the timer chain for it."""
        self._require_player()
        interval = self._store.current_interval()
        if interval is None:
            self._finish()
            return

        logger.info(
            f"Playing highlight {self._store.current_index + 1}/{len(self._store)}: "
            f"{format_time(interval.start_time)} - {format_time(interval.end_time)}"
        )
        self._notify(interval.id)

        if not self._seek_and_play(interval):
            return

        delay = self._settle_delay()
        self._first_segment_pending = False
        self._pending.arm(
            delay,
            self._on_settled,
            interval.duration,
            self._on_segment_end,
            "segment",
            label="settle",
        )

    def _on_settled(self, duration: float, on_end: Callable[[], None], label: str):
        logger.debug(f"Seek settled, playing for {duration:.2f}s")
        self._pending.arm(duration, on_end, label=label)

    def _on_segment_end(self):
        if not self.is_sequencing:
            return

        logger.info(f"Finished highlight {self._store.current_index + 1}/{len(self._store)}")
        if not self._store.has_next():
            self._finish()
            return

        self._store.move_to(self._store.current_index + 1)
        try:
            self._start_segment()
        except PlayerNotReadyError as e:
            logger.error(f"Stopping highlight reel: {e}")
            self._state = PlaybackState.PARKED if self._player is not None else PlaybackState.IDLE

    def _on_parked_segment_end(self):
        logger.info("Finished selected highlight")
        self._command("pause_video")

    def _finish(self):
        logger.info("Reached the end of the highlight reel")
        self._pending.cancel()
        self._state = PlaybackState.FINISHED
        self._command("pause_video")
        self._notify(None)

    def _skip_to(self, index: int):
        self._pending.cancel()
        interval = self._store.move_to(index)
        logger.info(f"Skipped to highlight {index + 1}/{len(self._store)}")

        if self.is_sequencing:
            self._start_segment()
            return

        if self._state == PlaybackState.FINISHED:
            self._state = PlaybackState.PARKED
        self._notify(interval.id)
