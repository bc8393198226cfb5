"""Playback session service layer."""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from highlight_reel.config import settings
from highlight_reel.models.interval import HighlightInterval
from highlight_reel.playback.config import PlaybackConfig
from highlight_reel.playback.controller import PlaybackController
from highlight_reel.playback.scheduler import Scheduler
from highlight_reel.playback.simulated_player import SimulatedPlayer
from highlight_reel.workers.reel_runner import ReelRunner

logger = logging.getLogger(__name__)

PlayerFactory = Callable[[str], SimulatedPlayer]


class SessionNotFoundError(ValueError):
    """No playback session is open."""
    pass


@dataclass
class IntervalChangeEvent:
    """One notification from the controller's interval-change channel."""
    interval_id: Optional[str]
    at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        return {"interval_id": self.interval_id, "at": self.at.isoformat()}


@dataclass
class ReelSession:
    """A player, the controller driving it and the notifications it emitted."""
    session_id: str
    video_id: str
    player: SimulatedPlayer
    controller: PlaybackController
    runner: ReelRunner
    events: List[IntervalChangeEvent] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def current_interval_id(self) -> Optional[str]:
        interval = self.controller.current_interval()
        return interval.id if interval else None

    def record(self, interval_id: Optional[str]):
        self.events.append(IntervalChangeEvent(interval_id=interval_id))


class SessionService:
    """Owns the single active playback session."""

    def __init__(
        self,
        config: Optional[PlaybackConfig] = None,
        load_seconds: Optional[float] = None,
        scheduler: Optional[Scheduler] = None,
        player_factory: Optional[PlayerFactory] = None,
    ):
        self.config = config or PlaybackConfig.from_settings(settings)
        self.load_seconds = settings.simulated_load_seconds if load_seconds is None else load_seconds
        self._scheduler = scheduler
        self._player_factory = player_factory or (
            lambda video_id: SimulatedPlayer(video_id, scheduler=self._scheduler)
        )
        self._session: Optional[ReelSession] = None

    @property
    def session(self) -> Optional[ReelSession]:
        return self._session

    def get_session(self) -> ReelSession:
        """
        Get the active session.

        Raises:
            SessionNotFoundError: If no session is open
        """
        if self._session is None:
            raise SessionNotFoundError("No playback session is open")
        return self._session

    async def open_session(
        self,
        video_id: str,
        intervals: List[HighlightInterval],
        autoplay: bool = True,
    ) -> ReelSession:
        """
        Open a session for a video, replacing any existing one.

        Args:
            video_id: Video to load in the player
            intervals: Highlight intervals of the reel
            autoplay: Start the reel in the background with retries

        Returns:
            The new session

        Raises:
            PlayerBindError: If the player fails to load
            ValueError: If the intervals are invalid
        """
        await self.close_session()

        player = self._player_factory(video_id)
        controller = PlaybackController(config=self.config, scheduler=self._scheduler)
        session = ReelSession(
            session_id=uuid.uuid4().hex,
            video_id=video_id,
            player=player,
            controller=controller,
            runner=ReelRunner(self.config),
        )
        controller.on_interval_change(session.record)

        player.load(self.load_seconds)
        await controller.bind(player, player.ready)
        try:
            controller.set_intervals(intervals)
        except ValueError:
            controller.destroy()
            raise
        self._session = session
        logger.info(f"Opened session {session.session_id} for video {video_id}")

        if autoplay and intervals:
            session.runner.start(controller)

        return session

    async def replace_intervals(self, intervals: List[HighlightInterval]) -> ReelSession:
        session = self.get_session()
        await session.runner.cancel()
        session.controller.set_intervals(intervals)
        return session

    async def start_reel(self) -> ReelSession:
        """Play the reel from the start, cancelling a background start."""
        session = self.get_session()
        await session.runner.cancel()
        session.controller.play_reel()
        return session

    async def close_session(self) -> bool:
        """Destroy the active session. Returns False if none was open."""
        if self._session is None:
            return False

        session = self._session
        self._session = None
        await session.runner.shutdown()
        session.controller.destroy()
        logger.info(f"Closed session {session.session_id}")
        return True


# Global session service instance
session_service = SessionService()
