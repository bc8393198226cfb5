"""External player capability.

The engine never talks to a concrete player. It drives any object that
implements :class:`ExternalPlayer`, after the player's one-shot
:class:`ReadySignal` has fired.
"""
import asyncio
import enum
import logging
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class PlayerState(int, enum.Enum):
    """Player state codes (embedded YouTube player numbering)."""
    UNSTARTED = -1
    ENDED = 0
    PLAYING = 1
    PAUSED = 2
    BUFFERING = 3
    CUED = 5


# Methods that must be callable before any command is trusted
REQUIRED_CONTROL_METHODS = ("seek_to", "play_video", "pause_video", "get_player_state")


@runtime_checkable
class ExternalPlayer(Protocol):
    """Capability surface of the video player driven by the engine."""
    
    def seek_to(self, seconds: float, allow_seek_ahead: bool) -> None: ...
    
    def play_video(self) -> None: ...
    
    def pause_video(self) -> None: ...
    
    def get_player_state(self) -> int: ...
    
    def get_current_time(self) -> float: ...
    
    def destroy(self) -> None: ...


def is_player_ready(player: Optional[object]) -> bool:
    """Check that a player exists and exposes every control method."""
    if player is None:
        return False
    return all(callable(getattr(player, name, None)) for name in REQUIRED_CONTROL_METHODS)


class ReadySignal:
    """One-shot ready/error notification delivered by a player after loading."""
    
    def __init__(self):
        self._event = asyncio.Event()
        self._error: Optional[BaseException] = None
    
    @property
    def is_set(self) -> bool:
        return self._event.is_set()
    
    @property
    def error(self) -> Optional[BaseException]:
        return self._error
    
    def set_ready(self):
        """Report that the player finished loading."""
        if self._event.is_set():
            logger.warning("Ready signal already delivered, ignoring ready")
            return
        self._event.set()
    
    def set_error(self, error: BaseException):
        """Report that the player failed to load."""
        if self._event.is_set():
            logger.warning(f"Ready signal already delivered, ignoring error: {error}")
            return
        self._error = error
        self._event.set()
    
    async def wait(self):
        """
        Wait for the signal.
        
        Raises:
            The error passed to set_error, if the player failed to load
        """
        await self._event.wait()
        if self._error is not None:
            raise self._error
