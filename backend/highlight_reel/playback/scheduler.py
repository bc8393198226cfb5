"""Timer plumbing for the playback engine."""
import asyncio
import logging
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay."""
    
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop."""
    
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, callback, *args)


class PendingTransition:
    """
    Single-slot holder for the next scheduled transition.
    
    Arming always cancels the previous handle first, so at most one
    transition is live at any instant.
    """
    
    def __init__(self, scheduler: Scheduler):
        self._scheduler = scheduler
        self._handle: Optional[TimerHandle] = None
        self._label: Optional[str] = None
    
    @property
    def is_armed(self) -> bool:
        return self._handle is not None
    
    @property
    def label(self) -> Optional[str]:
        return self._label
    
    def arm(self, delay: float, callback: Callable[..., Any], *args: Any, label: str = "transition"):
        """Cancel any pending transition and schedule a new one."""
        self.cancel()
        self._label = label
        self._handle = self._scheduler.call_later(max(0.0, delay), self._fire, callback, args)
        logger.debug(f"Armed {label} timer for {delay:.3f}s")
    
    def cancel(self) -> bool:
        """Cancel the pending transition. Returns True if one was live."""
        if self._handle is None:
            return False
        self._handle.cancel()
        logger.debug(f"Cancelled {self._label} timer")
        self._handle = None
        self._label = None
        return True
    
    def _fire(self, callback: Callable[..., Any], args: tuple):
        # Slot is free before the callback runs so it can arm the next transition
        self._handle = None
        self._label = None
        callback(*args)
