"""
Highlight interval playback engine.

Plays a reel of discontinuous highlight intervals through a single
external player:

1. IntervalStore: sorted intervals and the current cursor
2. PlaybackController: state machine issuing seek/play/pause commands
   and chaining settle and segment timers
3. ExternalPlayer: the capability surface any player must expose
"""
from .config import PlaybackConfig, DEFAULT_PLAYBACK_CONFIG
from .controller import PlaybackController, PlaybackState
from .errors import (
    EmptyReelError,
    IntervalNotFoundError,
    PlaybackError,
    PlayerBindError,
    PlayerNotReadyError,
    ReelStartError,
)
from .interval_store import IntervalStore, NO_INDEX
from .player import ExternalPlayer, PlayerState, ReadySignal, is_player_ready

__all__ = [
    "PlaybackConfig",
    "DEFAULT_PLAYBACK_CONFIG",
    "PlaybackController",
    "PlaybackState",
    "PlaybackError",
    "PlayerBindError",
    "PlayerNotReadyError",
    "EmptyReelError",
    "IntervalNotFoundError",
    "ReelStartError",
    "IntervalStore",
    "NO_INDEX",
    "ExternalPlayer",
    "PlayerState",
    "ReadySignal",
    "is_player_ready",
]
