"""Playback engine errors."""


class PlaybackError(RuntimeError):
    """Base class for playback engine errors."""
    pass


class PlayerBindError(PlaybackError):
    """The external player failed to initialize or could not be bound."""
    pass


class PlayerNotReadyError(PlaybackError):
    """A control operation was issued before the player exposes its commands."""
    pass


class EmptyReelError(PlaybackError):
    """An operation needs highlight intervals but none are set."""
    pass


class IntervalNotFoundError(PlaybackError, LookupError):
    """No highlight interval with the requested id."""
    pass


class ReelStartError(PlaybackError):
    """Starting the reel failed after exhausting all retries."""
    pass
