"""Playback engine configuration."""
from dataclasses import dataclass


@dataclass
class PlaybackConfig:
    """Timing configuration for the playback engine and its host runner."""
    
    # Settling delays applied after a seek before the segment timer is armed
    initial_settle_seconds: float = 0.5
    seek_settle_seconds: float = 0.2
    
    # Wait after the ready signal before the binding is trusted
    ready_grace_seconds: float = 0.1
    
    # Reel start retries
    start_initial_delay_seconds: float = 1.5
    start_retry_attempts: int = 5
    start_retry_backoff_seconds: float = 1.0
    
    def __post_init__(self):
        for name in (
            "initial_settle_seconds",
            "seek_settle_seconds",
            "ready_grace_seconds",
            "start_initial_delay_seconds",
            "start_retry_backoff_seconds",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")
        if self.start_retry_attempts < 1:
            raise ValueError("start_retry_attempts must be at least 1")
    
    @classmethod
    def from_settings(cls, settings) -> "PlaybackConfig":
        """Build a config from application settings."""
        return cls(
            initial_settle_seconds=settings.initial_settle_seconds,
            seek_settle_seconds=settings.seek_settle_seconds,
            ready_grace_seconds=settings.ready_grace_seconds,
            start_initial_delay_seconds=settings.start_initial_delay_seconds,
            start_retry_attempts=settings.start_retry_attempts,
            start_retry_backoff_seconds=settings.start_retry_backoff_seconds,
        )
    
    def to_dict(self) -> dict:
        """Convert config to dictionary for serialization."""
        return {
            "initial_settle_seconds": self.initial_settle_seconds,
            "seek_settle_seconds": self.seek_settle_seconds,
            "ready_grace_seconds": self.ready_grace_seconds,
            "start_initial_delay_seconds": self.start_initial_delay_seconds,
            "start_retry_attempts": self.start_retry_attempts,
            "start_retry_backoff_seconds": self.start_retry_backoff_seconds,
        }


# Default configuration instance
DEFAULT_PLAYBACK_CONFIG = PlaybackConfig()
