"""Highlight Reel: continuous playback of highlight intervals over one player."""

__version__ = "1.0.0"
