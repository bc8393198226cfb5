# Models module
from highlight_reel.models.interval import HighlightInterval, ReelProgress, SegmentProgress

__all__ = ["HighlightInterval", "ReelProgress", "SegmentProgress"]
