"""Pydantic schemas for API requests and responses."""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from highlight_reel.models.interval import HighlightInterval


# =============================================================================
# Session Schemas
# =============================================================================

class SessionCreate(BaseModel):
    """Request to open a playback session."""
    video_id: str = Field(..., min_length=1, description="Video to load in the player")
    intervals: List[HighlightInterval] = Field(default_factory=list, description="Highlight intervals of the reel")
    autoplay: bool = Field(True, description="Start the reel in the background once the player is ready")


class IntervalsUpdate(BaseModel):
    """Request to replace the reel's intervals."""
    intervals: List[HighlightInterval]


class SeekRequest(BaseModel):
    """Request to jump to a highlight by index."""
    index: int
    play: bool = Field(False, description="Keep sequencing from the target highlight")


class SeekWithinRequest(BaseModel):
    """Request to seek inside the current highlight."""
    fraction: float = Field(..., ge=0, le=1)


class ProgressResponse(BaseModel):
    """Reel position and playhead position within the current highlight."""
    position: int
    total: int
    percentage: float
    segment_elapsed: float
    segment_duration: float
    segment_percentage: float


class StartStatusResponse(BaseModel):
    """Background reel start status."""
    status: str
    attempts: int
    error: Optional[str] = None


class SessionResponse(BaseModel):
    """Playback session snapshot."""
    session_id: str
    video_id: str
    state: str
    is_playing: bool
    current_interval: Optional[HighlightInterval]
    current_index: int
    intervals: List[HighlightInterval]
    progress: ProgressResponse
    start: StartStatusResponse
    created_at: datetime


class IntervalChangeEventResponse(BaseModel):
    """Interval change notification."""
    interval_id: Optional[str]
    at: datetime


# =============================================================================
# Health Check
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    app: str
    version: str
    session_open: bool
