"""Highlight interval model and progress containers."""
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, model_validator


class HighlightInterval(BaseModel):
    """A [start_time, end_time) range of the source video worth showing."""
    
    model_config = ConfigDict(frozen=True)
    
    id: str = Field(..., min_length=1)
    name: str = ""
    start_time: float = Field(..., ge=0)
    end_time: float = Field(..., gt=0)
    reason: str = ""
    
    @model_validator(mode="after")
    def _check_range(self) -> "HighlightInterval":
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self
    
    @property
    def duration(self) -> float:
        return self.end_time - self.start_time
    
    def contains(self, time: float) -> bool:
        """Check if a video time falls inside this interval."""
        return self.start_time <= time < self.end_time
    
    def __repr__(self):
        return f"<HighlightInterval(id={self.id}, {self.start_time:.2f}-{self.end_time:.2f})>"


@dataclass
class ReelProgress:
    """Position of the cursor within the reel, for display."""
    position: int  # 1-based, 0 when the reel is empty
    total: int
    percentage: float
    
    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "total": self.total,
            "percentage": self.percentage,
        }


@dataclass
class SegmentProgress:
    """Playhead position within the current highlight."""
    elapsed: float
    duration: float
    percentage: float
    
    def to_dict(self) -> dict:
        return {
            "elapsed": self.elapsed,
            "duration": self.duration,
            "percentage": self.percentage,
        }
