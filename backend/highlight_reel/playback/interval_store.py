"""Ordered storage of highlight intervals and the current cursor."""
from typing import Iterable, List, Optional, Tuple

from highlight_reel.models.interval import HighlightInterval, ReelProgress

# Cursor value when there is no interval to point at
NO_INDEX = -1


class IntervalStore:
    """Holds the reel's intervals, sorted by start time, and the current index."""

    def __init__(self):
        self._intervals: List[HighlightInterval] = []
        self._index = NO_INDEX

    def __len__(self):
        return len(self._intervals)

    @property
    def intervals(self) -> Tuple[HighlightInterval, ...]:
        return tuple(self._intervals)

    @property
    def current_index(self) -> int:
        return self._index

    def set_intervals(self, intervals: Iterable[HighlightInterval]):
        """
        Replace the reel with a sorted copy of the given intervals.

        The cursor moves to the first interval, or to NO_INDEX when the
        list is empty.

        Raises:
            ValueError: If two intervals share an id
        """
        ordered = sorted(intervals, key=lambda interval: interval.start_time)

        seen = set()
        for interval in ordered:
            if interval.id in seen:
                raise ValueError(f"Duplicate highlight id: {interval.id}")
            seen.add(interval.id)

        self._intervals = ordered
        self._index = 0 if ordered else NO_INDEX

    def clear(self):
        self._intervals = []
        self._index = NO_INDEX

    def current_interval(self) -> Optional[HighlightInterval]:
        """Get the interval under the cursor, if any."""
        if not self.is_valid_index(self._index):
            return None
        return self._intervals[self._index]

    def progress(self) -> ReelProgress:
        """Get 1-based cursor position and percentage through the reel."""
        total = len(self._intervals)
        position = self._index + 1 if total else 0
        percentage = (position / total) * 100 if total > 0 else 0.0
        return ReelProgress(position=position, total=total, percentage=percentage)

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < len(self._intervals)

    def move_to(self, index: int) -> HighlightInterval:
        """
        Move the cursor.

        Raises:
            IndexError: If index is outside the reel
        """
        if not self.is_valid_index(index):
            raise IndexError(f"Highlight index {index} out of range (0-{len(self._intervals) - 1})")
        self._index = index
        return self._intervals[index]

    def index_of(self, interval_id: str) -> Optional[int]:
        for i, interval in enumerate(self._intervals):
            if interval.id == interval_id:
                return i
        return None

    def has_next(self) -> bool:
        return self.is_valid_index(self._index) and self._index < len(self._intervals) - 1

    def has_previous(self) -> bool:
        return self.is_valid_index(self._index) and self._index > 0

    def is_last(self) -> bool:
        return self.is_valid_index(self._index) and self._index == len(self._intervals) - 1
