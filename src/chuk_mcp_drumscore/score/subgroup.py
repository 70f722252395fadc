"""
SubGroup - the intervals of a voice that start within one sub-beat window.

Sub-groups decide beam grouping and the extra padding drawn after a group,
and, when a bar has a single voice, the common stem direction of their notes.
"""

from __future__ import annotations

from chuk_mcp_drumscore.constants import STEM_UP_THRESHOLD, StemDirection
from chuk_mcp_drumscore.core.interval import RhythmicInterval


class SubGroup:
    """
    Intervals starting in [start_unit, end_unit] of a voice.

    padding_factor and last_interval are maintained by the owning Voice.
    note_height_sum and notes_count are refreshed by calculate_note_height_sum.
    """

    def __init__(
        self,
        start_unit: int,
        end_unit: int,
        intervals: list[RhythmicInterval] | None = None,
    ):
        self.start_unit = start_unit
        self.end_unit = end_unit
        self._intervals: list[RhythmicInterval] = []
        self.padding_factor = 0
        self.last_interval: RhythmicInterval | None = None
        self.note_height_sum: int | None = None
        self.notes_count = 0

        for interval in intervals or []:
            self.add(interval)

    @property
    def intervals(self) -> list[RhythmicInterval]:
        """Copy of the contained intervals."""
        return list(self._intervals)

    def contains(self, interval: RhythmicInterval) -> bool:
        return any(existing is interval for existing in self._intervals)

    def add(self, interval: RhythmicInterval) -> None:
        """
        Add an interval.

        Raises:
            ValueError: If the interval does not start in the window or is already contained
        """
        if not self.start_unit <= interval.start_unit <= self.end_unit:
            raise ValueError("The given interval doesn't start in the sub group's units")
        if self.contains(interval):
            raise ValueError("The given interval is already part of the sub group")

        # Keep positional order for readers
        position = len(self._intervals)
        for idx, existing in enumerate(self._intervals):
            if existing.start_unit > interval.start_unit:
                position = idx
                break
        self._intervals.insert(position, interval)

    def remove(self, interval: RhythmicInterval) -> None:
        """
        Remove an interval.

        Raises:
            ValueError: If the interval is not part of the sub group
        """
        for idx, existing in enumerate(self._intervals):
            if existing is interval:
                del self._intervals[idx]
                if self.last_interval is interval:
                    self.last_interval = None
                return
        raise ValueError("The given interval is not in the sub group")

    def calculate_note_height_sum(self) -> None:
        """Recompute note_height_sum (None without notes) and notes_count."""
        heights = [height for interval in self._intervals for height in interval.note_heads]
        self.notes_count = len(heights)
        self.note_height_sum = sum(heights) if heights else None

    def avg_note_height(self) -> float | None:
        if self.note_height_sum is None:
            return None
        return self.note_height_sum / self.notes_count

    def get_stem_direction(self) -> StemDirection | None:
        """Common stem direction of the group's notes: up for averages <= 6.5."""
        avg = self.avg_note_height()
        if avg is None:
            return None
        return StemDirection.UP if avg <= STEM_UP_THRESHOLD else StemDirection.DOWN

    def is_last(self, interval: RhythmicInterval) -> bool:
        """
        Whether the interval is the rhythmically last one of the group.

        Raises:
            ValueError: If the interval is not part of the sub group
        """
        if not self.contains(interval):
            raise ValueError("The given interval is not part of the sub group")
        return interval is self.last_interval

    def __len__(self) -> int:
        return len(self._intervals)

    def __repr__(self) -> str:
        return (
            f"SubGroup({self.start_unit}..{self.end_unit}, intervals={len(self._intervals)}, "
            f"padding={self.padding_factor})"
        )
