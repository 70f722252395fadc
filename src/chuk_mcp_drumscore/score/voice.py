"""
Voice - one rhythmic layer of a bar.

A voice is an ordered, gap-free sequence of intervals that exactly tiles its
bar, partitioned into sub-groups by the bar's time signature. Every public
mutation re-establishes the tiling and the sub-group bookkeeping before it
returns.
"""

from __future__ import annotations

import logging

from chuk_mcp_drumscore.constants import ErrorMessages, StemDirection
from chuk_mcp_drumscore.core.interval import RhythmicInterval, check_cross_length
from chuk_mcp_drumscore.core.rhythm import (
    RhythmicLength,
    TimeSignature,
    can_fill,
    lengths_from_unit_length,
)
from chuk_mcp_drumscore.score.subgroup import SubGroup

logger = logging.getLogger(__name__)


def check_tiling(intervals: list[RhythmicInterval], time_signature: TimeSignature) -> None:
    """
    Verify that intervals tile a bar of the time signature without gaps or overlaps.

    Raises:
        ValueError: On an empty list, a gap, an overlap or a wrong total length
    """
    if not intervals:
        raise ValueError("Voices without intervals should not be created")

    expected_start = 1
    for idx, interval in enumerate(intervals):
        if interval.start_unit != expected_start:
            raise ValueError(
                f"Interval {idx} starts at unit {interval.start_unit}, expected {expected_start}"
            )
        if interval.end_unit > time_signature.units:
            raise ValueError(f"Interval {idx} exceeds the time signature's length")
        expected_start = interval.end_unit + 1

    if expected_start - 1 != time_signature.units:
        raise ValueError(
            f"Intervals cover {expected_start - 1} units, "
            f"but a bar of {time_signature} has {time_signature.units}"
        )


def rests_for_units(units: int, start_unit: int, ascending: bool = True) -> list[RhythmicInterval]:
    """Canonical rests filling units, positioned consecutively from start_unit."""
    rests = []
    for length in lengths_from_unit_length(units, ascending=ascending):
        rests.append(RhythmicInterval.rest(length, start_unit))
        start_unit += length.units
    return rests


class Voice:
    """
    Intervals of one voice plus their partition into sub-groups.

    When a bar holds several voices, stem_direction is the direction shared by
    all of the voice's notes; with a single voice it is None and each
    sub-group decides on its own.
    """

    def __init__(self, intervals: list[RhythmicInterval], time_signature: TimeSignature):
        """
        Build a voice from intervals that already tile the bar.

        Args:
            intervals: Ordered intervals covering units 1..time_signature.units
            time_signature: Time signature shared with the owning bar

        Raises:
            ValueError: If the intervals do not tile the bar
        """
        check_tiling(intervals, time_signature)
        self._intervals = list(intervals)
        self._time_signature = time_signature
        self._sub_groups: list[SubGroup] = []
        self._sub_group_idxs: dict[RhythmicInterval, int] = {}
        self.stem_direction: StemDirection | None = None
        self._initialize_sub_groups()

    @classmethod
    def of_rests(cls, time_signature: TimeSignature) -> Voice:
        """Create a voice filled entirely with rests, longest first."""
        return cls(rests_for_units(time_signature.units, 1, ascending=False), time_signature)

    # Read accessors

    @property
    def intervals(self) -> list[RhythmicInterval]:
        """Copy of the interval list; the intervals themselves are shared."""
        return list(self._intervals)

    @property
    def time_signature(self) -> TimeSignature:
        return self._time_signature

    @property
    def sub_groups(self) -> list[SubGroup]:
        """Copy of the sub-group list."""
        return list(self._sub_groups)

    def sub_group_index_of(self, interval: RhythmicInterval) -> int:
        """Index of the sub-group an interval is registered in."""
        if interval not in self._sub_group_idxs:
            raise ValueError("The given interval is not part of the voice")
        return self._sub_group_idxs[interval]

    def interval_at(self, idx: int) -> RhythmicInterval:
        """
        Interval at an index.

        Raises:
            ValueError: If idx is out of range
        """
        if not 0 <= idx < len(self._intervals):
            count = len(self._intervals)
            raise ValueError(ErrorMessages.INTERVAL_INDEX_OUT_OF_RANGE.format(idx=idx, count=count))
        return self._intervals[idx]

    def __len__(self) -> int:
        return len(self._intervals)

    def is_voice_of_rests(self) -> bool:
        return all(interval.is_rest for interval in self._intervals)

    def avg_note_height(self) -> float | None:
        """Average height of all notes of the voice, or None if it only has rests."""
        height_sum = 0
        notes_count = 0
        for sub_group in self._sub_groups:
            if sub_group.note_height_sum is not None:
                height_sum += sub_group.note_height_sum
                notes_count += sub_group.notes_count
        if notes_count == 0:
            return None
        return height_sum / notes_count

    # Sub-group bookkeeping

    def _initialize_sub_groups(self) -> None:
        """Partition all intervals into fresh sub-groups."""
        self._sub_groups = [
            SubGroup(start, end) for start, end in self._time_signature.sub_group_windows
        ]
        self._sub_group_idxs = {}
        for interval in self._intervals:
            idx = self._time_signature.calculate_sub_group(interval)
            self._sub_groups[idx].add(interval)
            self._sub_group_idxs[interval] = idx
        self._refresh_sub_groups()

    def _refresh_sub_groups(self) -> None:
        for idx, sub_group in enumerate(self._sub_groups):
            self._calculate_padding_factor(sub_group, idx)
            sub_group.calculate_note_height_sum()

    def _calculate_padding_factor(self, sub_group: SubGroup, sub_group_idx: int) -> None:
        """
        Set how many inter-group paddings follow the group's rhythmically last interval.

        The last sub-group of a bar gets 0; any other at least 1, or the number
        of window boundaries its last interval stretches across.
        """
        count = len(self._sub_groups)
        if not 0 <= sub_group_idx < count:
            raise ValueError("The given sub group index is negative or exceeds the sub groups")

        minimum = 1 if sub_group_idx < count - 1 else 0
        intervals = sub_group.intervals
        last = max(intervals, key=lambda interval: interval.end_unit) if intervals else None
        if last is None:
            sub_group.padding_factor = minimum
        else:
            crossed = self._time_signature.calculate_last_covered_sub_group(
                last.end_unit
            ) - self._time_signature.calculate_sub_group(last)
            sub_group.padding_factor = max(crossed, minimum)
        sub_group.last_interval = last

    def recalculate_sub_groups_from(self, interval_idx: int) -> None:
        """
        Reassign intervals from interval_idx onward to sub-groups.

        Afterwards every sub-group is purged of intervals no longer in the
        voice and its padding factor and note statistics are recomputed.
        Idempotent.

        Raises:
            ValueError: If interval_idx exceeds the interval list
        """
        if not 0 <= interval_idx < len(self._intervals):
            raise ValueError("Given index exceeds interval list")

        for interval in self._intervals[interval_idx:]:
            old_idx = self._sub_group_idxs.get(interval)
            new_idx = self._time_signature.calculate_sub_group(interval)
            if old_idx is None:
                self._sub_groups[new_idx].add(interval)
            elif old_idx != new_idx:
                self._sub_groups[old_idx].remove(interval)
                self._sub_groups[new_idx].add(interval)
            self._sub_group_idxs[interval] = new_idx

        live = set(self._intervals)
        for sub_group in self._sub_groups:
            for interval in sub_group.intervals:
                if interval not in live:
                    sub_group.remove(interval)
                    self._sub_group_idxs.pop(interval, None)
        self._refresh_sub_groups()

    # Resize protocol

    def _covered_by(self, interval_idx: int, new_end: int) -> tuple[int, RhythmicInterval | None]:
        """
        Intervals a grow to new_end reaches.

        Returns:
            Index of the last interval swallowed completely (interval_idx if
            none) and the interval cut in two, if any
        """
        last_replaced_idx = interval_idx
        for idx in range(interval_idx + 1, len(self._intervals)):
            candidate = self._intervals[idx]
            if candidate.start_unit > new_end:
                break
            if candidate.end_unit > new_end:
                return last_replaced_idx, candidate
            last_replaced_idx = idx
        return last_replaced_idx, None

    def validate_resize(
        self, interval_idx: int, length: RhythmicLength, as_rest: bool = False
    ) -> None:
        """
        Check a resize without applying it.

        Args:
            interval_idx: Index of the interval to resize
            length: New length
            as_rest: Ignore the interval's own note heads (it is about to become a rest)

        Raises:
            ValueError: On a bad index, a length that does not change the
                interval, a length that would run past the bar's end, a
                leftover span no rhythmic lengths fill, or cross heads on a
                length that can't carry them
        """
        interval = self.interval_at(interval_idx)
        if length.units == interval.length.units:
            raise ValueError("The given length is the interval's current length")
        new_end = interval.start_unit + length.units - 1
        if new_end > self._time_signature.units:
            raise ValueError(
                f"A {length} at unit {interval.start_unit} exceeds the bar's "
                f"{self._time_signature.units} units"
            )
        if interval.is_crossed and not as_rest:
            check_cross_length(length)

        if length.units < interval.length.units:
            vacated = interval.length.units - length.units
            if not can_fill(vacated):
                raise ValueError(
                    ErrorMessages.UNFILLABLE_UNITS.format(
                        units=vacated, action=f"shrinking a {interval.length} to a {length}"
                    )
                )
            return

        _, split = self._covered_by(interval_idx, new_end)
        if split is None:
            return
        tail = split.end_unit - new_end
        if not can_fill(tail):
            raise ValueError(
                ErrorMessages.UNFILLABLE_UNITS.format(
                    units=tail, action=f"cutting the {split.length} at unit {split.start_unit}"
                )
            )
        if split.is_crossed:
            check_cross_length(lengths_from_unit_length(tail)[0])

    def resize_interval(self, interval_idx: int, length: RhythmicLength) -> None:
        """
        Change the length of the interval at interval_idx, keeping the voice gap-free.

        Shrinking fills the vacated span with canonical rests. Growing swallows
        following intervals; one that is only partly covered keeps its note
        heads on the first canonical piece of its remaining tail.

        Raises:
            ValueError: See validate_resize; the voice is unchanged then
        """
        self.validate_resize(interval_idx, length)
        interval = self._intervals[interval_idx]
        logger.debug(
            "Resizing interval %d from %s to %s", interval_idx, interval.length, length
        )
        if length.units < interval.length.units:
            self._shrink(interval_idx, length)
        else:
            self._grow(interval_idx, length)
        self.recalculate_sub_groups_from(interval_idx)

    def _shrink(self, interval_idx: int, length: RhythmicLength) -> None:
        interval = self._intervals[interval_idx]
        rests = rests_for_units(
            interval.length.units - length.units, interval.start_unit + length.units
        )
        interval.set_length(length)
        self._intervals[interval_idx + 1 : interval_idx + 1] = rests

    def _grow(self, interval_idx: int, length: RhythmicLength) -> None:
        interval = self._intervals[interval_idx]
        new_end = interval.start_unit + length.units - 1
        last_replaced_idx, split = self._covered_by(interval_idx, new_end)

        if split is not None:
            pieces = lengths_from_unit_length(split.end_unit - new_end)
            split.start_unit = new_end + 1
            split.set_length(pieces[0])
            rests = []
            start_unit = split.end_unit + 1
            for piece in pieces[1:]:
                rests.append(RhythmicInterval.rest(piece, start_unit))
                start_unit += piece.units
            split_idx = last_replaced_idx + 1
            self._intervals[split_idx + 1 : split_idx + 1] = rests

        interval.set_length(length)
        del self._intervals[interval_idx + 1 : last_replaced_idx + 1]

    # Time signature changes

    def extend_to(self, time_signature: TimeSignature) -> None:
        """
        Adopt a longer time signature, appending canonical rests for the added units.

        Raises:
            ValueError: If the new time signature is not longer
        """
        added = time_signature.units - self._time_signature.units
        if added <= 0:
            raise ValueError("New time signature is not larger")
        rests = rests_for_units(added, self._intervals[-1].end_unit + 1)
        self.replace_content(self._intervals + rests, time_signature)

    def replace_content(
        self, intervals: list[RhythmicInterval], time_signature: TimeSignature
    ) -> None:
        """
        Swap in new intervals under a time signature and rebuild all sub-groups.

        Raises:
            ValueError: If the intervals do not tile a bar of the time signature
        """
        check_tiling(intervals, time_signature)
        self._intervals = list(intervals)
        self._time_signature = time_signature
        self._initialize_sub_groups()

    def __repr__(self) -> str:
        return f"Voice({self._time_signature}, intervals={len(self._intervals)})"
