"""
RhythmicInterval - a horizontal slot of a voice.

An interval holds a rhythmic length, a 1-based start unit within its bar and
the note heads stacked on it (keyed by staff height). Without note heads it
is a rest.
"""

from __future__ import annotations

from chuk_mcp_drumscore.constants import (
    CROSS_HEAD_BASIC_LENGTHS,
    MAX_NOTE_HEIGHT,
    MIN_NOTE_HEIGHT,
    ErrorMessages,
    NoteHeadType,
)
from chuk_mcp_drumscore.core.rhythm import RhythmicLength


def check_height(height: int) -> None:
    if not MIN_NOTE_HEIGHT <= height <= MAX_NOTE_HEIGHT:
        raise ValueError(ErrorMessages.INVALID_HEIGHT.format(height=height))


def check_cross_length(length: RhythmicLength) -> None:
    if length.basic not in CROSS_HEAD_BASIC_LENGTHS:
        raise ValueError(ErrorMessages.CROSS_HEAD_LENGTH.format(length=length))


class RhythmicInterval:
    """
    A chord or a rest occupying [start_unit, end_unit] of a voice.

    Intervals are compared and hashed by identity: a voice and its sub-groups
    track the very instances they own. The length is only changed through the
    voice's resize protocol via set_length.
    """

    def __init__(
        self,
        length: RhythmicLength,
        start_unit: int,
        note_heads: dict[int, NoteHeadType] | None = None,
    ):
        """
        Create an interval.

        Args:
            length: Rhythmic length of the interval
            start_unit: First unit covered, 1-based
            note_heads: Mapping of height (0-12) to note head type; empty for a rest
        """
        if start_unit < 1:
            raise ValueError(f"Start unit must be at least 1, got {start_unit}")
        self._length = length
        self.start_unit = start_unit
        self._note_heads: dict[int, NoteHeadType] = {}
        for height, head_type in (note_heads or {}).items():
            self.add_note_head(int(height), NoteHeadType(head_type))

    @classmethod
    def rest(cls, length: RhythmicLength, start_unit: int) -> RhythmicInterval:
        """Create a rest of the given length at the given position."""
        return cls(length, start_unit)

    @property
    def length(self) -> RhythmicLength:
        return self._length

    def set_length(self, length: RhythmicLength) -> None:
        """
        Assign a new length; only the owning voice's resize protocol calls this.

        Raises:
            ValueError: If the interval carries cross heads the length can't hold
        """
        if self.is_crossed:
            check_cross_length(length)
        self._length = length

    @property
    def end_unit(self) -> int:
        """Last unit covered (inclusive)."""
        return self.start_unit + self._length.units - 1

    @property
    def note_heads(self) -> dict[int, NoteHeadType]:
        """Copy of the note heads, so callers cannot bypass the bar's bookkeeping."""
        return dict(self._note_heads)

    @property
    def is_rest(self) -> bool:
        return not self._note_heads

    @property
    def is_crossed(self) -> bool:
        """True if any note head is a cross head."""
        return NoteHeadType.CROSS in self._note_heads.values()

    def has_note_at(self, height: int) -> bool:
        return height in self._note_heads

    def add_note_head(self, height: int, head_type: NoteHeadType) -> None:
        """
        Add a note head, replacing any existing head at that height.

        Raises:
            ValueError: If height is outside 0..12, or a cross head is added
                to anything but a sixteenth, eighth or quarter
        """
        check_height(height)
        if head_type == NoteHeadType.CROSS:
            check_cross_length(self._length)
        self._note_heads[height] = head_type

    def remove_note_head(self, height: int) -> None:
        """
        Remove the note head at a height. The interval becomes a rest if it was the last.

        Raises:
            ValueError: If height is outside 0..12 or no head exists there
        """
        check_height(height)
        if height not in self._note_heads:
            raise ValueError(f"No note head exists at height {height}")
        del self._note_heads[height]

    def make_rest(self) -> None:
        """
        Clear all note heads.

        Raises:
            ValueError: If the interval already is a rest
        """
        if self.is_rest:
            raise ValueError("The interval already is a rest")
        self._note_heads.clear()

    def moved_to(self, start_unit: int, length: RhythmicLength | None = None) -> RhythmicInterval:
        """New interval with the same note heads at another position (and optionally length)."""
        return RhythmicInterval(length or self._length, start_unit, self._note_heads)

    def __repr__(self) -> str:
        kind = "rest" if self.is_rest else f"notes={sorted(self._note_heads)}"
        return f"RhythmicInterval({self._length!r}, {self.start_unit}..{self.end_unit}, {kind})"
