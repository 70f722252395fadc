"""
Bar - one measure of a drum score.

A bar holds up to four voices under one time signature. It is the entry
point for note and rest edits, arbitrates stem directions across voices and
propagates time signature changes, returning content that overflows into
successor bars.
"""

from __future__ import annotations

import logging

from chuk_mcp_drumscore.constants import (
    MAX_VOICES,
    MIN_VOICE,
    ErrorMessages,
    NoteHeadType,
    StemDirection,
)
from chuk_mcp_drumscore.core.interval import RhythmicInterval, check_cross_length, check_height
from chuk_mcp_drumscore.core.rhythm import (
    RhythmicLength,
    TimeSignature,
    can_fill,
    lengths_from_unit_length,
)
from chuk_mcp_drumscore.score.voice import Voice, rests_for_units

logger = logging.getLogger(__name__)

# Share of the bar width used by interval content and by padding between sub-groups
CONTENT_WIDTH_PERCENT = 80.0
PADDING_WIDTH_PERCENT = 10.0
UNGROUPED_CONTENT_WIDTH_PERCENT = CONTENT_WIDTH_PERCENT + PADDING_WIDTH_PERCENT

# voice number -> interval lists of the successor bars, in bar order
Overflow = dict[int, list[list[RhythmicInterval]]]


def _check_voice_num(voice_num: int) -> None:
    if not MIN_VOICE <= voice_num <= MAX_VOICES:
        raise ValueError(ErrorMessages.INVALID_VOICE.format(voice=voice_num))


def _part_of(
    interval: RhythmicInterval, first_unit: int, last_unit: int, offset: int
) -> list[RhythmicInterval]:
    """
    The slice [first_unit, last_unit] of an interval, positioned at first_unit - offset.

    An uncut interval keeps its length; a cut part is decomposed into
    canonical lengths with the note heads on the first piece.

    Raises:
        ValueError: If the cut part can't be expressed in rhythmic lengths, or
            its first piece can't carry the interval's cross heads
    """
    start_unit = first_unit - offset
    if first_unit == interval.start_unit and last_unit == interval.end_unit:
        if offset == 0:
            return [interval]
        return [interval.moved_to(start_unit)]

    units = last_unit - first_unit + 1
    if not can_fill(units):
        raise ValueError(
            ErrorMessages.UNFILLABLE_UNITS.format(
                units=units,
                action=f"a bar line through the {interval.length} at unit {interval.start_unit}",
            )
        )
    pieces = lengths_from_unit_length(units)
    if interval.is_crossed:
        check_cross_length(pieces[0])
    parts = [interval.moved_to(start_unit, pieces[0])]
    start_unit += pieces[0].units
    for piece in pieces[1:]:
        parts.append(RhythmicInterval.rest(piece, start_unit))
        start_unit += piece.units
    return parts


def slice_intervals(
    intervals: list[RhythmicInterval], bar_units: int
) -> list[list[RhythmicInterval]]:
    """
    Cut a voice's intervals into consecutive bars of bar_units units each.

    Intervals straddling a bar line are split; the last bar is padded with
    rests so that every slice tiles a full bar.

    Raises:
        ValueError: If a bar line cuts an interval into a part no rhythmic
            lengths fill
    """
    total = intervals[-1].end_unit
    slice_count = (total - 1) // bar_units + 1
    slices: list[list[RhythmicInterval]] = [[] for _ in range(slice_count)]

    for interval in intervals:
        first_slice = (interval.start_unit - 1) // bar_units
        last_slice = (interval.end_unit - 1) // bar_units
        for slice_idx in range(first_slice, last_slice + 1):
            offset = slice_idx * bar_units
            first_unit = max(interval.start_unit, offset + 1)
            last_unit = min(interval.end_unit, offset + bar_units)
            slices[slice_idx].extend(_part_of(interval, first_unit, last_unit, offset))

    covered = total - (slice_count - 1) * bar_units
    if covered < bar_units:
        slices[-1].extend(rests_for_units(bar_units - covered, covered + 1))
    return slices


class Bar:
    """
    A measure holding voices 1-4 under one time signature.

    Voices are created from interval lists on construction; afterwards they
    are only changed through the bar's edit and time signature operations.
    """

    def __init__(
        self,
        bar_nr: int,
        time_signature: TimeSignature,
        voice_intervals: dict[int, list[RhythmicInterval]] | None = None,
    ):
        """
        Create a bar.

        Args:
            bar_nr: Position of the bar in its score (1-based); may change later
            time_signature: Time signature of the bar
            voice_intervals: Mapping of voice number (1-4) to intervals tiling the bar

        Raises:
            ValueError: On a voice number outside 1-4 or intervals that don't tile the bar
        """
        self.bar_nr = bar_nr
        self._time_signature = time_signature
        self._voices: dict[int, Voice] = {}
        for voice_num, intervals in sorted((voice_intervals or {}).items()):
            _check_voice_num(voice_num)
            self._voices[voice_num] = Voice(intervals, time_signature)
        self.calculate_voice_stem_directions()

    @classmethod
    def make_empty(cls, bar_nr: int, time_signature: TimeSignature) -> Bar:
        """Create a bar containing a single voice of rests."""
        bar = cls(bar_nr, time_signature)
        bar.add_empty_voice(1)
        return bar

    # Read accessors

    @property
    def time_signature(self) -> TimeSignature:
        return self._time_signature

    @property
    def voices(self) -> dict[int, Voice]:
        """Copy of the voice map, ordered by voice number."""
        return dict(sorted(self._voices.items()))

    def get_voice(self, voice_num: int) -> Voice:
        """
        Voice by number.

        Raises:
            ValueError: If the voice does not exist
        """
        voice = self._voices.get(voice_num)
        if voice is None:
            raise ValueError(
                ErrorMessages.VOICE_NOT_FOUND.format(voice=voice_num, bar_nr=self.bar_nr)
            )
        return voice

    def is_bar_of_rests(self) -> bool:
        """True if every interval of every voice is a rest."""
        return all(voice.is_voice_of_rests() for voice in self._voices.values())

    # Voice management

    def add_empty_voice(self, voice_num: int) -> Voice:
        """
        Add a voice filled with rests.

        Raises:
            ValueError: If the voice number is invalid or the voice already exists
        """
        _check_voice_num(voice_num)
        if voice_num in self._voices:
            raise ValueError(f"Voice {voice_num} already exists and should not be overwritten")
        voice = Voice.of_rests(self._time_signature)
        self._voices[voice_num] = voice
        self.calculate_voice_stem_directions()
        return voice

    # Note and rest editing

    def add_note(
        self,
        voice_num: int,
        length: RhythmicLength,
        head_type: NoteHeadType,
        height: int,
        interval_idx: int,
    ) -> None:
        """
        Add a note head to an interval, resizing the interval to length if needed.

        A missing voice is created filled with rests first, and the note then
        goes to its first interval. Other voices holding only rests are dropped.

        Raises:
            ValueError: On an invalid voice number, height or index, a length
                that would run past the end of the bar or leave a span no
                rhythmic lengths fill, or a cross head on a half or whole.
                The bar is unchanged then.
        """
        _check_voice_num(voice_num)
        check_height(height)

        voice = self._voices.get(voice_num)
        is_new_voice = voice is None
        if voice is None:
            voice = Voice.of_rests(self._time_signature)
            interval_idx = 0

        interval = voice.interval_at(interval_idx)
        if head_type == NoteHeadType.CROSS or interval.is_crossed:
            check_cross_length(length)
        needs_resize = length.units != interval.length.units
        if needs_resize:
            voice.validate_resize(interval_idx, length)

        if is_new_voice:
            self._voices[voice_num] = voice
        if needs_resize:
            voice.resize_interval(interval_idx, length)
        interval.add_note_head(height, head_type)
        voice.recalculate_sub_groups_from(interval_idx)

        for other_num in [num for num, other in self._voices.items() if other is not voice]:
            if self._voices[other_num].is_voice_of_rests():
                logger.debug("Dropping voice %d of bar %d: only rests", other_num, self.bar_nr)
                del self._voices[other_num]

        self.calculate_voice_stem_directions()

    def add_rest(self, voice_num: int, length: RhythmicLength, interval_idx: int) -> None:
        """
        Turn an interval into a rest, resizing it to length if needed.

        If the voice ends up holding only rests while other voices exist, it is dropped.

        Raises:
            ValueError: On an invalid voice number or index, or a length that
                would run past the end of the bar or leave a span no rhythmic
                lengths fill. The bar is unchanged then.
        """
        _check_voice_num(voice_num)

        voice = self._voices.get(voice_num)
        is_new_voice = voice is None
        if voice is None:
            voice = Voice.of_rests(self._time_signature)
            interval_idx = 0

        interval = voice.interval_at(interval_idx)
        needs_resize = length.units != interval.length.units
        if needs_resize:
            voice.validate_resize(interval_idx, length, as_rest=True)

        if is_new_voice:
            self._voices[voice_num] = voice
        if not interval.is_rest:
            interval.make_rest()
        if needs_resize:
            voice.resize_interval(interval_idx, length)
        voice.recalculate_sub_groups_from(interval_idx)

        if voice.is_voice_of_rests() and len(self._voices) > 1:
            logger.debug("Dropping voice %d of bar %d: only rests", voice_num, self.bar_nr)
            del self._voices[voice_num]

        self.calculate_voice_stem_directions()

    def remove_note(self, voice_num: int, height: int, interval_idx: int) -> None:
        """
        Remove a note head from an interval. Does nothing if no head exists at height.

        Raises:
            ValueError: If the voice does not exist or the index is out of range
        """
        voice = self.get_voice(voice_num)
        interval = voice.interval_at(interval_idx)
        if not interval.has_note_at(height):
            return

        interval.remove_note_head(height)
        if voice.is_voice_of_rests() and len(self._voices) > 1:
            logger.debug("Dropping voice %d of bar %d: only rests", voice_num, self.bar_nr)
            del self._voices[voice_num]
        else:
            voice.recalculate_sub_groups_from(interval_idx)
        self.calculate_voice_stem_directions()

    # Stem direction arbitration

    def calculate_voice_stem_directions(self) -> None:
        """
        Assign a common stem direction to each voice.

        A single voice gets None, leaving the decision to its sub-groups.
        Otherwise voices are ranked by average note height: the lowest points
        down, the highest up, and with four voices the lower middle one down
        and the upper middle one up (with three, the middle one points down).

        Raises:
            RuntimeError: If more than four voices exist
        """
        if len(self._voices) <= 1:
            for voice in self._voices.values():
                voice.stem_direction = None
            return
        if len(self._voices) > MAX_VOICES:
            raise RuntimeError("No more than four voices should be able to exist")

        # Voices without notes rank lowest; ties keep voice number order
        ranked = sorted(
            (self._voices[num] for num in sorted(self._voices)),
            key=lambda voice: (voice.avg_note_height() is not None, voice.avg_note_height() or 0.0),
        )
        directions = {
            2: [StemDirection.DOWN, StemDirection.UP],
            3: [StemDirection.DOWN, StemDirection.DOWN, StemDirection.UP],
            4: [StemDirection.DOWN, StemDirection.DOWN, StemDirection.UP, StemDirection.UP],
        }[len(ranked)]
        for voice, direction in zip(ranked, directions, strict=True):
            voice.stem_direction = direction

    # Time signature changes

    def _reset_to_rests(self, time_signature: TimeSignature) -> None:
        self._time_signature = time_signature
        self._voices = {1: Voice.of_rests(time_signature)}
        self.calculate_voice_stem_directions()

    def change_time_signature_to_larger(self, time_signature: TimeSignature) -> None:
        """
        Adopt a longer time signature, filling the added units of every voice with rests.

        A bar of only rests is reset to a single voice of rests.

        Raises:
            ValueError: If the new time signature is not longer
        """
        if time_signature.units <= self._time_signature.units:
            raise ValueError("New time signature is not larger")

        logger.debug("Bar %d: %s -> %s", self.bar_nr, self._time_signature, time_signature)
        if self.is_bar_of_rests():
            self._reset_to_rests(time_signature)
            return

        for voice in self._voices.values():
            voice.extend_to(time_signature)
        self._time_signature = time_signature
        self.calculate_voice_stem_directions()

    def change_time_signature_to_smaller(self, time_signature: TimeSignature) -> Overflow:
        """
        Adopt a shorter time signature, cutting off what no longer fits.

        Each voice keeps its first new-bar-length of content; an interval
        straddling the new bar line is split. The cut-off content is sliced
        into successor bars of the new time signature.

        Returns:
            Voice number -> interval lists of the successor bars, for voices
            whose overflow contains notes. Empty if nothing but rests overflowed.

        Raises:
            ValueError: If the new time signature is not shorter
        """
        if time_signature.units >= self._time_signature.units:
            raise ValueError("New time signature is not smaller")

        logger.debug("Bar %d: %s -> %s", self.bar_nr, self._time_signature, time_signature)
        if self.is_bar_of_rests():
            self._reset_to_rests(time_signature)
            return {}

        sliced = {
            voice_num: slice_intervals(voice.intervals, time_signature.units)
            for voice_num, voice in self._voices.items()
        }
        for voice_num, slices in sliced.items():
            self._voices[voice_num].replace_content(slices[0], time_signature)
        self._time_signature = time_signature
        self.calculate_voice_stem_directions()

        overflow: Overflow = {}
        for voice_num, slices in sorted(sliced.items()):
            successors = slices[1:]
            if any(not interval.is_rest for bar_slice in successors for interval in bar_slice):
                overflow[voice_num] = successors
        logger.debug("Bar %d overflow into voices %s", self.bar_nr, sorted(overflow))
        return overflow

    def apply_time_signature_change(self, time_signature: TimeSignature) -> Overflow:
        """
        Adopt any other time signature, updating all voices at once.

        Dispatches to the larger/smaller operations; a signature of equal
        length (e.g. 6/8 -> 3/4) only regroups the voices.

        Returns:
            Overflow as returned by change_time_signature_to_smaller (empty otherwise)

        Raises:
            ValueError: If the time signature equals the current one
        """
        if time_signature == self._time_signature:
            raise ValueError(f"Bar {self.bar_nr} already is in {time_signature}")
        if time_signature.units > self._time_signature.units:
            self.change_time_signature_to_larger(time_signature)
            return {}
        if time_signature.units < self._time_signature.units:
            return self.change_time_signature_to_smaller(time_signature)

        for voice in self._voices.values():
            voice.replace_content(voice.intervals, time_signature)
        self._time_signature = time_signature
        return {}

    # Layout

    def width_percent(self, length: RhythmicLength, start_unit: int) -> float:
        """
        Share of the bar width (in percent) an interval of length at start_unit takes.

        Content takes 80% in proportion to units, plus an even share of the
        10% padding budget for every sub-group boundary the interval crosses.
        Bars with a single window spend 90% on content alone.
        """
        ts = self._time_signature
        count = ts.sub_group_count
        if count == 1:
            return UNGROUPED_CONTENT_WIDTH_PERCENT * length.units / ts.units

        end_unit = start_unit + length.units - 1
        crossed = ts.calculate_last_covered_sub_group(end_unit) - ts.sub_group_of_unit(start_unit)
        return CONTENT_WIDTH_PERCENT * length.units / ts.units + crossed * PADDING_WIDTH_PERCENT / (
            count - 1
        )

    def __repr__(self) -> str:
        return f"Bar({self.bar_nr}, {self._time_signature}, voices={sorted(self._voices)})"
