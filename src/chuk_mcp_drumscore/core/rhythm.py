"""
Rhythm primitives - RhythmicLength, canonical decomposition, TimeSignature.

All durations are integers in units of 1/48 of a whole note, so every
supported note value (including triplets down to the sixteenth) is a whole
number of units and no fractional arithmetic is needed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from chuk_mcp_drumscore.constants import (
    BASIC_LENGTH_UNITS,
    MAX_EIGHTHS_NUMERATOR,
    SUPPORTED_DENOMINATORS,
    UNITS_PER_WHOLE,
    BasicRhythmicLength,
    LengthModifier,
)

if TYPE_CHECKING:
    from chuk_mcp_drumscore.core.interval import RhythmicInterval


@dataclass(frozen=True)
class RhythmicLength:
    """
    A rhythmic length: a basic note value plus an optional modifier.

    The length in units is fully determined by (basic, modifier). Dotted
    multiplies by 1.5 and triplet by 2/3, both truncated to whole units.

    Immutable and hashable. "Changing" the length of an interval means
    assigning a different RhythmicLength instance.
    """

    basic: BasicRhythmicLength
    modifier: LengthModifier = LengthModifier.NONE

    # Common lengths (defined after class)
    WHOLE: ClassVar[RhythmicLength]
    HALF: ClassVar[RhythmicLength]
    QUARTER: ClassVar[RhythmicLength]
    EIGHTH: ClassVar[RhythmicLength]
    SIXTEENTH: ClassVar[RhythmicLength]

    def __post_init__(self) -> None:
        # Accept raw enum values, e.g. when rebuilding from persisted data
        object.__setattr__(self, "basic", BasicRhythmicLength(self.basic))
        object.__setattr__(self, "modifier", LengthModifier(self.modifier))
        if self.modifier == LengthModifier.DOTTED and self.basic == BasicRhythmicLength.SIXTEENTH:
            raise ValueError("Dotted sixteenth notes are not supported")

    @property
    def units(self) -> int:
        """Length in units (1 unit = 1/48 of a whole note)."""
        base = BASIC_LENGTH_UNITS[self.basic]
        if self.modifier == LengthModifier.DOTTED:
            return base * 3 // 2
        if self.modifier == LengthModifier.TRIPLET:
            return base * 2 // 3
        return base

    @property
    def is_dotted(self) -> bool:
        return self.modifier == LengthModifier.DOTTED

    @property
    def is_triplet(self) -> bool:
        return self.modifier == LengthModifier.TRIPLET

    @classmethod
    def parse(cls, notation: str) -> RhythmicLength:
        """
        Parse a length from notation like 'quarter', 'dotted half' or 'triplet_eighth'.

        Args:
            notation: Optional modifier followed by a basic length

        Returns:
            RhythmicLength object
        """
        words = notation.strip().lower().replace("_", " ").replace("-", " ").split()
        try:
            if len(words) == 1:
                return cls(BasicRhythmicLength(words[0]))
            if len(words) == 2:
                return cls(BasicRhythmicLength(words[1]), LengthModifier(words[0]))
        except ValueError as e:
            raise ValueError(f"Invalid rhythmic length: {notation}") from e
        raise ValueError(f"Invalid rhythmic length: {notation}")

    def __str__(self) -> str:
        if self.modifier == LengthModifier.NONE:
            return self.basic.value
        return f"{self.modifier.value} {self.basic.value}"

    def __repr__(self) -> str:
        if self.modifier == LengthModifier.NONE:
            return f"RhythmicLength({self.basic.name})"
        return f"RhythmicLength({self.basic.name}, {self.modifier.name})"


RhythmicLength.WHOLE = RhythmicLength(BasicRhythmicLength.WHOLE)
RhythmicLength.HALF = RhythmicLength(BasicRhythmicLength.HALF)
RhythmicLength.QUARTER = RhythmicLength(BasicRhythmicLength.QUARTER)
RhythmicLength.EIGHTH = RhythmicLength(BasicRhythmicLength.EIGHTH)
RhythmicLength.SIXTEENTH = RhythmicLength(BasicRhythmicLength.SIXTEENTH)


# Every representable length, ordered by descending length in units.
LENGTH_CATALOG: tuple[RhythmicLength, ...] = (
    RhythmicLength(BasicRhythmicLength.WHOLE, LengthModifier.DOTTED),  # 72
    RhythmicLength(BasicRhythmicLength.WHOLE),  # 48
    RhythmicLength(BasicRhythmicLength.HALF, LengthModifier.DOTTED),  # 36
    RhythmicLength(BasicRhythmicLength.WHOLE, LengthModifier.TRIPLET),  # 32
    RhythmicLength(BasicRhythmicLength.HALF),  # 24
    RhythmicLength(BasicRhythmicLength.QUARTER, LengthModifier.DOTTED),  # 18
    RhythmicLength(BasicRhythmicLength.HALF, LengthModifier.TRIPLET),  # 16
    RhythmicLength(BasicRhythmicLength.QUARTER),  # 12
    RhythmicLength(BasicRhythmicLength.EIGHTH, LengthModifier.DOTTED),  # 9
    RhythmicLength(BasicRhythmicLength.QUARTER, LengthModifier.TRIPLET),  # 8
    RhythmicLength(BasicRhythmicLength.EIGHTH),  # 6
    RhythmicLength(BasicRhythmicLength.EIGHTH, LengthModifier.TRIPLET),  # 4
    RhythmicLength(BasicRhythmicLength.SIXTEENTH),  # 3
    RhythmicLength(BasicRhythmicLength.SIXTEENTH, LengthModifier.TRIPLET),  # 2
)


def _decompose(units: int, first_idx: int) -> list[RhythmicLength] | None:
    """
    Greedy scan of the catalog from first_idx, never retrying larger entries.

    Falls back to the next smaller entry only when the greedy choice leaves
    a remainder no smaller entries can fill (e.g. 13 = 12 + 1).
    """
    if units == 0:
        return []
    for idx in range(first_idx, len(LENGTH_CATALOG)):
        length = LENGTH_CATALOG[idx]
        if length.units <= units:
            remainder = _decompose(units - length.units, idx)
            if remainder is not None:
                return [length, *remainder]
    return None


def can_fill(units: int) -> bool:
    """True if catalog lengths can sum exactly to a positive unit count."""
    return units > 0 and _decompose(units, 0) is not None


def lengths_from_unit_length(units: int, ascending: bool = True) -> list[RhythmicLength]:
    """
    Decompose a unit count into canonical catalog lengths that sum to it.

    Args:
        units: Positive length in units
        ascending: Return shortest lengths first (the order used to fill a
            gap left-to-right). False returns the greedy, longest-first order.

    Returns:
        List of RhythmicLength summing exactly to units

    Raises:
        ValueError: If units is not positive
        RuntimeError: If no combination of catalog lengths fills units
    """
    if units <= 0:
        raise ValueError(f"Units to decompose must be positive, got {units}")

    lengths = _decompose(units, 0)
    if lengths is None:
        raise RuntimeError(f"No combination of rhythmic lengths fills {units} units")

    if ascending:
        lengths.reverse()
    return lengths


@dataclass(frozen=True)
class TimeSignature:
    """
    A time signature and its sub-beat grouping.

    Only denominators 2, 4 and 8 are supported; for 8 the numerator must be
    within 1..12. A bar is divided into equal-width sub-group windows used
    for beaming and padding decisions:

        x/2  -> numerator * 2 windows (quarter-wide)
        x/4  -> numerator windows (one per quarter beat)
        1-3/8 -> 1 window, 4/8 and 6/8 -> 2 windows
        other x/8 -> ungrouped: number_of_sub_groups is None and the whole
                     bar acts as one implicit window

    Immutable and hashable; bars swap instances rather than mutating them.
    """

    numerator: int
    denominator: int

    COMMON_TIME: ClassVar[TimeSignature]  # 4/4
    CUT_TIME: ClassVar[TimeSignature]  # 2/2
    WALTZ: ClassVar[TimeSignature]  # 3/4
    SIX_EIGHT: ClassVar[TimeSignature]  # 6/8

    def __post_init__(self) -> None:
        if self.denominator not in SUPPORTED_DENOMINATORS:
            raise ValueError(
                f"Only denominators 2, 4 and 8 are supported, got {self.denominator}"
            )
        if self.numerator < 1:
            raise ValueError(f"Numerator must be positive, got {self.numerator}")
        if self.denominator == 8 and self.numerator > MAX_EIGHTHS_NUMERATOR:
            raise ValueError(
                f"For the denominator 8 only numerators 1 to 12 are supported, got {self.numerator}"
            )

    @property
    def units(self) -> int:
        """Length of one bar in units."""
        return self.numerator * (UNITS_PER_WHOLE // self.denominator)

    @property
    def number_of_sub_groups(self) -> int | None:
        """Number of sub-group windows, or None for an ungrouped bar."""
        if self.denominator == 2:
            return self.numerator * 2
        if self.denominator == 4:
            return self.numerator
        if self.numerator <= 3:
            return 1
        if self.numerator in (4, 6):
            return 2
        return None

    @property
    def is_grouped(self) -> bool:
        return self.number_of_sub_groups is not None

    @property
    def sub_group_count(self) -> int:
        """Number of windows a voice actually builds (1 for ungrouped bars)."""
        return self.number_of_sub_groups or 1

    @property
    def sub_group_end_units(self) -> tuple[int, ...]:
        """Last unit of each window; the final entry is always units."""
        count = self.sub_group_count
        width = self.units // count
        return tuple(width * (i + 1) for i in range(count))

    @property
    def sub_group_windows(self) -> list[tuple[int, int]]:
        """(start_unit, end_unit) of each window, 1-based and inclusive."""
        windows = []
        start = 1
        for end in self.sub_group_end_units:
            windows.append((start, end))
            start = end + 1
        return windows

    def sub_group_of_unit(self, unit: int) -> int:
        """
        Index of the window containing a unit.

        Raises:
            ValueError: If the unit lies outside 1..units
        """
        if unit < 1 or unit > self.units:
            raise ValueError(f"Unit {unit} lies outside the bar's {self.units} units")
        for idx, end_unit in enumerate(self.sub_group_end_units):
            if unit <= end_unit:
                return idx
        raise RuntimeError("Sub group end units do not cover the bar")

    def calculate_sub_group(self, interval: RhythmicInterval) -> int:
        """
        Index of the window an interval starts in, i.e. the one it belongs to.

        Raises:
            ValueError: If the interval ends beyond the bar
        """
        if interval.end_unit > self.units:
            raise ValueError("The given interval exceeds the time signature's units")
        return self.sub_group_of_unit(interval.start_unit)

    def calculate_last_covered_sub_group(self, end_unit: int) -> int:
        """
        Index of the window an end unit falls in.

        Used with calculate_sub_group to count the windows an interval spans.

        Raises:
            ValueError: If the end unit exceeds the bar
        """
        if end_unit > self.units:
            raise ValueError("The given end unit exceeds the time signature's units")
        return self.sub_group_of_unit(end_unit)

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"

    def __repr__(self) -> str:
        return f"TimeSignature({self.numerator}, {self.denominator})"

    @classmethod
    def parse(cls, notation: str) -> TimeSignature:
        """
        Parse a time signature from notation like '4/4', '3/4', '6/8'.

        Args:
            notation: Time signature string

        Returns:
            TimeSignature object
        """
        parts = notation.strip().split("/")
        if len(parts) != 2:
            raise ValueError(f"Invalid time signature format: {notation}")
        try:
            numerator, denominator = int(parts[0]), int(parts[1])
        except ValueError as e:
            raise ValueError(f"Invalid time signature format: {notation}") from e
        return cls(numerator, denominator)


TimeSignature.COMMON_TIME = TimeSignature(4, 4)
TimeSignature.CUT_TIME = TimeSignature(2, 2)
TimeSignature.WALTZ = TimeSignature(3, 4)
TimeSignature.SIX_EIGHT = TimeSignature(6, 8)
