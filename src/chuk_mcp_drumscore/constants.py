"""
Constants and enums for the drum score model.

No magic strings - use enums for constrained values.
All rhythmic positions and lengths are integers in units of 1/48 of a whole note.
"""

from enum import Enum

# The indivisible rhythmic quantum: 1 unit == 1/48 of a whole note
UNITS_PER_WHOLE = 48

# Vertical note positions on the five-line staff (0 = lowest, 12 = highest)
MIN_NOTE_HEIGHT = 0
MAX_NOTE_HEIGHT = 12

# Voices are numbered 1..MAX_VOICES
MIN_VOICE = 1
MAX_VOICES = 4

# Average note heights up to this value get upward stems
STEM_UP_THRESHOLD = 6.5

SUPPORTED_DENOMINATORS = (2, 4, 8)
MAX_EIGHTHS_NUMERATOR = 12


class BasicRhythmicLength(str, Enum):
    """Basic note values, regardless of dotted or triplet usage."""

    SIXTEENTH = "sixteenth"
    EIGHTH = "eighth"
    QUARTER = "quarter"
    HALF = "half"
    WHOLE = "whole"


class LengthModifier(str, Enum):
    """Modifier applied to a basic length."""

    NONE = "none"
    DOTTED = "dotted"  # 1.5x
    TRIPLET = "triplet"  # 2/3x


class NoteHeadType(str, Enum):
    """Note head shapes supported on the percussion staff."""

    ELLIPTIC = "elliptic"
    CROSS = "cross"


class StemDirection(str, Enum):
    """Stem direction for rendering."""

    UP = "up"
    DOWN = "down"


# Basic lengths that can carry cross note heads
CROSS_HEAD_BASIC_LENGTHS = frozenset(
    {BasicRhythmicLength.SIXTEENTH, BasicRhythmicLength.EIGHTH, BasicRhythmicLength.QUARTER}
)

# Length of each basic length in units
BASIC_LENGTH_UNITS: dict[BasicRhythmicLength, int] = {
    BasicRhythmicLength.SIXTEENTH: 3,
    BasicRhythmicLength.EIGHTH: 6,
    BasicRhythmicLength.QUARTER: 12,
    BasicRhythmicLength.HALF: 24,
    BasicRhythmicLength.WHOLE: 48,
}


class ErrorMessages:
    """Standardized error messages."""

    SCORE_NOT_FOUND = "Score '{name}' not found."
    BAR_NOT_FOUND = "Bar {bar_nr} not found."
    INVALID_VOICE = "Only voices numbered 1 to 4 can exist, got {voice}."
    VOICE_NOT_FOUND = "Voice {voice} does not exist in bar {bar_nr}."
    INVALID_HEIGHT = "Note height must be between 0 and 12, got {height}."
    INTERVAL_INDEX_OUT_OF_RANGE = "Interval index {idx} exceeds the {count} intervals of the voice."
    CROSS_HEAD_LENGTH = "Cross heads only fit sixteenths, eighths and quarters, not a {length}."
    UNFILLABLE_UNITS = "{units} unit(s) left by {action} can't be filled with rhythmic lengths."


class SuccessMessages:
    """Standardized success messages."""

    SCORE_CREATED = "Created score '{name}'."
    SCORE_SAVED = "Saved score '{name}' to {path}."
    NOTE_ADDED = "Added note at height {height} to voice {voice} of bar {bar_nr}."
    REST_ADDED = "Added rest to voice {voice} of bar {bar_nr}."
    TIME_SIGNATURE_CHANGED = "Changed bar {bar_nr} to {time_signature} ({inserted} bars inserted)."
