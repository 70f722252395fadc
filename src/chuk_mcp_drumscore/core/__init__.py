"""
Core rhythmic primitives.

- RhythmicLength: Basic note value plus dotted/triplet modifier, in units
- LENGTH_CATALOG: All representable lengths, longest first
- lengths_from_unit_length: Canonical decomposition of a unit count
- can_fill: Whether a unit count decomposes at all
- TimeSignature: Bar length in units and sub-beat grouping
- RhythmicInterval: A chord or rest slot of a voice
"""

from chuk_mcp_drumscore.core.interval import RhythmicInterval
from chuk_mcp_drumscore.core.rhythm import (
    LENGTH_CATALOG,
    RhythmicLength,
    TimeSignature,
    can_fill,
    lengths_from_unit_length,
)

__all__ = [
    "LENGTH_CATALOG",
    "RhythmicInterval",
    "RhythmicLength",
    "TimeSignature",
    "can_fill",
    "lengths_from_unit_length",
]
