"""
The rhythmic score model.

This module provides:
- SubGroup: Intervals of one sub-beat window, with beam padding and note statistics
- Voice: Gap-free interval sequence of a bar and its resize protocol
- Bar: Voices under one time signature, note/rest edits, stem arbitration
- Score: Ordered bars plus a title
"""

from chuk_mcp_drumscore.score.bar import Bar, Overflow, slice_intervals
from chuk_mcp_drumscore.score.score import Score
from chuk_mcp_drumscore.score.subgroup import SubGroup
from chuk_mcp_drumscore.score.voice import Voice, check_tiling, rests_for_units

__all__ = [
    "Bar",
    "Overflow",
    "Score",
    "SubGroup",
    "Voice",
    "check_tiling",
    "rests_for_units",
    "slice_intervals",
]
