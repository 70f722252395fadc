"""
Pydantic models for score persistence.

This module provides:
- ScoreData: Persisted score (title + bars)
- BarData: Persisted bar (number, time signature, voices)
- RhythmicIntervalData: Persisted interval (length, position, width, note heads)
- TimeSignatureData: Persisted time signature
"""

from chuk_mcp_drumscore.models.score import (
    SCHEMA_VERSION,
    BarData,
    RhythmicIntervalData,
    ScoreData,
    TimeSignatureData,
    score_from_dict,
    score_to_dict,
)

__all__ = [
    "SCHEMA_VERSION",
    "BarData",
    "RhythmicIntervalData",
    "ScoreData",
    "TimeSignatureData",
    "score_from_dict",
    "score_to_dict",
]
