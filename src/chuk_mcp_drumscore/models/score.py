"""
Score persistence models - the structural mapping of a score.

A field-for-field projection of Score/Bar/Voice/RhythmicInterval into
pydantic models, serialized with camelCase keys:

    {title, bars: [{barNr, timeSignature: {numerator, denominator},
                    voices: {voiceNum: [{basicLength, modifier, startUnit,
                                         widthPercent, noteHeads: {height: type}}]}}]}

Loading goes back through the model constructors, so a document that breaks
the tiling invariants is rejected with ValueError.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from chuk_mcp_drumscore.constants import BasicRhythmicLength, LengthModifier, NoteHeadType
from chuk_mcp_drumscore.core.interval import RhythmicInterval
from chuk_mcp_drumscore.core.rhythm import RhythmicLength, TimeSignature
from chuk_mcp_drumscore.score.bar import Bar
from chuk_mcp_drumscore.score.score import DEFAULT_TITLE, Score

SCHEMA_VERSION = "score/v1"


class TimeSignatureData(BaseModel):
    """Persisted time signature."""

    numerator: int = Field(..., gt=0, description="Beats per bar")
    denominator: int = Field(..., description="Beat unit (2, 4 or 8)")

    model_config = {"frozen": True}

    def to_time_signature(self) -> TimeSignature:
        return TimeSignature(self.numerator, self.denominator)


class RhythmicIntervalData(BaseModel):
    """Persisted interval of a voice."""

    basic_length: BasicRhythmicLength = Field(..., alias="basicLength")
    modifier: LengthModifier = Field(LengthModifier.NONE)
    start_unit: int = Field(..., ge=1, alias="startUnit")
    width_percent: float = Field(0.0, ge=0.0, alias="widthPercent", description="Layout width")
    note_heads: dict[int, NoteHeadType] = Field(
        default_factory=dict, alias="noteHeads", description="Height -> note head type"
    )

    model_config = {"populate_by_name": True}

    @classmethod
    def from_interval(cls, interval: RhythmicInterval, bar: Bar) -> RhythmicIntervalData:
        return cls(
            basic_length=interval.length.basic,
            modifier=interval.length.modifier,
            start_unit=interval.start_unit,
            width_percent=bar.width_percent(interval.length, interval.start_unit),
            note_heads=interval.note_heads,
        )

    def to_interval(self) -> RhythmicInterval:
        length = RhythmicLength(self.basic_length, self.modifier)
        return RhythmicInterval(length, self.start_unit, dict(self.note_heads))


class BarData(BaseModel):
    """Persisted bar."""

    bar_nr: int = Field(..., ge=1, alias="barNr")
    time_signature: TimeSignatureData = Field(..., alias="timeSignature")
    voices: dict[int, list[RhythmicIntervalData]] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_bar(cls, bar: Bar) -> BarData:
        return cls(
            bar_nr=bar.bar_nr,
            time_signature=TimeSignatureData(
                numerator=bar.time_signature.numerator,
                denominator=bar.time_signature.denominator,
            ),
            voices={
                voice_num: [RhythmicIntervalData.from_interval(i, bar) for i in voice.intervals]
                for voice_num, voice in bar.voices.items()
            },
        )

    def to_bar(self) -> Bar:
        voice_intervals = {
            voice_num: [data.to_interval() for data in intervals]
            for voice_num, intervals in self.voices.items()
        }
        bar = Bar(self.bar_nr, self.time_signature.to_time_signature(), voice_intervals)
        if not voice_intervals:
            bar.add_empty_voice(1)
        return bar


class ScoreData(BaseModel):
    """Persisted score."""

    schema_version: str = Field(SCHEMA_VERSION, alias="schema", description="Schema version")
    title: str = Field(DEFAULT_TITLE, description="Score title")
    bars: list[BarData] = Field(..., min_length=1, description="Bars in order")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_score(cls, score: Score) -> ScoreData:
        return cls(title=score.title, bars=[BarData.from_bar(bar) for bar in score.bars])

    def to_score(self) -> Score:
        bars = [data.to_bar() for data in sorted(self.bars, key=lambda b: b.bar_nr)]
        return Score(bars, self.title)

    def to_yaml_dict(self) -> dict[str, Any]:
        """Canonical dict (camelCase keys, plain values) for YAML or JSON output."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_yaml_dict(cls, data: dict[str, Any]) -> ScoreData:
        return cls.model_validate(data)


def score_to_dict(score: Score) -> dict[str, Any]:
    """Project a score to its persisted dict form."""
    return ScoreData.from_score(score).to_yaml_dict()


def score_from_dict(data: dict[str, Any]) -> Score:
    """
    Rebuild a score from its persisted dict form.

    Raises:
        ValueError: If the document is malformed or breaks the model's invariants
    """
    return ScoreData.from_yaml_dict(data).to_score()
