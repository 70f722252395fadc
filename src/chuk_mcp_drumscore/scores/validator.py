"""
Score Validator - audits a score against the model's invariants.

Validates:
- Bars are numbered consecutively from 1
- Every voice tiles its bar without gaps or overlaps
- All voices of a bar share the bar's time signature
- Every interval is registered in exactly the sub-group it starts in
- Warnings on rest-only voices that editing would have dropped
- Informational notes on ungrouped meters and empty scores
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from chuk_mcp_drumscore.score.bar import Bar
from chuk_mcp_drumscore.score.score import Score
from chuk_mcp_drumscore.score.voice import Voice, check_tiling


class ValidationSeverity(str, Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Model invariant broken
    WARNING = "warning"  # Valid but likely unintended
    INFO = "info"  # Informational only


@dataclass
class ValidationIssue:
    """A single validation issue."""

    severity: ValidationSeverity
    code: str
    message: str
    location: str | None = None

    def __str__(self) -> str:
        prefix = f"[{self.severity.value.upper()}]"
        location = f" at {self.location}" if self.location else ""
        return f"{prefix} {self.code}: {self.message}{location}"


class ValidationResult:
    """Result of validating a score."""

    def __init__(self) -> None:
        self.issues: list[ValidationIssue] = []

    def add_error(self, code: str, message: str, location: str | None = None) -> None:
        """Add an error issue."""
        self.issues.append(ValidationIssue(ValidationSeverity.ERROR, code, message, location))

    def add_warning(self, code: str, message: str, location: str | None = None) -> None:
        """Add a warning issue."""
        self.issues.append(ValidationIssue(ValidationSeverity.WARNING, code, message, location))

    def add_info(self, code: str, message: str, location: str | None = None) -> None:
        """Add an info issue."""
        self.issues.append(ValidationIssue(ValidationSeverity.INFO, code, message, location))

    @property
    def is_valid(self) -> bool:
        """Return True if no errors (warnings/info are OK)."""
        return not any(i.severity == ValidationSeverity.ERROR for i in self.issues)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def __bool__(self) -> bool:
        return self.is_valid

    def __str__(self) -> str:
        if not self.issues:
            return "Validation passed: no issues found"
        return "\n".join(str(issue) for issue in self.issues)


class ScoreValidator:
    """Validates score structure and invariants."""

    def validate(self, score: Score) -> ValidationResult:
        """
        Validate a score.

        Args:
            score: The score to validate

        Returns:
            ValidationResult with any issues found
        """
        result = ValidationResult()

        self._validate_numbering(score, result)
        for bar in score.bars:
            self._validate_bar(bar, result)
        self._validate_content(score, result)

        return result

    def _validate_numbering(self, score: Score, result: ValidationResult) -> None:
        for idx, bar in enumerate(score.bars):
            if bar.bar_nr != idx + 1:
                result.add_error(
                    "BAR_NUMBERING",
                    f"Bar at position {idx + 1} is numbered {bar.bar_nr}",
                    f"bars/{idx + 1}",
                )

    def _validate_bar(self, bar: Bar, result: ValidationResult) -> None:
        location = f"bars/{bar.bar_nr}"
        if not bar.voices:
            result.add_error("NO_VOICES", "Bar has no voices", location)
            return

        if not bar.time_signature.is_grouped:
            result.add_info(
                "UNGROUPED_METER",
                f"{bar.time_signature} has no sub-beat grouping; the bar is beamed as one group",
                location,
            )

        for voice_num, voice in bar.voices.items():
            voice_location = f"{location}/voices/{voice_num}"
            if len(bar.voices) > 1 and voice.is_voice_of_rests():
                result.add_warning(
                    "REST_ONLY_VOICE",
                    f"Voice {voice_num} holds only rests next to other voices",
                    voice_location,
                )
            if voice.time_signature != bar.time_signature:
                result.add_error(
                    "TIME_SIGNATURE_MISMATCH",
                    f"Voice is in {voice.time_signature}, bar is in {bar.time_signature}",
                    voice_location,
                )
            try:
                check_tiling(voice.intervals, bar.time_signature)
            except ValueError as e:
                result.add_error("VOICE_TILING", str(e), voice_location)
                continue
            self._validate_sub_groups(voice, result, voice_location)

    def _validate_sub_groups(self, voice: Voice, result: ValidationResult, location: str) -> None:
        for interval_idx, interval in enumerate(voice.intervals):
            holders = [
                idx
                for idx, sub_group in enumerate(voice.sub_groups)
                if sub_group.contains(interval)
            ]
            expected = voice.time_signature.calculate_sub_group(interval)
            if holders != [expected]:
                result.add_error(
                    "SUB_GROUP_MEMBERSHIP",
                    f"Interval {interval_idx} is registered in sub groups {holders}, "
                    f"expected [{expected}]",
                    f"{location}/intervals/{interval_idx}",
                )

    def _validate_content(self, score: Score, result: ValidationResult) -> None:
        if all(bar.is_bar_of_rests() for bar in score.bars):
            result.add_info("EMPTY_SCORE", "Score contains only rests", "bars")


def validate_score(score: Score) -> ValidationResult:
    """
    Convenience function to validate a score.

    Args:
        score: The score to validate

    Returns:
        ValidationResult with any issues found
    """
    validator = ScoreValidator()
    return validator.validate(score)
