"""
Score management - lifecycle and auditing of drum scores.

This module provides:
- ScoreManager: Lifecycle management and YAML persistence for scores
- ScoreValidator: Invariant audit of a score
"""

from chuk_mcp_drumscore.scores.manager import ScoreManager, ScoreMetadata
from chuk_mcp_drumscore.scores.validator import (
    ScoreValidator,
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
    validate_score,
)

__all__ = [
    "ScoreManager",
    "ScoreMetadata",
    "ScoreValidator",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSeverity",
    "validate_score",
]
