"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from chuk_mcp_drumscore.core import TimeSignature
from chuk_mcp_drumscore.score import Score


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def empty_score() -> Score:
    """Two empty bars of 4/4."""
    return Score.make_empty(2, TimeSignature.COMMON_TIME, "groove")
