"""
Score Manager - handles score lifecycle.

Provides async operations for creating, loading, saving, editing and
listing scores. Scores are persisted as YAML files named after their title.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

import yaml

from chuk_mcp_drumscore.constants import ErrorMessages, NoteHeadType
from chuk_mcp_drumscore.core.rhythm import RhythmicLength, TimeSignature
from chuk_mcp_drumscore.models.score import ScoreData
from chuk_mcp_drumscore.score.score import Score

logger = logging.getLogger(__name__)

SCORE_FILE_SUFFIX = ".score.yaml"


class ScoreMetadata:
    """Lightweight metadata for listing scores."""

    def __init__(
        self,
        title: str,
        path: Path,
        bar_count: int,
        time_signature: str,
        modified: datetime,
    ):
        self.title = title
        self.path = path
        self.bar_count = bar_count
        self.time_signature = time_signature
        self.modified = modified

    def __repr__(self) -> str:
        return f"ScoreMetadata({self.title!r}, {self.bar_count} bars, {self.time_signature})"


class ScoreManager:
    """
    Manages score lifecycle with file persistence.

    Scores are cached by title. All I/O operations are async-ready.
    """

    def __init__(self, scores_dir: Path):
        """
        Initialize the manager.

        Args:
            scores_dir: Directory for storing score files
        """
        self.scores_dir = scores_dir
        self._cache: dict[str, Score] = {}

    async def create(self, title: str, bars: int = 1, time_signature: str = "4/4") -> Score:
        """
        Create a new score of empty bars.

        Args:
            title: Score title (also its storage name)
            bars: Number of bars
            time_signature: Time signature of every bar (default: '4/4')

        Returns:
            The created Score
        """
        score = Score.make_empty(bars, TimeSignature.parse(time_signature), title)
        self._cache[title] = score
        logger.debug("Created score %r with %d bars of %s", title, bars, time_signature)
        return score

    async def get(self, title: str) -> Score | None:
        """
        Get a score by title.

        Checks cache first, then loads from file if not cached.

        Returns:
            The Score or None if not found
        """
        if title in self._cache:
            return self._cache[title]

        path = self._get_path(title)
        if path.exists():
            return await self.load(path)

        return None

    async def require(self, title: str) -> Score:
        """Get a score by title, raising ValueError if it does not exist."""
        score = await self.get(title)
        if score is None:
            raise ValueError(ErrorMessages.SCORE_NOT_FOUND.format(name=title))
        return score

    async def save(self, score: Score) -> Path:
        """
        Save a score to disk.

        Returns:
            Path to the saved file
        """
        self.scores_dir.mkdir(parents=True, exist_ok=True)

        path = self._get_path(score.title)
        with open(path, "w") as f:
            yaml.safe_dump(
                ScoreData.from_score(score).to_yaml_dict(),
                f,
                default_flow_style=False,
                sort_keys=False,
            )

        self._cache[score.title] = score
        return path

    async def load(self, path: Path) -> Score:
        """
        Load a score from a file.

        Raises:
            ValueError: If the file does not hold a valid score
        """
        with open(path) as f:
            data = yaml.safe_load(f)

        score = ScoreData.from_yaml_dict(data).to_score()
        self._cache[score.title] = score
        return score

    async def list_scores(self) -> list[ScoreMetadata]:
        """
        List all scores in the directory, most recently modified first.
        """
        if not self.scores_dir.exists():
            return []

        result = []
        for path in self.scores_dir.glob(f"*{SCORE_FILE_SUFFIX}"):
            try:
                with open(path) as f:
                    data = yaml.safe_load(f)

                bars = data.get("bars", [])
                first_ts = bars[0].get("timeSignature", {}) if bars else {}
                result.append(
                    ScoreMetadata(
                        title=data.get("title", path.name.removesuffix(SCORE_FILE_SUFFIX)),
                        path=path,
                        bar_count=len(bars),
                        time_signature=(
                            f"{first_ts.get('numerator', '?')}/"
                            f"{first_ts.get('denominator', '?')}"
                        ),
                        modified=datetime.fromtimestamp(path.stat().st_mtime),
                    )
                )
            except (OSError, yaml.YAMLError, AttributeError, IndexError) as e:
                logger.warning("Skipping unreadable score file %s: %s", path, e)
                continue

        return sorted(result, key=lambda m: m.modified, reverse=True)

    async def delete(self, title: str) -> bool:
        """
        Delete a score from disk and cache.

        Returns:
            True if deleted, False if not found
        """
        path = self._get_path(title)
        cached = self._cache.pop(title, None)

        if path.exists():
            path.unlink()
            return True

        return cached is not None

    async def duplicate(self, title: str, new_title: str) -> Score:
        """
        Duplicate a score under a new title.

        The copy is built from the persisted form, so it shares no bars or
        intervals with the original.
        """
        original = await self.require(title)
        data = ScoreData.from_score(original)
        data.title = new_title
        copy = data.to_score()
        self._cache[new_title] = copy
        return copy

    async def export_json(self, title: str) -> str:
        """Serialize a score to its JSON document."""
        score = await self.require(title)
        return json.dumps(ScoreData.from_score(score).to_yaml_dict(), indent=2)

    def _get_path(self, title: str) -> Path:
        """Get the file path for a score."""
        safe_name = title.replace(" ", "_").replace("/", "_")
        return self.scores_dir / f"{safe_name}{SCORE_FILE_SUFFIX}"

    # Convenience methods for score editing

    async def add_note(
        self,
        title: str,
        bar_nr: int,
        voice: int,
        length: str,
        height: int,
        interval_idx: int,
        head_type: str = NoteHeadType.ELLIPTIC.value,
    ) -> Score:
        """Add a note to an interval of a bar's voice."""
        score = await self.require(title)
        score.get_bar(bar_nr).add_note(
            voice, RhythmicLength.parse(length), NoteHeadType(head_type), height, interval_idx
        )
        return score

    async def add_rest(
        self, title: str, bar_nr: int, voice: int, length: str, interval_idx: int
    ) -> Score:
        """Turn an interval of a bar's voice into a rest."""
        score = await self.require(title)
        score.get_bar(bar_nr).add_rest(voice, RhythmicLength.parse(length), interval_idx)
        return score

    async def remove_note(
        self, title: str, bar_nr: int, voice: int, height: int, interval_idx: int
    ) -> Score:
        """Remove a note head from an interval of a bar's voice."""
        score = await self.require(title)
        score.get_bar(bar_nr).remove_note(voice, height, interval_idx)
        return score

    async def change_time_signature(
        self, title: str, bar_nr: int, time_signature: str
    ) -> tuple[Score, int]:
        """
        Change a bar's time signature.

        Returns:
            The score and the number of bars inserted for overflowing notes
        """
        score = await self.require(title)
        inserted = score.change_bar_time_signature(bar_nr, TimeSignature.parse(time_signature))
        return score, inserted

    async def insert_bar(self, title: str, after_bar_nr: int) -> Score:
        """Insert an empty bar after a bar."""
        score = await self.require(title)
        score.insert_empty_bar(after_bar_nr)
        return score

    async def delete_bar(self, title: str, bar_nr: int) -> Score:
        """Delete a bar."""
        score = await self.require(title)
        score.delete_bar(bar_nr)
        return score
