"""
Score - an ordered list of bars plus a title.

The score keeps bar numbers consecutive and materializes successor bars when
a time signature change pushes notes out of a bar.
"""

from __future__ import annotations

import logging

from chuk_mcp_drumscore.constants import ErrorMessages
from chuk_mcp_drumscore.core.rhythm import TimeSignature
from chuk_mcp_drumscore.score.bar import Bar

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Title"


class Score:
    """A drum score: bars numbered 1..n and a title."""

    def __init__(self, bars: list[Bar], title: str = DEFAULT_TITLE):
        self.title = title
        self._bars = list(bars)
        self._renumber()

    @classmethod
    def make_empty(
        cls, bars: int, time_signature: TimeSignature, title: str = DEFAULT_TITLE
    ) -> Score:
        """
        Create a score of empty bars.

        Args:
            bars: Number of bars
            time_signature: Time signature of every bar
            title: Score title
        """
        if bars < 1:
            raise ValueError(f"A score needs at least one bar, got {bars}")
        return cls([Bar.make_empty(nr, time_signature) for nr in range(1, bars + 1)], title)

    @property
    def bars(self) -> list[Bar]:
        """Copy of the bar list."""
        return list(self._bars)

    @property
    def length(self) -> int:
        """Number of bars."""
        return len(self._bars)

    def _renumber(self) -> None:
        for idx, bar in enumerate(self._bars):
            bar.bar_nr = idx + 1

    def get_bar(self, bar_nr: int) -> Bar:
        """
        Bar by its 1-based number.

        Raises:
            ValueError: If no such bar exists
        """
        if not 1 <= bar_nr <= len(self._bars):
            raise ValueError(ErrorMessages.BAR_NOT_FOUND.format(bar_nr=bar_nr))
        return self._bars[bar_nr - 1]

    def insert_empty_bar(self, after_bar_nr: int) -> Bar:
        """
        Insert an empty bar after a bar, using that bar's time signature.

        Args:
            after_bar_nr: Bar to insert after; 0 inserts at the front using the
                first bar's signature

        Returns:
            The inserted bar

        Raises:
            ValueError: If after_bar_nr is negative or past the last bar
        """
        if not 0 <= after_bar_nr <= len(self._bars):
            raise ValueError(
                f"Can't insert after bar {after_bar_nr}; the score has {len(self._bars)} bars"
            )
        reference = self.get_bar(max(after_bar_nr, 1))
        bar = Bar.make_empty(after_bar_nr + 1, reference.time_signature)
        self._bars.insert(after_bar_nr, bar)
        self._renumber()
        return bar

    def delete_bar(self, bar_nr: int) -> None:
        """
        Delete a bar and renumber the following ones.

        Raises:
            ValueError: If the bar does not exist or is the only bar
        """
        self.get_bar(bar_nr)
        if len(self._bars) == 1:
            raise ValueError("Can't delete the only bar of a score")
        del self._bars[bar_nr - 1]
        self._renumber()

    def change_bar_time_signature(self, bar_nr: int, time_signature: TimeSignature) -> int:
        """
        Change the time signature of a bar.

        Notes pushed out of the bar by a shorter signature are placed into new
        bars of that signature directly after it, up to the last one holding notes.

        Returns:
            Number of bars inserted

        Raises:
            ValueError: If the bar does not exist or already has the signature
        """
        bar = self.get_bar(bar_nr)
        overflow = bar.apply_time_signature_change(time_signature)
        if not overflow:
            return 0

        needed = max(
            idx + 1
            for slices in overflow.values()
            for idx, bar_slice in enumerate(slices)
            if any(not interval.is_rest for interval in bar_slice)
        )

        successors = []
        for idx in range(needed):
            voice_intervals = {
                voice_num: slices[idx]
                for voice_num, slices in overflow.items()
                if any(not interval.is_rest for interval in slices[idx])
            }
            if voice_intervals:
                successors.append(Bar(bar_nr + idx + 1, time_signature, voice_intervals))
            else:
                successors.append(Bar.make_empty(bar_nr + idx + 1, time_signature))

        self._bars[bar_nr:bar_nr] = successors
        self._renumber()
        logger.debug("Inserted %d bars after bar %d", len(successors), bar_nr)
        return len(successors)

    def __repr__(self) -> str:
        return f"Score({self.title!r}, bars={len(self._bars)})"
