"""
Editing tools - MCP tools for bar content.

Tools for placing notes and rests, changing time signatures and managing
bars. Interval indices refer to the current interval list of a voice, which
changes as intervals are resized; drum_describe_bar shows it.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_drumscore.constants import NoteHeadType, StemDirection, SuccessMessages
from chuk_mcp_drumscore.score.bar import Bar
from chuk_mcp_drumscore.scores import ScoreManager

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def _direction_value(direction: StemDirection | None) -> str | None:
    return direction.value if direction else None


def _describe_bar(bar: Bar) -> dict[str, Any]:
    """Bar content with sub-group and stem information for tool responses."""
    voices = {}
    for voice_num, voice in bar.voices.items():
        voices[str(voice_num)] = {
            "stem_direction": _direction_value(voice.stem_direction),
            "intervals": [
                {
                    "index": idx,
                    "length": str(interval.length),
                    "start_unit": interval.start_unit,
                    "end_unit": interval.end_unit,
                    "rest": interval.is_rest,
                    "notes": {str(h): t.value for h, t in sorted(interval.note_heads.items())},
                    "sub_group": voice.sub_group_index_of(interval),
                }
                for idx, interval in enumerate(voice.intervals)
            ],
            "sub_groups": [
                {
                    "start_unit": sub_group.start_unit,
                    "end_unit": sub_group.end_unit,
                    "padding_factor": sub_group.padding_factor,
                    "stem_direction": _direction_value(sub_group.get_stem_direction()),
                }
                for sub_group in voice.sub_groups
            ],
        }
    return {
        "bar_nr": bar.bar_nr,
        "time_signature": str(bar.time_signature),
        "units": bar.time_signature.units,
        "voices": voices,
    }


def register_editing_tools(
    mcp: ChukMCPServer,
    manager: ScoreManager,
) -> dict[str, Any]:
    """
    Register bar editing tools with the MCP server.

    Args:
        mcp: The MCP server instance
        manager: The score manager

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def drum_describe_bar(score: str, bar_nr: int) -> str:
        """
        Describe the content of a bar.

        Lists every voice's intervals with their indices, positions, note
        heads and sub-groups, plus the stem directions.

        Args:
            score: Score title
            bar_nr: Bar number (1-based)

        Returns:
            JSON string with the bar's content

        Example:
            drum_describe_bar(score="groove", bar_nr=1)
        """
        try:
            target = await manager.require(score)

            return json.dumps({"status": "success", "bar": _describe_bar(target.get_bar(bar_nr))})
        except Exception as e:
            logger.exception("Failed to describe bar")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_describe_bar"] = drum_describe_bar

    @mcp.tool  # type: ignore[arg-type]
    async def drum_add_note(
        score: str,
        bar_nr: int,
        voice: int,
        interval_index: int,
        length: str,
        height: int,
        head_type: str = NoteHeadType.ELLIPTIC.value,
    ) -> str:
        """
        Add a note to an interval of a voice.

        The interval is resized to the given length first: shrinking leaves
        rests behind it, growing swallows the following intervals. A voice
        that doesn't exist yet is created and the note goes to its first
        interval. Other voices holding only rests are removed.

        Args:
            score: Score title
            bar_nr: Bar number (1-based)
            voice: Voice number (1-4)
            interval_index: Index of the interval within the voice (0-based)
            length: Note length (e.g., 'quarter', 'eighth', 'dotted half', 'triplet eighth')
            height: Staff position (0 = lowest, 12 = highest)
            head_type: Note head ('elliptic' or 'cross'; cross only on sixteenths,
                eighths and quarters)

        Returns:
            JSON string with the updated bar

        Example:
            drum_add_note(
                score="groove",
                bar_nr=1,
                voice=1,
                interval_index=0,
                length="eighth",
                height=10,
                head_type="cross"
            )
        """
        try:
            target = await manager.add_note(
                score, bar_nr, voice, length, height, interval_index, head_type
            )

            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.NOTE_ADDED.format(
                        height=height, voice=voice, bar_nr=bar_nr
                    ),
                    "bar": _describe_bar(target.get_bar(bar_nr)),
                }
            )
        except Exception as e:
            logger.exception("Failed to add note")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_add_note"] = drum_add_note

    @mcp.tool  # type: ignore[arg-type]
    async def drum_add_rest(
        score: str,
        bar_nr: int,
        voice: int,
        interval_index: int,
        length: str,
    ) -> str:
        """
        Turn an interval of a voice into a rest of the given length.

        A voice left with only rests is removed when other voices exist.

        Args:
            score: Score title
            bar_nr: Bar number (1-based)
            voice: Voice number (1-4)
            interval_index: Index of the interval within the voice (0-based)
            length: Rest length (e.g., 'quarter', 'dotted eighth')

        Returns:
            JSON string with the updated bar

        Example:
            drum_add_rest(score="groove", bar_nr=1, voice=2, interval_index=1, length="quarter")
        """
        try:
            target = await manager.add_rest(score, bar_nr, voice, length, interval_index)

            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.REST_ADDED.format(voice=voice, bar_nr=bar_nr),
                    "bar": _describe_bar(target.get_bar(bar_nr)),
                }
            )
        except Exception as e:
            logger.exception("Failed to add rest")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_add_rest"] = drum_add_rest

    @mcp.tool  # type: ignore[arg-type]
    async def drum_remove_note(
        score: str,
        bar_nr: int,
        voice: int,
        interval_index: int,
        height: int,
    ) -> str:
        """
        Remove a single note head from an interval.

        The interval keeps its length; it becomes a rest once its last
        note head is removed.

        Args:
            score: Score title
            bar_nr: Bar number (1-based)
            voice: Voice number (1-4)
            interval_index: Index of the interval within the voice (0-based)
            height: Staff position of the note head to remove

        Returns:
            JSON string with the updated bar

        Example:
            drum_remove_note(score="groove", bar_nr=1, voice=1, interval_index=0, height=10)
        """
        try:
            target = await manager.remove_note(score, bar_nr, voice, height, interval_index)

            return json.dumps({"status": "success", "bar": _describe_bar(target.get_bar(bar_nr))})
        except Exception as e:
            logger.exception("Failed to remove note")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_remove_note"] = drum_remove_note

    @mcp.tool  # type: ignore[arg-type]
    async def drum_change_time_signature(score: str, bar_nr: int, time_signature: str) -> str:
        """
        Change the time signature of a bar.

        A longer signature pads every voice with rests. A shorter one cuts
        the bar; notes that no longer fit move into new bars inserted
        directly after it.

        Args:
            score: Score title
            bar_nr: Bar number (1-based)
            time_signature: New time signature (e.g., '3/4', '6/8')

        Returns:
            JSON string with the number of inserted bars and the new bar count

        Example:
            drum_change_time_signature(score="groove", bar_nr=2, time_signature="3/4")
        """
        try:
            target, inserted = await manager.change_time_signature(score, bar_nr, time_signature)

            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.TIME_SIGNATURE_CHANGED.format(
                        bar_nr=bar_nr, time_signature=time_signature, inserted=inserted
                    ),
                    "inserted_bars": inserted,
                    "total_bars": target.length,
                }
            )
        except Exception as e:
            logger.exception("Failed to change time signature")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_change_time_signature"] = drum_change_time_signature

    @mcp.tool  # type: ignore[arg-type]
    async def drum_insert_bar(score: str, after_bar_nr: int) -> str:
        """
        Insert an empty bar.

        The new bar takes the time signature of the bar it follows.

        Args:
            score: Score title
            after_bar_nr: Bar to insert after (0 inserts at the front)

        Returns:
            JSON string with the new bar count

        Example:
            drum_insert_bar(score="groove", after_bar_nr=2)
        """
        try:
            target = await manager.insert_bar(score, after_bar_nr)

            return json.dumps({"status": "success", "total_bars": target.length})
        except Exception as e:
            logger.exception("Failed to insert bar")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_insert_bar"] = drum_insert_bar

    @mcp.tool  # type: ignore[arg-type]
    async def drum_delete_bar(score: str, bar_nr: int) -> str:
        """
        Delete a bar; following bars are renumbered.

        Args:
            score: Score title
            bar_nr: Bar number (1-based)

        Returns:
            JSON string with the new bar count

        Example:
            drum_delete_bar(score="groove", bar_nr=3)
        """
        try:
            target = await manager.delete_bar(score, bar_nr)

            return json.dumps({"status": "success", "total_bars": target.length})
        except Exception as e:
            logger.exception("Failed to delete bar")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_delete_bar"] = drum_delete_bar

    return tools
