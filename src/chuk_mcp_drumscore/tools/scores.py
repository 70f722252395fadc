"""
Score tools - MCP tools for score lifecycle.

Tools for creating, persisting, listing and auditing scores.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_drumscore.constants import ErrorMessages, SuccessMessages
from chuk_mcp_drumscore.models.score import score_to_dict
from chuk_mcp_drumscore.scores import ScoreManager, validate_score

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_score_tools(
    mcp: ChukMCPServer,
    manager: ScoreManager,
) -> dict[str, Any]:
    """
    Register score lifecycle tools with the MCP server.

    Args:
        mcp: The MCP server instance
        manager: The score manager

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def drum_create_score(
        title: str,
        bars: int = 1,
        time_signature: str = "4/4",
    ) -> str:
        """
        Create a new drum score.

        Every bar starts with a single voice of rests.

        Args:
            title: Unique title for the score
            bars: Number of bars (default: 1)
            time_signature: Time signature of all bars (e.g., '4/4', '3/4', '6/8', '2/2')

        Returns:
            JSON string with score details

        Example:
            drum_create_score(title="groove", bars=4, time_signature="4/4")
        """
        try:
            score = await manager.create(title=title, bars=bars, time_signature=time_signature)

            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.SCORE_CREATED.format(name=title),
                    "score": {
                        "title": score.title,
                        "bars": score.length,
                        "time_signature": str(score.get_bar(1).time_signature),
                    },
                }
            )
        except Exception as e:
            logger.exception("Failed to create score")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_create_score"] = drum_create_score

    @mcp.tool  # type: ignore[arg-type]
    async def drum_get_score(title: str) -> str:
        """
        Get the full content of a score.

        Returns every bar with its time signature and the intervals of each
        voice, including lengths, positions, note heads and layout widths.

        Args:
            title: Score title

        Returns:
            JSON string with the score document

        Example:
            drum_get_score(title="groove")
        """
        try:
            score = await manager.get(title)
            if score is None:
                return json.dumps(
                    {"status": "error", "message": ErrorMessages.SCORE_NOT_FOUND.format(name=title)}
                )

            return json.dumps({"status": "success", "score": score_to_dict(score)})
        except Exception as e:
            logger.exception("Failed to get score")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_get_score"] = drum_get_score

    @mcp.tool  # type: ignore[arg-type]
    async def drum_list_scores() -> str:
        """
        List all saved scores.

        Returns:
            JSON string with list of score summaries

        Example:
            drum_list_scores()
        """
        try:
            scores = await manager.list_scores()

            return json.dumps(
                {
                    "status": "success",
                    "scores": [
                        {
                            "title": meta.title,
                            "bars": meta.bar_count,
                            "time_signature": meta.time_signature,
                            "modified": meta.modified.isoformat(),
                        }
                        for meta in scores
                    ],
                }
            )
        except Exception as e:
            logger.exception("Failed to list scores")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_list_scores"] = drum_list_scores

    @mcp.tool  # type: ignore[arg-type]
    async def drum_save_score(title: str) -> str:
        """
        Save a score to disk.

        Persists the score to a YAML file that can be edited manually
        or version controlled.

        Args:
            title: Score title

        Returns:
            JSON string with save result

        Example:
            drum_save_score(title="groove")
        """
        try:
            score = await manager.require(title)
            path = await manager.save(score)

            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.SCORE_SAVED.format(name=title, path=path),
                    "path": str(path),
                }
            )
        except Exception as e:
            logger.exception("Failed to save score")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_save_score"] = drum_save_score

    @mcp.tool  # type: ignore[arg-type]
    async def drum_delete_score(title: str) -> str:
        """
        Delete a score.

        Removes the score from memory and disk.

        Args:
            title: Score title

        Returns:
            JSON string with deletion result

        Example:
            drum_delete_score(title="old-groove")
        """
        try:
            deleted = await manager.delete(title)
            if not deleted:
                return json.dumps(
                    {"status": "error", "message": ErrorMessages.SCORE_NOT_FOUND.format(name=title)}
                )

            return json.dumps({"status": "success", "message": f"Score '{title}' deleted"})
        except Exception as e:
            logger.exception("Failed to delete score")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_delete_score"] = drum_delete_score

    @mcp.tool  # type: ignore[arg-type]
    async def drum_duplicate_score(title: str, new_title: str) -> str:
        """
        Duplicate a score under a new title.

        Useful for trying variations of a groove without touching the original.

        Args:
            title: Source score title
            new_title: Title for the copy

        Returns:
            JSON string with the new score's summary

        Example:
            drum_duplicate_score(title="groove", new_title="groove-fill")
        """
        try:
            copy = await manager.duplicate(title, new_title)

            return json.dumps(
                {
                    "status": "success",
                    "score": {"title": copy.title, "bars": copy.length},
                }
            )
        except Exception as e:
            logger.exception("Failed to duplicate score")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_duplicate_score"] = drum_duplicate_score

    @mcp.tool  # type: ignore[arg-type]
    async def drum_export_json(title: str) -> str:
        """
        Export a score as a JSON document.

        The document uses camelCase keys (barNr, timeSignature, basicLength,
        startUnit, widthPercent, noteHeads) for exchange with score viewers.

        Args:
            title: Score title

        Returns:
            JSON string wrapping the exported document

        Example:
            drum_export_json(title="groove")
        """
        try:
            document = await manager.export_json(title)

            return json.dumps({"status": "success", "json": document})
        except Exception as e:
            logger.exception("Failed to export score")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_export_json"] = drum_export_json

    @mcp.tool  # type: ignore[arg-type]
    async def drum_validate_score(title: str) -> str:
        """
        Validate a score's structure.

        Checks bar numbering, voice tiling and sub-group bookkeeping.

        Args:
            title: Score title

        Returns:
            JSON string with validation results

        Example:
            drum_validate_score(title="groove")
        """
        try:
            score = await manager.require(title)
            result = validate_score(score)

            return json.dumps(
                {
                    "status": "success",
                    "valid": result.is_valid,
                    "issues": [
                        {
                            "severity": issue.severity.value,
                            "code": issue.code,
                            "message": issue.message,
                            "location": issue.location,
                        }
                        for issue in result.issues
                    ],
                }
            )
        except Exception as e:
            logger.exception("Failed to validate score")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drum_validate_score"] = drum_validate_score

    return tools
