"""
Tests for MCP tools.

Tests the MCP tool implementations for score lifecycle and bar editing.
"""

import json
from pathlib import Path

import pytest

from chuk_mcp_drumscore.scores import ScoreManager
from chuk_mcp_drumscore.tools.editing import register_editing_tools
from chuk_mcp_drumscore.tools.scores import register_score_tools


# Mock MCP server for testing tools
class MockMCPServer:
    """Mock MCP server that just stores registered tools."""

    def __init__(self, name: str):
        self.name = name
        self.tools: dict = {}

    def tool(self, func):
        """Decorator to register a tool."""
        self.tools[func.__name__] = func
        return func


@pytest.fixture
def tools(temp_dir: Path) -> dict:
    """All tools registered against one manager."""
    mcp = MockMCPServer("test")
    manager = ScoreManager(temp_dir)
    registered = register_score_tools(mcp, manager)
    registered.update(register_editing_tools(mcp, manager))
    return registered


class TestRegistration:
    """Tests for tool registration."""

    def test_tools_registered_with_server(self, temp_dir: Path) -> None:
        """Every returned tool is registered with the server."""
        mcp = MockMCPServer("test")
        manager = ScoreManager(temp_dir)
        score_tools = register_score_tools(mcp, manager)
        editing_tools = register_editing_tools(mcp, manager)
        assert set(mcp.tools) == set(score_tools) | set(editing_tools)
        assert "drum_add_note" in mcp.tools


class TestScoreTools:
    """Tests for score lifecycle tools."""

    @pytest.mark.asyncio
    async def test_create_score(self, tools: dict) -> None:
        """Create score tool."""
        result = await tools["drum_create_score"](title="groove", bars=2, time_signature="6/8")
        data = json.loads(result)
        assert data["status"] == "success"
        assert data["score"] == {"title": "groove", "bars": 2, "time_signature": "6/8"}

    @pytest.mark.asyncio
    async def test_create_invalid_signature(self, tools: dict) -> None:
        """Invalid signatures come back as errors."""
        data = json.loads(await tools["drum_create_score"](title="groove", time_signature="4/3"))
        assert data["status"] == "error"
        assert "denominator" in data["message"]

    @pytest.mark.asyncio
    async def test_get_score(self, tools: dict) -> None:
        """Get score tool returns the document."""
        await tools["drum_create_score"](title="groove")
        data = json.loads(await tools["drum_get_score"](title="groove"))
        assert data["status"] == "success"
        assert data["score"]["bars"][0]["timeSignature"] == {"numerator": 4, "denominator": 4}

    @pytest.mark.asyncio
    async def test_get_missing_score(self, tools: dict) -> None:
        """Missing scores are reported."""
        data = json.loads(await tools["drum_get_score"](title="missing"))
        assert data["status"] == "error"
        assert "not found" in data["message"]

    @pytest.mark.asyncio
    async def test_save_and_list(self, tools: dict, temp_dir: Path) -> None:
        """Saved scores show up in the listing."""
        await tools["drum_create_score"](title="groove", bars=3)
        saved = json.loads(await tools["drum_save_score"](title="groove"))
        assert saved["status"] == "success"
        assert Path(saved["path"]).parent == temp_dir

        listed = json.loads(await tools["drum_list_scores"]())
        assert listed["status"] == "success"
        assert listed["scores"][0]["title"] == "groove"
        assert listed["scores"][0]["bars"] == 3

    @pytest.mark.asyncio
    async def test_delete_and_duplicate(self, tools: dict) -> None:
        """Duplicate then delete the original."""
        await tools["drum_create_score"](title="groove")
        copy = json.loads(await tools["drum_duplicate_score"](title="groove", new_title="fill"))
        assert copy["score"]["title"] == "fill"

        deleted = json.loads(await tools["drum_delete_score"](title="groove"))
        assert deleted["status"] == "success"
        again = json.loads(await tools["drum_delete_score"](title="groove"))
        assert again["status"] == "error"

    @pytest.mark.asyncio
    async def test_export_json(self, tools: dict) -> None:
        """Export wraps the camelCase document."""
        await tools["drum_create_score"](title="groove")
        data = json.loads(await tools["drum_export_json"](title="groove"))
        document = json.loads(data["json"])
        assert document["bars"][0]["voices"]["1"][0]["basicLength"] == "whole"

    @pytest.mark.asyncio
    async def test_validate(self, tools: dict) -> None:
        """Validation reports issues."""
        await tools["drum_create_score"](title="groove", time_signature="7/8")
        data = json.loads(await tools["drum_validate_score"](title="groove"))
        assert data["valid"] is True
        assert {issue["code"] for issue in data["issues"]} == {"UNGROUPED_METER", "EMPTY_SCORE"}


class TestEditingTools:
    """Tests for bar editing tools."""

    @pytest.mark.asyncio
    async def test_add_note(self, tools: dict) -> None:
        """Adding a note returns the updated bar."""
        await tools["drum_create_score"](title="groove")
        data = json.loads(
            await tools["drum_add_note"](
                score="groove",
                bar_nr=1,
                voice=1,
                interval_index=0,
                length="eighth",
                height=10,
                head_type="cross",
            )
        )
        assert data["status"] == "success"
        intervals = data["bar"]["voices"]["1"]["intervals"]
        assert [i["length"] for i in intervals] == ["eighth", "eighth", "dotted half"]
        assert intervals[0]["notes"] == {"10": "cross"}
        assert [i["sub_group"] for i in intervals] == [0, 0, 1]

    @pytest.mark.asyncio
    async def test_add_note_invalid_height(self, tools: dict) -> None:
        """Invalid heights are reported as errors."""
        await tools["drum_create_score"](title="groove")
        data = json.loads(
            await tools["drum_add_note"](
                score="groove", bar_nr=1, voice=1, interval_index=0, length="quarter", height=20
            )
        )
        assert data["status"] == "error"
        assert "height" in data["message"].lower()

    @pytest.mark.asyncio
    async def test_add_note_past_bar_end(self, tools: dict) -> None:
        """Lengths running past the bar end are rejected."""
        await tools["drum_create_score"](title="groove", time_signature="3/4")
        data = json.loads(
            await tools["drum_add_note"](
                score="groove", bar_nr=1, voice=1, interval_index=0, length="whole", height=4
            )
        )
        assert data["status"] == "error"

    @pytest.mark.asyncio
    async def test_add_cross_on_half_rejected(self, tools: dict) -> None:
        """Cross heads on halves are reported and the bar stays empty."""
        await tools["drum_create_score"](title="groove")
        data = json.loads(
            await tools["drum_add_note"](
                score="groove",
                bar_nr=1,
                voice=1,
                interval_index=0,
                length="half",
                height=10,
                head_type="cross",
            )
        )
        assert data["status"] == "error"
        assert "Cross" in data["message"]
        bar = json.loads(await tools["drum_describe_bar"](score="groove", bar_nr=1))["bar"]
        assert [i["rest"] for i in bar["voices"]["1"]["intervals"]] == [True]

    @pytest.mark.asyncio
    async def test_two_voices_stems(self, tools: dict) -> None:
        """Two voices get opposite stems."""
        await tools["drum_create_score"](title="groove")
        await tools["drum_add_note"](
            score="groove", bar_nr=1, voice=1, interval_index=0, length="quarter", height=10
        )
        await tools["drum_add_note"](
            score="groove", bar_nr=1, voice=2, interval_index=0, length="half", height=2
        )
        data = json.loads(await tools["drum_describe_bar"](score="groove", bar_nr=1))
        voices = data["bar"]["voices"]
        assert voices["1"]["stem_direction"] == "up"
        assert voices["2"]["stem_direction"] == "down"

    @pytest.mark.asyncio
    async def test_add_rest_and_remove_note(self, tools: dict) -> None:
        """Rests and removals update the bar."""
        await tools["drum_create_score"](title="groove")
        await tools["drum_add_note"](
            score="groove", bar_nr=1, voice=1, interval_index=0, length="quarter", height=4
        )
        await tools["drum_add_note"](
            score="groove", bar_nr=1, voice=1, interval_index=0, length="quarter", height=9
        )
        removed = json.loads(
            await tools["drum_remove_note"](
                score="groove", bar_nr=1, voice=1, interval_index=0, height=9
            )
        )
        assert removed["bar"]["voices"]["1"]["intervals"][0]["notes"] == {"4": "elliptic"}

        rested = json.loads(
            await tools["drum_add_rest"](
                score="groove", bar_nr=1, voice=1, interval_index=0, length="half"
            )
        )
        intervals = rested["bar"]["voices"]["1"]["intervals"]
        assert [i["rest"] for i in intervals] == [True, True]

    @pytest.mark.asyncio
    async def test_change_time_signature(self, tools: dict) -> None:
        """Overflowing notes create new bars."""
        await tools["drum_create_score"](title="groove")
        await tools["drum_add_note"](
            score="groove", bar_nr=1, voice=1, interval_index=0, length="dotted half", height=5
        )
        data = json.loads(
            await tools["drum_change_time_signature"](
                score="groove", bar_nr=1, time_signature="2/4"
            )
        )
        assert data["status"] == "success"
        assert data["inserted_bars"] == 1
        assert data["total_bars"] == 2

    @pytest.mark.asyncio
    async def test_change_to_same_signature(self, tools: dict) -> None:
        """Changing to the current signature is an error."""
        await tools["drum_create_score"](title="groove")
        data = json.loads(
            await tools["drum_change_time_signature"](
                score="groove", bar_nr=1, time_signature="4/4"
            )
        )
        assert data["status"] == "error"

    @pytest.mark.asyncio
    async def test_insert_and_delete_bar(self, tools: dict) -> None:
        """Bars can be added and removed."""
        await tools["drum_create_score"](title="groove")
        inserted = json.loads(await tools["drum_insert_bar"](score="groove", after_bar_nr=1))
        assert inserted["total_bars"] == 2

        deleted = json.loads(await tools["drum_delete_bar"](score="groove", bar_nr=2))
        assert deleted["total_bars"] == 1

        last = json.loads(await tools["drum_delete_bar"](score="groove", bar_nr=1))
        assert last["status"] == "error"

    @pytest.mark.asyncio
    async def test_describe_missing_bar(self, tools: dict) -> None:
        """Missing bars are reported."""
        await tools["drum_create_score"](title="groove")
        data = json.loads(await tools["drum_describe_bar"](score="groove", bar_nr=5))
        assert data["status"] == "error"
        assert "Bar 5" in data["message"]


class TestServerCli:
    """Tests for the command line options."""

    def test_defaults(self) -> None:
        """Stdio on the default scores dir."""
        from chuk_mcp_drumscore.server import build_parser

        args = build_parser().parse_args([])
        assert args.transport == "stdio"
        assert args.port == 8000
        assert args.scores_dir is None
        assert not args.debug

    def test_http_with_scores_dir(self, temp_dir: Path) -> None:
        """Scores dir is parsed as a path."""
        from chuk_mcp_drumscore.server import build_parser

        args = build_parser().parse_args(
            ["--transport", "http", "--port", "9000", "--scores-dir", str(temp_dir)]
        )
        assert args.transport == "http"
        assert args.port == 9000
        assert args.scores_dir == temp_dir
