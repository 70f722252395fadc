#!/usr/bin/env python3
"""
Async Drum Score MCP Server using chuk-mcp-server

This server provides MCP tools for writing drum scores on a five-line
percussion staff. Notes and rests are placed into the intervals of up to
four voices per bar; the model keeps every voice gap-free, groups intervals
by beat for beaming and arbitrates stem directions between voices.

The server provides tools for:
- Creating, saving, listing and validating scores
- Adding notes and rests of any supported length
- Changing time signatures, moving overflowing notes into new bars
- Inserting and deleting bars
"""

import logging
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_drumscore.scores import ScoreManager
from chuk_mcp_drumscore.tools import register_editing_tools, register_score_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-drumscore")

# Paths - use standard project structure
BASE_PATH = Path.cwd()
SCORES_DIR = BASE_PATH / "scores"

# Create managers
score_manager = ScoreManager(SCORES_DIR)

# Register all tools
score_tools = register_score_tools(mcp, score_manager)
editing_tools = register_editing_tools(mcp, score_manager)

# Export tool functions for direct access
drum_create_score = score_tools["drum_create_score"]
drum_get_score = score_tools["drum_get_score"]
drum_list_scores = score_tools["drum_list_scores"]
drum_save_score = score_tools["drum_save_score"]
drum_delete_score = score_tools["drum_delete_score"]
drum_duplicate_score = score_tools["drum_duplicate_score"]
drum_export_json = score_tools["drum_export_json"]
drum_validate_score = score_tools["drum_validate_score"]

drum_describe_bar = editing_tools["drum_describe_bar"]
drum_add_note = editing_tools["drum_add_note"]
drum_add_rest = editing_tools["drum_add_rest"]
drum_remove_note = editing_tools["drum_remove_note"]
drum_change_time_signature = editing_tools["drum_change_time_signature"]
drum_insert_bar = editing_tools["drum_insert_bar"]
drum_delete_bar = editing_tools["drum_delete_bar"]

logger.info("CHUK Drum Score MCP Server initialized")
logger.info(f"  Scores dir: {SCORES_DIR}")
