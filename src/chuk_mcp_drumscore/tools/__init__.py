"""
MCP tool implementations.

Tools are organized by domain:
- scores - Score lifecycle, persistence and validation
- editing - Notes, rests, time signatures and bars
"""

from chuk_mcp_drumscore.tools.editing import register_editing_tools
from chuk_mcp_drumscore.tools.scores import register_score_tools

__all__ = [
    "register_editing_tools",
    "register_score_tools",
]
