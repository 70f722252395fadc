"""
chuk-mcp-drumscore - drum notation model and MCP server.

Layers, leaves first:
- core: rhythmic lengths, time signatures and intervals
- score: sub-groups, voices, bars and scores with their edit operations
- models: pydantic persistence mapping
- scores: lifecycle management and validation
- tools: MCP tool registration
"""

__version__ = "0.1.0"
