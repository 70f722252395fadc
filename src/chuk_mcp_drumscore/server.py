#!/usr/bin/env python3
"""
Command line entry point for the drum score MCP server.

Runs the server over stdio (the default, for MCP clients that spawn it)
or over HTTP. Scores are read from and written to ``./scores`` unless
``--scores-dir`` points somewhere else.
"""

import argparse
import asyncio
import logging
from pathlib import Path

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Command line options of the server."""
    parser = argparse.ArgumentParser(description="Drum score MCP server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="How clients connect (default: stdio)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to listen on with --transport http",
    )
    parser.add_argument(
        "--scores-dir",
        type=Path,
        default=None,
        help="Directory holding *.score.yaml files (default: ./scores)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log resize and time signature steps",
    )
    return parser


def main() -> None:
    args = build_parser().parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    # Tools are registered when the server module is imported
    from chuk_mcp_drumscore import async_server

    if args.scores_dir is not None:
        async_server.score_manager.scores_dir = args.scores_dir
        logger.info(f"Using scores dir {args.scores_dir}")

    mcp = async_server.mcp
    if args.transport == "http":
        logger.info(f"Serving drum scores over http on port {args.port}")
        asyncio.run(mcp.run_http(port=args.port))
    else:
        logger.info("Serving drum scores over stdio")
        asyncio.run(mcp.run_stdio())


if __name__ == "__main__":
    main()
