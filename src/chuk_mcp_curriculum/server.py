#!/usr/bin/env python3
"""
Entry point for the CHUK Curriculum MCP Server.

This module provides the main entry point for the MCP server,
supporting multiple transport modes (stdio, http).
"""

import argparse
import asyncio
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point with transport detection."""
    parser = argparse.ArgumentParser(
        description="CHUK Curriculum MCP Server",
        epilog=(
            "Curriculum documents are read from ./curriculum and MIDI previews are "
            "written to ./output, relative to the working directory. A ./catalog.yaml "
            "replaces the bundled global rudiment catalog."
        ),
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode: stdio for a local MCP client, http to serve the "
        "curriculum tools over HTTP (default: stdio)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for the curriculum tools over HTTP (only for http transport)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (store writes, dangling references)",
    )

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    # Paths in async_server are resolved at import time
    from chuk_mcp_curriculum.async_server import mcp

    if args.transport == "stdio":
        logger.info("Starting CHUK Curriculum MCP Server (stdio)")
        asyncio.run(mcp.run_stdio())
    else:
        logger.info(f"Starting CHUK Curriculum MCP Server (http:{args.port})")
        asyncio.run(mcp.run_http(port=args.port))


if __name__ == "__main__":
    main()
