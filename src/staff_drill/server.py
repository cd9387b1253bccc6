#!/usr/bin/env python3
"""
Entry point for the Staff Drill MCP Server.

Parses the command line, sets up logging and the project profile
directory, then runs the server over stdio or http.
"""

import argparse
import asyncio
import logging
import os

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PROFILES_DIR_ENV = "STAFF_DRILL_PROFILES_DIR"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Staff Drill MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode (default: stdio)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="HTTP port (only for http transport)",
    )
    parser.add_argument(
        "--profiles-dir",
        help="Directory of project profiles overriding the library (default: ./profiles)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (shows ignored inputs and dropped timers)",
    )
    return parser


def main() -> None:
    """Run the server with the requested transport."""
    args = build_parser().parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    if args.profiles_dir:
        os.environ[PROFILES_DIR_ENV] = args.profiles_dir

    # The server module builds its loader at import time, after the env is set
    from staff_drill.async_server import mcp

    if args.transport == "stdio":
        logger.info("Starting Staff Drill MCP Server (stdio)")
        asyncio.run(mcp.run_stdio())
    else:
        logger.info("Starting Staff Drill MCP Server (http:%d)", args.port)
        asyncio.run(mcp.run_http(port=args.port))


if __name__ == "__main__":
    main()
