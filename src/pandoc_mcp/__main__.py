#!/usr/bin/env python3

import argparse
import sys
from typing import Optional, Sequence

from pandoc_mcp import __version__
from pandoc_mcp.config import config
from pandoc_mcp.server import TRANSPORTS
from pandoc_mcp.server import main as server_main


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pandoc-mcp",
        description="MCP server for document conversion with Pandoc",
        epilog=(
            "Environment variables: PANDOC_PATH (pandoc binary), HOST and PORT "
            "(HTTP transports), PANDOC_MCP_TIMEOUT, PANDOC_MCP_MAX_CONCURRENT, "
            "PANDOC_MCP_LOG_LEVEL, PANDOC_MCP_LOG_FILE"
        ),
    )
    parser.add_argument(
        "--http",
        action="store_true",
        help="Use the streamable HTTP transport instead of stdio",
    )
    parser.add_argument(
        "--transport",
        choices=TRANSPORTS,
        default=None,
        help="Transport to serve (overrides --http)",
    )
    parser.add_argument("--host", default=None, help=f"HTTP host (default: {config.host})")
    parser.add_argument("--port", type=int, default=None, help=f"HTTP port (default: {config.port})")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help=f"Logging level (default: {config.log_level})",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the pandoc-mcp command."""
    args = parse_args(argv)

    transport = args.transport or ("streamable-http" if args.http else "stdio")
    if args.log_level:
        config.log_level = args.log_level

    server_main(transport=transport, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
