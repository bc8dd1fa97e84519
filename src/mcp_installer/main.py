"""MCP installer entry point.

Runs the installer MCP server over stdio (default) or streamable HTTP.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from mcp_installer import __version__
from mcp_installer.config import load_settings, set_settings
from mcp_installer.server import mcp

logger = logging.getLogger("mcp_installer")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcp-installer-bridge",
        description="Install MCP servers into the host's extension configuration.",
    )
    parser.add_argument("--config", type=Path, help="Path to the host config.yaml")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="MCP transport (default: stdio)",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address for --transport http")
    parser.add_argument("--port", type=int, default=8080, help="Port for --transport http")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the installer."""
    args = build_parser().parse_args(argv)
    settings = load_settings(config_path=args.config, log_level=args.log_level)
    set_settings(settings)

    # Configure logging to stderr (stdout carries the stdio transport)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    logger.info(f"MCP installer v{__version__} starting...")
    logger.info(f"Config file: {settings.config_path}")

    try:
        if args.transport == "http":
            mcp.run(transport="http", host=args.host, port=args.port)
        else:
            mcp.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
