#!/usr/bin/env python3
"""
varquery CLI Entry Point

Handles:
- One-shot searches printed to stdout
- Server modes (MCP stdio, http)
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from varquery import __version__, __package_name__
from varquery.config import ConfigManager
from varquery.registry import HttpRegistrySession
from varquery.search.service import search_with
from varquery.utils import Logger


def _unsigned(text: str) -> int:
    """Parse decimal or 0x-prefixed unsigned integers."""
    try:
        value = int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: '{text}'")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: '{text}'")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=__package_name__,
        description="Search the variable server for variables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  varquery                       List every variable
  varquery -r '^/sys/' -v        Variables under /sys/ with their values
  varquery -t network,config     Variables carrying both tags
  varquery -i 3                  Variables owned by instance 3
  varquery --mcp                 Run as an MCP server on stdio
  varquery --http --port 3000    Run the HTTP search endpoint

Exit status is 0 on success, ENOENT when nothing matched, EINVAL for
invalid arguments and EIO when the variable server cannot be reached.
"""
    )

    name_group = parser.add_mutually_exclusive_group()
    name_group.add_argument("-n", "--name", help="Match an exact variable name")
    name_group.add_argument("-r", "--regex", help="Match variable names against a regular expression")

    parser.add_argument("-f", "--flags", type=_unsigned, help="Match variables with all of these flag bits set")
    parser.add_argument("-t", "--tags", help="Match variables carrying all of these comma separated tags")
    parser.add_argument("-i", "--instance", type=_unsigned, help="Match variables owned by this instance ID")
    parser.add_argument("-v", "--value", action="store_true", help="Show variable values")
    parser.add_argument("--server", help="Variable server URL (default: $VARSERVER_URL)")

    parser.add_argument("--mcp", action="store_true", help="Run as an MCP server on stdio")
    parser.add_argument("--http", action="store_true", help="Run the HTTP search server")
    parser.add_argument("--port", "-p", type=int, default=None, help="HTTP port (default: $VARQUERY_PORT or 8000)")
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    return parser


def run_search(args: argparse.Namespace) -> int:
    """Run a single search to stdout, returning the process exit status."""
    config = ConfigManager.get_instance().load()
    if args.server:
        config.server_url = args.server.rstrip("/")

    logger = Logger(name=__package_name__, level=config.log_level)

    with HttpRegistrySession.from_config(config, logger=logger) as session:
        result = search_with(
            session,
            sys.stdout,
            name=args.name,
            regex=args.regex,
            flags=args.flags,
            tags=args.tags,
            instance_id=args.instance,
            show_value=args.value,
            log=logger,
        )

    if not result.tag_filter_applied:
        print("varquery: tag spec too long, searched without a tag filter", file=sys.stderr)

    if not result.ok and result.error:
        print(f"varquery: {result.error.message}", file=sys.stderr)

    return result.code.errno


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"{__package_name__} v{__version__}")
        return 0

    if args.mcp:
        from varquery.server import run_stdio
        asyncio.run(run_stdio())
        return 0

    if args.http:
        from varquery.server_http import main as http_main
        asyncio.run(http_main(args.port))
        return 0

    return run_search(args)


if __name__ == "__main__":
    sys.exit(main())
