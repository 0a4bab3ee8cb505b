"""
Gigapipe MCP Server entry point.

Run with: python -m gigapipe_mcp.cli.gigapipe
"""

import argparse
import asyncio
import logging
import sys

from mcp.server import Server
from mcp.server.stdio import stdio_server

from gigapipe_mcp import __version__
from gigapipe_mcp.executor import HTTPExecutor
from gigapipe_mcp.pipeline import QueryDispatcher
from gigapipe_mcp.utils import setup_logging

from .tools import add_connection_arguments, config_provider_from_args, register_tools


logger = logging.getLogger("gigapipe_mcp.server")


async def run_server(args: argparse.Namespace):
    """Run the MCP server."""
    config_provider = config_provider_from_args(args)
    logger.info(f"Starting Gigapipe MCP server for host {config_provider().host}")

    async with HTTPExecutor(timeout=args.timeout) as executor:
        app = Server("Gigapipe MCP", version=__version__)
        register_tools(app, QueryDispatcher(executor, config_provider=config_provider))

        # stdio_server is an async context manager
        async with stdio_server() as (read_stream, write_stream):
            await app.run(read_stream, write_stream, app.create_initialization_options())


def main(argv: list[str] | None = None):
    """Main entry point for the Gigapipe MCP server."""
    parser = argparse.ArgumentParser(
        prog="gigapipe-mcp",
        description="MCP server for the Gigapipe metrics, logs and traces APIs",
    )
    add_connection_arguments(parser)
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    try:
        asyncio.run(run_server(args))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"Error starting MCP server: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
