"""
Gigapipe query tool implementations.

These tools query the metrics (Prometheus), logs (Loki) and traces (Tempo)
APIs of a Gigapipe host and return the raw JSON response.

Can be run as:
- MCP server: python -m gigapipe_mcp.cli.gigapipe
- CLI tool: python -m gigapipe_mcp.cli.gigapipe.tools prometheus_query --query up
- Python API: from gigapipe_mcp.pipeline import QueryDispatcher
"""

import argparse
import asyncio
import sys
from collections.abc import Callable
from typing import Any

from mcp.server import Server
from mcp.types import TextContent, Tool

from gigapipe_mcp import list_tools as list_manifest_tools
from gigapipe_mcp.config import REQUEST_TIMEOUT, BackendConfig, pinned_config, resolve_config
from gigapipe_mcp.executor import HTTPExecutor
from gigapipe_mcp.operations import OPERATIONS
from gigapipe_mcp.pipeline import QueryDispatcher
from gigapipe_mcp.utils import setup_logging


class ToolCallError(Exception):
    """Raised from call_tool so the MCP server reports an isError result."""


def register_tools(server: Server, dispatcher: QueryDispatcher) -> None:
    """Register all Gigapipe query tools with the MCP server.

    Args:
        server: The MCP Server instance to register tools with.
        dispatcher: Dispatcher that runs the tool calls.
    """

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """Return the list of available tools."""
        return [
            Tool(
                name=spec.name,
                description=spec.description,
                inputSchema=spec.input_schema(),
            )
            for spec in dispatcher.operations.values()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool invocations."""
        outcome = await dispatcher.invoke(name, arguments)
        if outcome.is_error:
            raise ToolCallError(outcome.text)
        return [TextContent(type="text", text=outcome.text)]


# =============================================================================
# Connection options shared by the server and the CLI
# =============================================================================

def add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group(
        "connection",
        "Without these flags the GIGAPIPE_HOST, GIGAPIPE_USERNAME and "
        "GIGAPIPE_PASSWORD environment variables are read on every call.",
    )
    group.add_argument("--host", help="Gigapipe host[:port] (default: localhost:3100)")
    group.add_argument("--username", help="Basic auth username")
    group.add_argument("--password", help="Basic auth password")
    group.add_argument(
        "--timeout",
        type=float,
        default=REQUEST_TIMEOUT,
        help=f"Request timeout in seconds (default: {REQUEST_TIMEOUT:g})",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )


def config_provider_from_args(args: argparse.Namespace) -> Callable[[], BackendConfig]:
    """Pin one configuration when connection flags are given, else read the environment per call."""
    if args.host is None and args.username is None and args.password is None:
        return resolve_config

    config = pinned_config(host=args.host, username=args.username, password=args.password)
    return lambda: config


# =============================================================================
# Command-line interface
# =============================================================================

async def _run_cli(args: argparse.Namespace) -> int:
    arguments = {
        name: getattr(args, name)
        for name in OPERATIONS[args.tool].arguments
        if getattr(args, name) is not None
    }

    async with HTTPExecutor(timeout=args.timeout) as executor:
        dispatcher = QueryDispatcher(executor, config_provider=config_provider_from_args(args))
        outcome = await dispatcher.invoke(args.tool, arguments)

    if outcome.is_error:
        print(f"Error: {outcome.text}", file=sys.stderr)
        return 1

    print(outcome.text)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gigapipe-query",
        description="Query the Gigapipe metrics, logs and traces APIs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Range query against the metrics API
  python -m gigapipe_mcp.cli.gigapipe.tools prometheus_query \\
    --query up --start 0 --end 100 --step 15s

  # Fetch a trace
  python -m gigapipe_mcp.cli.gigapipe.tools tempo_query --trace-id abc123

  # List available tools
  python -m gigapipe_mcp.cli.gigapipe.tools --list
        """
    )

    parser.add_argument(
        "--list", "-l",
        action="store_true",
        help="List available tools"
    )
    add_connection_arguments(parser)

    subparsers = parser.add_subparsers(
        title="tools",
        dest="tool",
        description="Available tools (use '<tool> --help' for tool-specific help)"
    )

    for spec in OPERATIONS.values():
        tool_parser = subparsers.add_parser(spec.name, help=spec.description, description=spec.description)
        for arg in spec.arguments:
            tool_parser.add_argument(
                "--" + arg.replace("_", "-"),
                dest=arg,
                required=arg in spec.required_args,
                help=spec.argument_descriptions.get(arg) or None,
            )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Command-line interface for the Gigapipe query tools."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list:
        print("Available tools:")
        print()
        tools = list_manifest_tools()
        width = max(len(tool["name"]) for tool in tools)
        for tool in tools:
            print(f"  {tool['name']:<{width}}  - [{tool['backend']}] {tool['description']}")
        print()
        print("Use '<tool> --help' for tool-specific options.")
        return 0

    if not args.tool:
        parser.print_help()
        return 0

    setup_logging(args.verbose)
    return asyncio.run(_run_cli(args))


if __name__ == "__main__":
    sys.exit(main())
