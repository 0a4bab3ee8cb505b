"""
Shared utilities for the Gigapipe tools.

Common functions used by the MCP server and the command-line tool.
"""

import logging
import sys


def setup_logging(verbose: bool = False) -> None:
    """Configure logging.

    Logs go to stderr because stdout carries the MCP stdio stream.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def truncate_string(s: str, max_length: int = 500, suffix: str = "...") -> str:
    """Truncate a string to a maximum length.

    Args:
        s: String to truncate.
        max_length: Maximum length before truncation.
        suffix: Suffix to add when truncated.

    Returns:
        Original or truncated string.
    """
    if len(s) <= max_length:
        return s
    return s[: max_length - len(suffix)] + suffix
