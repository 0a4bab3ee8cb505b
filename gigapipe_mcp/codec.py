"""
Response decoding.

Upstream bodies are checked to be JSON objects before they are handed back
to the agent. The text is returned as received, so key order, whitespace and
numeric precision are untouched.
"""

import json
from decimal import Decimal

from .errors import DecodeError


def _reject_constant(name: str):
    raise ValueError(f"invalid JSON constant {name}")


def normalize(body: bytes) -> str:
    """Validate an upstream body and return it as text.

    Args:
        body: Raw response body.

    Returns:
        The body decoded as UTF-8, without a leading byte order mark.

    Raises:
        DecodeError: If the body is not UTF-8 JSON with an object at the top level.
    """
    try:
        text = body.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DecodeError(f"body is not UTF-8: {e.reason}") from e

    try:
        data = json.loads(text, parse_float=Decimal, parse_constant=_reject_constant)
    except ValueError as e:
        raise DecodeError(str(e)) from e

    if not isinstance(data, dict):
        raise DecodeError(f"expected a JSON object, got {type(data).__name__}")

    return text
