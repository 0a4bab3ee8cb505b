"""
Upstream request construction.

Maps an operation and the tool arguments to the URL on the Gigapipe host.
All argument checks happen here, before any network activity.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlencode

from .config import BackendConfig
from .errors import ValidationError
from .operations import OperationSpec
from .transport import base_url, basic_auth


@dataclass(frozen=True)
class UpstreamRequest:
    url: str
    method: str = "GET"
    basic_auth: tuple[str, str] | None = None


def _argument_value(arguments: Mapping[str, Any], name: str) -> str | None:
    """Return an argument as a string, or None when absent or empty."""
    value = arguments.get(name)
    if value is None:
        return None
    if isinstance(value, bool):
        value = "true" if value else "false"
    value = str(value)
    return value or None


def build_request(
    spec: OperationSpec,
    arguments: Mapping[str, Any],
    config: BackendConfig,
) -> UpstreamRequest:
    """Build the upstream request for one tool call.

    Path parameters are percent-encoded as a single path segment. The other
    declared arguments become query parameters in argument-table order;
    absent or empty ones are left out entirely. Undeclared arguments are
    ignored.

    Raises:
        ValidationError: If a required argument is missing or empty.
    """
    values = {}
    for name in spec.arguments:
        value = _argument_value(arguments, name)
        if value is None:
            if name in spec.required_args:
                raise ValidationError(name)
            continue
        values[name] = value

    path = spec.path_template.format(
        **{param: quote(values[param], safe="") for param in spec.path_params}
    )

    url = base_url(config) + path
    params = [(name, values[name]) for name in spec.query_args if name in values]
    if params:
        url = f"{url}?{urlencode(params)}"

    return UpstreamRequest(url=url, method=spec.method, basic_auth=basic_auth(config))
