"""
Operation table for the Gigapipe query tools.

Each OperationSpec describes one MCP tool: which backend it talks to, the
upstream path (with optional {placeholders}) and the arguments it accepts.
The table is read once from manifest.toml and never mutated.
"""

import string
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from . import load_manifest


class Backend(str, Enum):
    METRICS = "metrics"
    LOGS = "logs"
    TRACES = "traces"


@dataclass(frozen=True)
class OperationSpec:
    """Static definition of a query tool."""

    name: str
    backend: Backend
    path_template: str
    description: str = ""
    required_args: tuple[str, ...] = ()
    optional_args: tuple[str, ...] = ()
    argument_descriptions: dict[str, str] = field(default_factory=dict, compare=False)
    method: str = "GET"

    @property
    def path_params(self) -> tuple[str, ...]:
        """Names of the {placeholders} in the path template, in order."""
        return tuple(
            name for _, name, _, _ in string.Formatter().parse(self.path_template) if name
        )

    @property
    def arguments(self) -> tuple[str, ...]:
        return self.required_args + self.optional_args

    @property
    def query_args(self) -> tuple[str, ...]:
        """Arguments sent as query parameters, in argument-table order."""
        path_params = set(self.path_params)
        return tuple(arg for arg in self.arguments if arg not in path_params)

    def input_schema(self) -> dict[str, Any]:
        """JSON schema for the tool arguments. All arguments are strings."""
        return {
            "type": "object",
            "properties": {
                arg: {
                    "type": "string",
                    "description": self.argument_descriptions.get(arg, ""),
                }
                for arg in self.arguments
            },
            "required": list(self.required_args),
        }


def _build_spec(name: str, entry: dict[str, Any], shared_descriptions: dict[str, str]) -> OperationSpec:
    try:
        backend = Backend(entry["backend"])
        path = entry["path"]
    except KeyError as e:
        raise ValueError(f"Tool {name!r} is missing manifest key {e}") from e
    except ValueError as e:
        raise ValueError(f"Tool {name!r} has unknown backend {entry['backend']!r}") from e

    required = tuple(entry.get("required", ()))
    optional = tuple(entry.get("optional", ()))
    descriptions = {**shared_descriptions, **entry.get("arguments", {})}

    spec = OperationSpec(
        name=name,
        backend=backend,
        path_template=path,
        description=entry.get("description", ""),
        required_args=required,
        optional_args=optional,
        argument_descriptions={arg: descriptions.get(arg, "") for arg in required + optional},
    )

    undeclared = [param for param in spec.path_params if param not in spec.required_args]
    if undeclared:
        raise ValueError(f"Tool {name!r}: path parameters {undeclared} must be required arguments")

    return spec


def load_operations(manifest_path: Path | str | None = None) -> dict[str, OperationSpec]:
    """Build the operation table from the tools manifest.

    Args:
        manifest_path: Optional path to a custom manifest.

    Returns:
        Mapping of tool name to OperationSpec, in manifest order.

    Raises:
        FileNotFoundError: If the manifest file doesn't exist.
        ValueError: If an entry is malformed.
    """
    manifest = load_manifest(manifest_path)
    shared = manifest["arguments"]
    return {
        name: _build_spec(name, entry, shared)
        for name, entry in manifest["tools"].items()
    }


OPERATIONS: dict[str, OperationSpec] = load_operations()
