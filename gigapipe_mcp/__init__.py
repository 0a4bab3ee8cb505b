"""
Gigapipe MCP Tools - query metrics, logs and traces from a Gigapipe host.

This package exposes the Prometheus, Loki and Tempo query APIs of a Gigapipe
deployment as MCP (Model Context Protocol) tools for AI agents.

Tools are defined in manifest.toml; each entry maps a tool name to the
upstream path and the arguments it accepts.
"""

import tomllib
from pathlib import Path
from typing import Any


__version__ = "1.0.0"

# Path to the manifest file
MANIFEST_PATH = Path(__file__).parent / "manifest.toml"


def load_manifest(manifest_path: Path | str | None = None) -> dict[str, Any]:
    """Load the tools manifest from a TOML file.

    Args:
        manifest_path: Path to manifest.toml. If None, uses the default bundled manifest.

    Returns:
        Dictionary containing the manifest data with 'tools' and 'arguments' keys.

    Raises:
        FileNotFoundError: If the manifest file doesn't exist.
        ValueError: If the manifest file is invalid.
    """
    path = Path(manifest_path) if manifest_path else MANIFEST_PATH

    if not path.exists():
        raise FileNotFoundError(f"Tools manifest not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Failed to parse manifest {path}: {e}") from e

    data.setdefault("tools", {})
    data.setdefault("arguments", {})

    return data


def list_tools(manifest_path: Path | str | None = None) -> list[dict[str, Any]]:
    """List all available tools from the manifest.

    Args:
        manifest_path: Optional path to custom manifest.

    Returns:
        List of tool info dictionaries with 'name', 'description', 'backend' keys.
    """
    manifest = load_manifest(manifest_path)
    tools = []

    for name, config in manifest["tools"].items():
        tools.append({
            "name": name,
            "description": config.get("description", "No description"),
            "backend": config.get("backend", "unknown"),
        })

    return tools


__all__ = [
    "load_manifest",
    "list_tools",
    "MANIFEST_PATH",
    "__version__",
]
