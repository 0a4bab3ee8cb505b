"""
CLI-based MCP servers for the Gigapipe tools.

Each subdirectory contains a standalone MCP server that can be run via:
    python -m gigapipe_mcp.cli.<server_name>

These servers communicate via stdio and implement the MCP protocol.
"""
