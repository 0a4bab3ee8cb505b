"""Gigapipe query MCP server (Prometheus, Loki and Tempo APIs)."""
