"""Worldweave MCP server, exposing world authoring and generation as tools for AI agents."""

from worldweave.mcp.server import mcp, run_server

__all__ = ["mcp", "run_server"]
