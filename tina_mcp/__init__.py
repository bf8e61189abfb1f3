"""Tina Content MCP: sandboxed MCP tools for TinaCMS content documents."""

__version__ = "0.1.0"
