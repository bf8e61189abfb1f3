"""Utility modules for the Tina Content MCP server.

This package contains shared helpers:
- frontmatter.py: YAML frontmatter splitting, parsing and rendering
- conversion.py: JSON update payload conversion into frontmatter values
"""
