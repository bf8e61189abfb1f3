"""Shared helpers for the tool modules."""

from __future__ import annotations

import datetime
import json
from typing import Any

from mcp.server.fastmcp.exceptions import ToolError

from .exceptions import TinaMCPError


def to_tool_error(error: TinaMCPError) -> ToolError:
    """Wrap a classified failure so the MCP client receives its code and context."""
    return ToolError(json.dumps(error.to_dict(), default=str))


def _json_default(value: Any) -> Any:
    # YAML turns unquoted dates and timestamps into date objects
    if isinstance(value, (datetime.date, datetime.datetime, datetime.time)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def metadata_to_json(metadata: dict[str, Any]) -> str:
    """Serialize a frontmatter mapping as JSON object text."""
    return json.dumps(metadata, default=_json_default, ensure_ascii=False)
