"""Clean client interface for Tina Content MCP tools.

Calls registered tool functions of a server directly, so tests and scripts
can exercise the tool surface without an MCP transport.

All methods correspond directly to registered MCP tools.
"""

from __future__ import annotations

from mcp.server import FastMCP

from .models import OperationStatus


class ToolClient:
    """Direct-call wrapper around the tools of one ``FastMCP`` server."""

    def __init__(self, mcp_server: FastMCP):
        self._server = mcp_server

    def _get_mcp_tool(self, tool_name: str):
        """Get a registered MCP tool function by name."""
        tool = self._server._tool_manager.get_tool(tool_name)
        if tool is None or not hasattr(tool, "fn"):
            raise RuntimeError(f"MCP tool '{tool_name}' not found or not properly registered")
        return tool.fn

    # Collection tools
    async def list_collections(self) -> list[str]:
        return await self._get_mcp_tool("list_collections")()

    async def list_documents(self, collection: str, recursive: bool = False) -> list[str]:
        return await self._get_mcp_tool("list_documents")(collection, recursive)

    # Document tools
    async def read_document(self, collection: str, relative_path: str) -> str:
        return await self._get_mcp_tool("read_document")(collection, relative_path)

    async def create_document(self, collection: str, relative_path: str, content: str) -> OperationStatus:
        return await self._get_mcp_tool("create_document")(collection, relative_path, content)

    async def update_document(self, collection: str, relative_path: str, content: str) -> OperationStatus:
        return await self._get_mcp_tool("update_document")(collection, relative_path, content)

    async def delete_document(self, collection: str, relative_path: str) -> OperationStatus:
        return await self._get_mcp_tool("delete_document")(collection, relative_path)

    async def move_document(self, collection: str, old_relative_path: str, new_relative_path: str) -> OperationStatus:
        return await self._get_mcp_tool("move_document")(collection, old_relative_path, new_relative_path)

    async def copy_document(
        self, collection: str, source_relative_path: str, dest_relative_path: str
    ) -> OperationStatus:
        return await self._get_mcp_tool("copy_document")(collection, source_relative_path, dest_relative_path)

    # Metadata tools
    async def get_document_metadata(self, collection: str, relative_path: str) -> str:
        return await self._get_mcp_tool("get_document_metadata")(collection, relative_path)

    async def update_document_metadata(
        self, collection: str, relative_path: str, metadata_updates_json: str
    ) -> OperationStatus:
        return await self._get_mcp_tool("update_document_metadata")(
            collection, relative_path, metadata_updates_json
        )

    # Schema tools
    async def read_schema(self, collection: str | None = None) -> str:
        return await self._get_mcp_tool("read_schema")(collection)
