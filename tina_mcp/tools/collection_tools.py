"""Collection Discovery Tools.

This module contains MCP tools for browsing the content directory:
- list_collections: List collection directories under the content root
- list_documents: List documents of a collection, optionally recursively
"""

from mcp.server import FastMCP

from ..exceptions import TinaMCPError
from ..helpers import to_tool_error
from ..logger_config import log_mcp_call
from ..storage import DocumentStore


def register_collection_tools(mcp_server: FastMCP, store: DocumentStore) -> None:
    """Register collection discovery tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    async def list_collections() -> list[str]:
        """List collection directories within the content folder ({RootPath}/content/).

        Hidden directories (names starting with '.') are skipped.

        Returns:
            List[str]: Sorted collection names, e.g. ["pages", "posts"].
            Returns [] when the content directory does not exist yet.

        Example Usage:
            ```json
            {
                "name": "list_collections",
                "arguments": {}
            }
            ```
        """
        try:
            return await store.list_collections()
        except TinaMCPError as e:
            raise to_tool_error(e) from e

    @mcp_server.tool()
    @log_mcp_call
    async def list_documents(collection: str, recursive: bool = False) -> list[str]:
        """List documents within a collection directory ({RootPath}/content/{collection}).

        Parameters:
            collection (str): Name of the collection (e.g., 'posts')
            recursive (bool): Include documents in subdirectories. Nested
                documents are returned as forward-slash paths such as
                'guides/setup.md'.

        Returns:
            List[str]: Sorted document paths relative to the collection.
            Returns [] if the collection directory does not exist.
        """
        try:
            return await store.list_documents(collection, recursive=recursive)
        except TinaMCPError as e:
            raise to_tool_error(e) from e
