"""Metadata Management Tools.

This module contains MCP tools for a document's YAML frontmatter:
- get_document_metadata: Read the frontmatter as a JSON object
- update_document_metadata: Merge top-level fields into the frontmatter
"""

from mcp.server import FastMCP

from ..exceptions import TinaMCPError
from ..helpers import metadata_to_json
from ..helpers import to_tool_error
from ..logger_config import log_mcp_call
from ..models import OperationStatus
from ..storage import DocumentStore


def register_metadata_tools(mcp_server: FastMCP, store: DocumentStore) -> None:
    """Register all metadata management tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    async def get_document_metadata(collection: str, relative_path: str) -> str:
        """Read the YAML frontmatter of a document as a JSON object.

        WHAT: Extract the metadata block delimited by '---' lines at the top of a document.
        WHEN: Use to inspect fields such as title, date or draft before editing.
        RETURNS: JSON object text; "{}" when the document has no frontmatter.

        Parameters:
            collection: Name of the collection (e.g., 'posts')
            relative_path: Path of the document, subdirectories allowed

        Example Response:
            {"title": "Hello World", "draft": true, "tags": ["news"]}
        """
        try:
            metadata = await store.get_metadata(collection, relative_path)
        except TinaMCPError as e:
            raise to_tool_error(e) from e
        return metadata_to_json(metadata)

    @mcp_server.tool()
    @log_mcp_call
    async def update_document_metadata(
        collection: str, relative_path: str, metadata_updates_json: str
    ) -> OperationStatus:
        """Update the YAML frontmatter of a document using a JSON object of changes.

        WHAT: Add or overwrite top-level frontmatter fields; other fields are kept.
        WHEN: Use to change fields like title or draft without rewriting the body.
        RETURNS: Confirmation of the update.

        Nested objects replace the existing value wholesale. A null value sets
        the field to null rather than removing it. The document body is kept
        exactly as it was.

        Parameters:
            collection: Name of the collection (e.g., 'posts')
            relative_path: Path of the document, subdirectories allowed
            metadata_updates_json: JSON object, e.g. {"draft": false, "title": "New Title"}
        """
        try:
            message = await store.update_metadata(collection, relative_path, metadata_updates_json)
        except TinaMCPError as e:
            return OperationStatus.failed(e)
        return OperationStatus.ok(message, collection=collection, relative_path=relative_path)
