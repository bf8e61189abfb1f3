"""Document Management Tools.

This module contains MCP tools for managing documents inside a collection:
- read_document: Read the raw text of a document
- create_document: Create a new document (fails if it exists)
- update_document: Replace the content of an existing document
- delete_document: Delete an existing document
- move_document: Move or rename a document within its collection
- copy_document: Copy a document within its collection
"""

from mcp.server import FastMCP

from ..exceptions import TinaMCPError
from ..helpers import to_tool_error
from ..logger_config import log_mcp_call
from ..models import OperationStatus
from ..storage import DocumentStore


def register_document_tools(mcp_server: FastMCP, store: DocumentStore) -> None:
    """Register all document management tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    async def read_document(collection: str, relative_path: str) -> str:
        """Read a document from a collection ({RootPath}/content/{collection}/{relative_path}).

        Parameters:
            collection (str): Name of the collection (e.g., 'posts')
            relative_path (str): Path of the document within the collection
                (e.g., 'hello-world.md' or 'guides/setup.md')

        Returns:
            str: The full raw text of the document, frontmatter included.

        Raises an error if the document does not exist or the path is invalid.
        """
        try:
            return await store.read_document(collection, relative_path)
        except TinaMCPError as e:
            raise to_tool_error(e) from e

    @mcp_server.tool()
    @log_mcp_call
    async def create_document(collection: str, relative_path: str, content: str) -> OperationStatus:
        r"""Create a new document with the provided content in a collection.

        The document is written to {RootPath}/content/{collection}/{relative_path}.
        The collection directory is created if needed. Fails if the document
        already exists; use update_document to modify existing documents.

        Parameters:
            collection (str): Name of the collection (e.g., 'posts')
            relative_path (str): File name for the new document (e.g., 'new-post.md').
                Must not contain path separators (/ or \\)
            content (str): Full text content of the new document

        Returns:
            OperationStatus: Structured result object containing:
                - success (bool): True if the document was created
                - message (str): Human-readable description of the result
                - details (Dict[str, Any], optional): collection and relative_path
                - error (ErrorInfo, optional): error_type, error_code, message and
                  details when the operation failed

        Example Usage:
            ```json
            {
                "name": "create_document",
                "arguments": {
                    "collection": "posts",
                    "relative_path": "new-post.md",
                    "content": "---\ntitle: New Post\n---\n\nHello!"
                }
            }
            ```

        Example Error Response:
            ```json
            {
                "success": false,
                "message": "Document 'new-post.md' already exists in collection 'posts'. Use update_document to modify it.",
                "error": {"error_type": "DocumentExistsError", "error_code": "DOCUMENT_EXISTS", "...": "..."}
            }
            ```
        """
        try:
            message = await store.create_document(collection, relative_path, content)
        except TinaMCPError as e:
            return OperationStatus.failed(e)
        return OperationStatus.ok(message, collection=collection, relative_path=relative_path)

    @mcp_server.tool()
    @log_mcp_call
    async def update_document(collection: str, relative_path: str, content: str) -> OperationStatus:
        """Replace the full content of an existing document. Fails if it does not exist.

        Parameters:
            collection (str): Name of the collection
            relative_path (str): File name of the document inside the collection
            content (str): New full text content
        """
        try:
            message = await store.update_document(collection, relative_path, content)
        except TinaMCPError as e:
            return OperationStatus.failed(e)
        return OperationStatus.ok(message, collection=collection, relative_path=relative_path)

    @mcp_server.tool()
    @log_mcp_call
    async def delete_document(collection: str, relative_path: str) -> OperationStatus:
        """Delete an existing document. This cannot be undone."""
        try:
            message = await store.delete_document(collection, relative_path)
        except TinaMCPError as e:
            return OperationStatus.failed(e)
        return OperationStatus.ok(message, collection=collection, relative_path=relative_path)

    @mcp_server.tool()
    @log_mcp_call
    async def move_document(
        collection: str, old_relative_path: str, new_relative_path: str
    ) -> OperationStatus:
        """Move or rename a document within its collection.

        Both paths may include subdirectories; missing destination folders are
        created. Fails if the source is missing or the destination exists.

        Parameters:
            collection (str): Name of the collection
            old_relative_path (str): Current path of the document
            new_relative_path (str): Target path of the document
        """
        try:
            message = await store.move_document(collection, old_relative_path, new_relative_path)
        except TinaMCPError as e:
            return OperationStatus.failed(e)
        return OperationStatus.ok(
            message,
            collection=collection,
            old_relative_path=old_relative_path,
            new_relative_path=new_relative_path,
        )

    @mcp_server.tool()
    @log_mcp_call
    async def copy_document(
        collection: str, source_relative_path: str, dest_relative_path: str
    ) -> OperationStatus:
        """Copy a document within its collection, leaving the source untouched.

        Missing destination folders are created. Fails if the source is
        missing or the destination exists.
        """
        try:
            message = await store.copy_document(collection, source_relative_path, dest_relative_path)
        except TinaMCPError as e:
            return OperationStatus.failed(e)
        return OperationStatus.ok(
            message,
            collection=collection,
            source_relative_path=source_relative_path,
            dest_relative_path=dest_relative_path,
        )
