"""Storage layer for the Tina Content MCP server.

Provides the sandboxed document store over ``<project_root>/content`` and
read access to the schema descriptor.

Usage:
    from tina_mcp.config import Settings
    from tina_mcp.storage import DocumentStore

    store = DocumentStore(Settings(project_root="/path/to/site"))
    content = await store.read_document("posts", "hello-world.md")
"""

from .document_store import DocumentStore
from .path_guard import PathGuard
from .schema import SchemaAccessor

__all__ = ["DocumentStore", "PathGuard", "SchemaAccessor"]
