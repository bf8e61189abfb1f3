"""Tool category modules for the Tina Content MCP server.

This package contains MCP tools organized by functional categories:
- collection_tools: Collection discovery (list_collections, list_documents)
- document_tools: Document CRUD plus move and copy
- metadata_tools: Frontmatter read and merge-update
- schema_tools: Schema descriptor access (read_schema)
"""

from .collection_tools import register_collection_tools
from .document_tools import register_document_tools
from .metadata_tools import register_metadata_tools
from .schema_tools import register_schema_tools

__all__ = [
    "register_collection_tools",
    "register_document_tools",
    "register_metadata_tools",
    "register_schema_tools",
]
