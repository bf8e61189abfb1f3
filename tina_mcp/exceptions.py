"""Exception hierarchy for the Tina Content MCP system.

Every failure raised by the store carries a stable ``error_code``, a
``details`` dict with the operation context (operation, collection, path)
and a ``user_message`` suitable for returning to an MCP client.
"""

from __future__ import annotations

from typing import Any


class TinaMCPError(Exception):
    """Base exception for all Tina Content MCP errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        user_message: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "UNKNOWN_ERROR"
        self.details = details or {}
        self.user_message = user_message or message

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary for structured responses."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
        }


def _context(operation: str | None, collection: str | None, path: str | None) -> dict[str, Any]:
    details: dict[str, Any] = {}
    if operation is not None:
        details["operation"] = operation
    if collection is not None:
        details["collection"] = collection
    if path is not None:
        details["path"] = path
    return details


class ConfigurationError(TinaMCPError):
    """Raised when the project root is unset or is not a directory."""

    def __init__(self, message: str, setting: str | None = None, operation: str | None = None):
        details = _context(operation, None, None)
        if setting:
            details["setting"] = setting
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details,
            user_message=f"Server configuration error: {message}",
        )


class ValidationError(TinaMCPError):
    """Raised when a collection name, path or update payload is rejected."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        error_details = _context(operation, None, None)
        if field:
            error_details["field"] = field
        if value is not None:
            error_details["invalid_value"] = str(value)
        if details:
            error_details.update(details)
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=error_details,
            user_message=message,
        )


class DocumentNotFoundError(TinaMCPError):
    """Raised when a document required by an operation does not exist."""

    def __init__(self, collection: str, relative_path: str, operation: str | None = None):
        super().__init__(
            message=f"Document '{relative_path}' not found in collection '{collection}'.",
            error_code="DOCUMENT_NOT_FOUND",
            details=_context(operation, collection, relative_path),
            user_message=f"Document '{relative_path}' does not exist in collection '{collection}'.",
        )
        self.collection = collection
        self.relative_path = relative_path


class DocumentExistsError(TinaMCPError):
    """Raised when the target of a create, move or copy is already present."""

    def __init__(self, collection: str, relative_path: str, operation: str | None = None):
        super().__init__(
            message=f"Document '{relative_path}' already exists in collection '{collection}'.",
            error_code="DOCUMENT_EXISTS",
            details=_context(operation, collection, relative_path),
            user_message=(
                f"Document '{relative_path}' already exists in collection '{collection}'. "
                "Use update_document to modify it."
            ),
        )
        self.collection = collection
        self.relative_path = relative_path


class SchemaNotFoundError(TinaMCPError):
    """Raised when the schema descriptor file is missing."""

    def __init__(self, schema_path: str):
        super().__init__(
            message=f"Schema file not found: {schema_path}",
            error_code="SCHEMA_NOT_FOUND",
            details={"operation": "read_schema", "file_path": schema_path},
            user_message="Schema file (expected at .tina/schema.json) not found. Ensure the schema has been generated.",
        )


class FrontmatterFormatError(TinaMCPError):
    """Raised when an existing frontmatter block cannot be parsed."""

    def __init__(
        self,
        reason: str,
        collection: str | None = None,
        relative_path: str | None = None,
        operation: str | None = None,
    ):
        details = _context(operation, collection, relative_path)
        details["failure_reason"] = reason
        super().__init__(
            message=f"Failed to parse YAML frontmatter: {reason}",
            error_code="FRONTMATTER_FORMAT_ERROR",
            details=details,
            user_message="The document's frontmatter block is not valid YAML.",
        )


class FileSystemError(TinaMCPError):
    """Raised for filesystem failures not covered by the other errors."""

    def __init__(
        self,
        operation: str,
        file_path: str,
        reason: str,
        collection: str | None = None,
    ):
        details = _context(operation, collection, None)
        details["file_path"] = file_path
        details["failure_reason"] = reason
        super().__init__(
            message=f"File system operation '{operation}' failed for '{file_path}': {reason}",
            error_code="FILE_SYSTEM_ERROR",
            details=details,
            user_message=f"File operation failed: {reason}",
        )
