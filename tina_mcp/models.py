"""Pydantic models returned by the Tina Content MCP tools."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from .exceptions import TinaMCPError


class ErrorInfo(BaseModel):
    """Classified failure attached to an unsuccessful operation."""

    error_type: str  # e.g. "DocumentNotFoundError"
    error_code: str  # e.g. "DOCUMENT_NOT_FOUND"
    message: str
    details: dict[str, Any] = {}

    @classmethod
    def from_exception(cls, error: TinaMCPError) -> ErrorInfo:
        return cls(
            error_type=type(error).__name__,
            error_code=error.error_code,
            message=error.user_message,
            details=error.details,
        )


class OperationStatus(BaseModel):
    """Generic status for write operations."""

    success: bool
    message: str
    details: dict[str, Any] | None = None  # e.g. collection and path of the document
    error: ErrorInfo | None = None

    @classmethod
    def ok(cls, message: str, **details: Any) -> OperationStatus:
        return cls(success=True, message=message, details=details or None)

    @classmethod
    def failed(cls, error: TinaMCPError) -> OperationStatus:
        return cls(success=False, message=error.user_message, error=ErrorInfo.from_exception(error))
