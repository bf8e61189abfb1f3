"""Sandbox validation for collection names and document paths.

Every path handed to the store is checked here before the filesystem is
touched. Resolution is purely lexical: the joined path is normalized and must
keep the content root as a genuine path prefix, so a sibling directory such as
``content-backup`` never counts as inside ``content``.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from ..exceptions import ValidationError
from ..logger_config import ErrorCategory
from ..logger_config import log_structured_error

logger = logging.getLogger(__name__)

PATH_SEPARATORS = ("/", "\\")
_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:")


def _segments(relative_path: str) -> list[str]:
    return re.split(r"[\\/]", relative_path)


def _is_absolute(relative_path: str) -> bool:
    return (
        relative_path.startswith(PATH_SEPARATORS)
        or bool(_DRIVE_PREFIX.match(relative_path))
        or os.path.isabs(relative_path)
    )


def is_within(root: str | Path, candidate: str | Path, strict: bool = False) -> bool:
    """Return True when ``candidate`` equals ``root`` or lies beneath it.

    Both arguments must already be normalized absolute paths. With ``strict``
    the root itself does not count.
    """
    root_str = str(root).rstrip(os.sep) or os.sep
    candidate_str = str(candidate)
    if candidate_str == root_str:
        return not strict
    prefix = root_str if root_str.endswith(os.sep) else root_str + os.sep
    return candidate_str.startswith(prefix)


class PathGuard:
    """Resolve collection and document paths inside a fixed content root."""

    def __init__(self, content_root: str | Path):
        self._root = Path(os.path.normpath(os.path.abspath(content_root)))

    @property
    def content_root(self) -> Path:
        return self._root

    def _reject(self, message: str, field: str, value: str, operation: str | None) -> ValidationError:
        log_structured_error(
            category=ErrorCategory.WARNING,
            message=message,
            context={"field": field, "invalid_value": value},
            operation=operation,
        )
        return ValidationError(message, field=field, value=value, operation=operation)

    def resolve_collection_path(self, collection: str, operation: str | None = None) -> Path:
        """Validate a collection name and return ``<content_root>/<collection>``.

        Raises:
            ValidationError: If the name is empty, contains a path separator,
                is a relative directory reference or resolves outside the root.
        """
        if not isinstance(collection, str) or not collection.strip():
            raise self._reject("Collection name must not be empty.", "collection", str(collection), operation)
        if any(sep in collection for sep in PATH_SEPARATORS) or "\x00" in collection:
            raise self._reject(
                "Invalid collection name provided (contains path separators).",
                "collection",
                collection,
                operation,
            )
        if collection in (".", ".."):
            raise self._reject(
                "Invalid collection name provided (path traversal).", "collection", collection, operation
            )

        collection_path = Path(os.path.normpath(self._root / collection))
        if not is_within(self._root, collection_path, strict=True):
            logger.warning("Collection path escapes content root: %s", collection_path)
            raise self._reject(
                "Calculated collection path is outside the allowed content directory.",
                "collection",
                collection,
                operation,
            )
        return collection_path

    def resolve_document_path(
        self,
        collection_path: Path,
        relative_path: str,
        allow_subdirectories: bool = False,
        field: str = "relative_path",
        operation: str | None = None,
    ) -> Path:
        """Validate a document path relative to a resolved collection path.

        Args:
            collection_path: Value returned by ``resolve_collection_path``
            relative_path: Path of the document inside the collection
            allow_subdirectories: Whether ``relative_path`` may contain separators
            field: Argument name reported in validation errors
            operation: Operation name reported in validation errors

        Returns:
            Normalized absolute path of the document. No filesystem access occurs.

        Raises:
            ValidationError: If the path is empty, absolute, contains a ``..``
                segment, has disallowed separators or escapes the content root.
        """
        if not isinstance(relative_path, str) or not relative_path.strip():
            raise self._reject(f"Invalid {field} provided (empty path).", field, str(relative_path), operation)
        if "\x00" in relative_path:
            raise self._reject(f"Invalid {field} provided (contains a null byte).", field, relative_path, operation)
        if _is_absolute(relative_path):
            raise self._reject(f"Invalid {field} provided (absolute paths are not allowed).", field, relative_path, operation)
        if ".." in _segments(relative_path):
            raise self._reject(f"Invalid {field} provided (path traversal).", field, relative_path, operation)
        if not allow_subdirectories and any(sep in relative_path for sep in PATH_SEPARATORS):
            raise self._reject(
                f"Invalid {field} provided (subdirectories are not allowed for this operation).",
                field,
                relative_path,
                operation,
            )

        full_path = Path(os.path.normpath(Path(collection_path) / relative_path))
        if not is_within(collection_path, full_path, strict=True) or not is_within(
            self._root, full_path, strict=True
        ):
            logger.warning("Document path escapes content root: %s", full_path)
            raise self._reject(
                f"Calculated path for {field} is outside the allowed content directory.",
                field,
                relative_path,
                operation,
            )
        return full_path
