"""Sandboxed document store over the TinaCMS content directory.

Documents live at ``<project_root>/content/<collection>/<relative_path>``.
Every argument passes through ``PathGuard`` before the filesystem is touched,
and every failure is raised as a ``TinaMCPError`` subclass carrying the
operation, collection and path.

Operations are independent and hold no state beyond the content root. The
filesystem is the only shared resource: ``update_metadata`` is an unisolated
read-modify-write, so concurrent writers to one document can lose updates and
callers must serialize conflicting operations themselves. Writes replace the
whole file in one call but are not atomic renames.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterator
from collections.abc import Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from ..config import Settings
from ..exceptions import ConfigurationError
from ..exceptions import DocumentExistsError
from ..exceptions import DocumentNotFoundError
from ..exceptions import FileSystemError
from ..exceptions import FrontmatterFormatError
from ..exceptions import ValidationError
from ..logger_config import ErrorCategory
from ..logger_config import log_structured_error
from ..utils.conversion import convert_value
from ..utils.conversion import parse_updates
from ..utils.frontmatter import merge_frontmatter
from ..utils.frontmatter import parse_frontmatter
from ..utils.frontmatter import render_frontmatter
from .path_guard import PathGuard

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    """Read a file as UTF-8 without newline translation.

    Raises:
        UnicodeDecodeError: If the file is not UTF-8 text.
    """
    with open(path, "rb") as f:
        return f.read().decode("utf-8")


def encode_text(content: str, field: str, operation: str) -> bytes:
    """Encode content as UTF-8 before any file is opened for writing."""
    try:
        return content.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValidationError(
            f"Invalid {field} provided (not encodable as UTF-8).",
            field=field,
            operation=operation,
            details={"failure_reason": str(e)},
        ) from e


def write_bytes(path: Path, data: bytes, exclusive: bool = False) -> None:
    """Write the full content of a file in one call."""
    with open(path, "xb" if exclusive else "wb") as f:
        f.write(data)


@contextmanager
def _filesystem_errors(operation: str, path: Path, collection: str | None = None) -> Iterator[None]:
    try:
        yield
    except UnicodeDecodeError as e:
        log_structured_error(
            category=ErrorCategory.ERROR,
            message=f"Undecodable file during {operation}",
            exception=e,
            context={"collection": collection, "file_path": str(path)},
            operation=operation,
        )
        raise FileSystemError(operation, str(path), "file is not valid UTF-8 text", collection=collection) from e
    except OSError as e:
        log_structured_error(
            category=ErrorCategory.ERROR,
            message=f"File system error during {operation}",
            exception=e,
            context={"collection": collection, "file_path": str(path)},
            operation=operation,
        )
        raise FileSystemError(operation, str(path), e.strerror or str(e), collection=collection) from e


class DocumentStore:
    """CRUD, move, copy and frontmatter operations on collection documents.

    Args:
        settings: Explicit configuration; the project root must be set and
            must be an existing directory.
    """

    def __init__(self, settings: Settings):
        self._configuration_error: str | None = None
        self._guard: PathGuard | None = None

        project_root = settings.project_root_path
        if project_root is None:
            self._configuration_error = "Project root is not configured (set TINA_PROJECT_ROOT)."
            logger.error("%s Tools will not function.", self._configuration_error)
            return
        if not project_root.is_dir():
            self._configuration_error = f"Configured project root does not exist: {project_root}"
            logger.error("%s Tools will not function.", self._configuration_error)
            return

        self._guard = PathGuard(settings.content_root_path)
        logger.info("Assuming TinaCMS content root is: %s", self._guard.content_root)
        if not self._guard.content_root.is_dir():
            logger.warning(
                "Assumed content directory does not exist: %s. It will be created on first write.",
                self._guard.content_root,
            )

    @property
    def content_root(self) -> Path | None:
        return self._guard.content_root if self._guard else None

    def _require_guard(self, operation: str) -> PathGuard:
        if self._guard is None:
            raise ConfigurationError(
                self._configuration_error or "Project root is not configured.",
                setting="project_root",
                operation=operation,
            )
        return self._guard

    def _resolve(
        self,
        operation: str,
        collection: str,
        relative_path: str,
        allow_subdirectories: bool,
        field: str = "relative_path",
    ) -> tuple[Path, Path]:
        guard = self._require_guard(operation)
        collection_path = guard.resolve_collection_path(collection, operation=operation)
        full_path = guard.resolve_document_path(
            collection_path,
            relative_path,
            allow_subdirectories=allow_subdirectories,
            field=field,
            operation=operation,
        )
        return collection_path, full_path

    def _not_found(self, operation: str, collection: str, relative_path: str, full_path: Path):
        log_structured_error(
            category=ErrorCategory.WARNING,
            message="Document not found",
            context={"collection": collection, "document_path": relative_path, "file_path": str(full_path)},
            operation=operation,
        )
        return DocumentNotFoundError(collection, relative_path, operation=operation)

    def _exists(self, operation: str, collection: str, relative_path: str, full_path: Path):
        log_structured_error(
            category=ErrorCategory.WARNING,
            message="Document already exists",
            context={"collection": collection, "document_path": relative_path, "file_path": str(full_path)},
            operation=operation,
        )
        return DocumentExistsError(collection, relative_path, operation=operation)

    # === Listing ===

    async def list_collections(self) -> list[str]:
        """List the non-hidden top-level directories of the content root."""
        guard = self._require_guard("list_collections")
        content_root = guard.content_root
        if not content_root.is_dir():
            logger.warning("Content directory does not exist: %s. Returning empty list.", content_root)
            return []

        with _filesystem_errors("list_collections", content_root):
            collections = sorted(
                entry.name
                for entry in content_root.iterdir()
                if entry.is_dir() and not entry.name.startswith(".")
            )
        logger.info("Found %d collections: %s", len(collections), ", ".join(collections))
        return collections

    async def list_documents(self, collection: str, recursive: bool = False) -> list[str]:
        """List the files of a collection.

        Non-recursive listings return file names directly inside the
        collection; recursive listings return every file below it as a
        forward-slash relative path.
        """
        guard = self._require_guard("list_documents")
        collection_path = guard.resolve_collection_path(collection, operation="list_documents")
        if not collection_path.is_dir():
            logger.warning("Collection directory not found: %s", collection_path)
            return []

        with _filesystem_errors("list_documents", collection_path, collection):
            if recursive:
                documents = sorted(
                    path.relative_to(collection_path).as_posix()
                    for path in collection_path.rglob("*")
                    if path.is_file()
                )
            else:
                documents = sorted(path.name for path in collection_path.iterdir() if path.is_file())
        logger.info("Found %d documents in collection '%s'", len(documents), collection)
        return documents

    # === Document Operations ===

    async def read_document(self, collection: str, relative_path: str) -> str:
        """Return the full raw text of a document."""
        _, full_path = self._resolve("read_document", collection, relative_path, allow_subdirectories=True)
        if not full_path.is_file():
            raise self._not_found("read_document", collection, relative_path, full_path)

        with _filesystem_errors("read_document", full_path, collection):
            content = read_text(full_path)
        logger.info("Successfully read document: %s", full_path)
        return content

    async def create_document(self, collection: str, relative_path: str, content: str) -> str:
        """Create a new document directly inside the collection."""
        collection_path, full_path = self._resolve(
            "create_document", collection, relative_path, allow_subdirectories=False
        )
        if full_path.exists():
            raise self._exists("create_document", collection, relative_path, full_path)

        data = encode_text(content, "content", "create_document")
        with _filesystem_errors("create_document", full_path, collection):
            collection_path.mkdir(parents=True, exist_ok=True)
            try:
                write_bytes(full_path, data, exclusive=True)
            except FileExistsError:
                raise self._exists("create_document", collection, relative_path, full_path) from None
        logger.info("Successfully created document: %s", full_path)
        return f"Document '{relative_path}' created successfully in collection '{collection}'."

    async def update_document(self, collection: str, relative_path: str, content: str) -> str:
        """Replace the full content of an existing document."""
        _, full_path = self._resolve("update_document", collection, relative_path, allow_subdirectories=False)
        if not full_path.is_file():
            raise self._not_found("update_document", collection, relative_path, full_path)

        data = encode_text(content, "content", "update_document")
        with _filesystem_errors("update_document", full_path, collection):
            write_bytes(full_path, data)
        logger.info("Successfully updated document: %s", full_path)
        return f"Document '{relative_path}' updated successfully in collection '{collection}'."

    async def delete_document(self, collection: str, relative_path: str) -> str:
        """Remove an existing document."""
        _, full_path = self._resolve("delete_document", collection, relative_path, allow_subdirectories=False)
        if not full_path.is_file():
            raise self._not_found("delete_document", collection, relative_path, full_path)

        with _filesystem_errors("delete_document", full_path, collection):
            full_path.unlink()
        logger.info("Successfully deleted document: %s", full_path)
        return f"Document '{relative_path}' deleted successfully from collection '{collection}'."

    async def move_document(self, collection: str, old_relative_path: str, new_relative_path: str) -> str:
        """Move a document within its collection, creating destination folders."""
        _, source = self._resolve(
            "move_document", collection, old_relative_path, allow_subdirectories=True, field="old_relative_path"
        )
        _, destination = self._resolve(
            "move_document", collection, new_relative_path, allow_subdirectories=True, field="new_relative_path"
        )
        if not source.is_file():
            raise self._not_found("move_document", collection, old_relative_path, source)
        if destination.exists():
            raise self._exists("move_document", collection, new_relative_path, destination)

        with _filesystem_errors("move_document", source, collection):
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(os.fspath(source), os.fspath(destination))
        logger.info("Successfully moved document: %s -> %s", source, destination)
        return (
            f"Document '{old_relative_path}' moved successfully to '{new_relative_path}' "
            f"in collection '{collection}'."
        )

    async def copy_document(self, collection: str, source_relative_path: str, dest_relative_path: str) -> str:
        """Copy a document within its collection, leaving the source untouched."""
        _, source = self._resolve(
            "copy_document", collection, source_relative_path, allow_subdirectories=True, field="source_relative_path"
        )
        _, destination = self._resolve(
            "copy_document", collection, dest_relative_path, allow_subdirectories=True, field="dest_relative_path"
        )
        if not source.is_file():
            raise self._not_found("copy_document", collection, source_relative_path, source)
        if destination.exists():
            raise self._exists("copy_document", collection, dest_relative_path, destination)

        with _filesystem_errors("copy_document", source, collection):
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, destination)
        logger.info("Successfully copied document: %s -> %s", source, destination)
        return (
            f"Document '{source_relative_path}' copied successfully to '{dest_relative_path}' "
            f"in collection '{collection}'."
        )

    # === Metadata Operations ===

    def _parse(self, operation: str, collection: str, relative_path: str, content: str) -> tuple[dict[str, Any], str]:
        try:
            return parse_frontmatter(content)
        except FrontmatterFormatError as e:
            e.details.update({"operation": operation, "collection": collection, "path": relative_path})
            log_structured_error(
                category=ErrorCategory.ERROR,
                message="Failed to parse YAML frontmatter",
                exception=e,
                context={"collection": collection, "document_path": relative_path},
                operation=operation,
            )
            raise

    async def get_metadata(self, collection: str, relative_path: str) -> dict[str, Any]:
        """Return the document's frontmatter, or an empty dict when it has none."""
        _, full_path = self._resolve("get_metadata", collection, relative_path, allow_subdirectories=True)
        if not full_path.is_file():
            raise self._not_found("get_metadata", collection, relative_path, full_path)

        with _filesystem_errors("get_metadata", full_path, collection):
            content = read_text(full_path)
        metadata, _ = self._parse("get_metadata", collection, relative_path, content)
        if not metadata:
            logger.info("No YAML frontmatter found in %s", full_path)
        return metadata

    async def update_metadata(
        self, collection: str, relative_path: str, updates: Mapping[str, Any] | str
    ) -> str:
        """Merge top-level updates into the document's frontmatter.

        Args:
            collection: Collection name
            relative_path: Document path inside the collection
            updates: JSON object text or an already decoded mapping; every
                value replaces (or adds) that key, other keys are kept.
        """
        _, full_path = self._resolve("update_metadata", collection, relative_path, allow_subdirectories=True)
        if isinstance(updates, str):
            converted = parse_updates(updates)
        else:
            converted = {str(key): convert_value(value) for key, value in updates.items()}
        if not full_path.is_file():
            raise self._not_found("update_metadata", collection, relative_path, full_path)

        with _filesystem_errors("update_metadata", full_path, collection):
            original = read_text(full_path)
        existing, body = self._parse("update_metadata", collection, relative_path, original)
        merged = merge_frontmatter(existing, converted)
        if not merged and body == original:
            # no block before and none needed: the document stays byte-identical
            logger.info("No metadata to write for document: %s", full_path)
        else:
            data = encode_text(render_frontmatter(merged, body), "metadata_updates_json", "update_metadata")
            with _filesystem_errors("update_metadata", full_path, collection):
                write_bytes(full_path, data)
            logger.info("Successfully updated metadata for document: %s", full_path)
        return f"Metadata updated successfully for document '{relative_path}' in collection '{collection}'."
