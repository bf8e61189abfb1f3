"""Unit tests for collection and document path validation."""

import os
from pathlib import Path

import pytest

from tina_mcp.exceptions import ValidationError
from tina_mcp.storage.path_guard import PathGuard
from tina_mcp.storage.path_guard import is_within


@pytest.fixture
def guard(tmp_path: Path) -> PathGuard:
    return PathGuard(tmp_path / "content")


class TestIsWithin:
    """Tests for the path-prefix containment check."""

    def test_descendant_is_within(self):
        assert is_within("/site/content", "/site/content/posts/a.md")

    def test_root_itself_is_within_unless_strict(self):
        assert is_within("/site/content", "/site/content")
        assert not is_within("/site/content", "/site/content", strict=True)

    def test_sibling_with_shared_prefix_is_outside(self):
        assert not is_within("/site/content", "/site/content-backup")
        assert not is_within("/site/content", "/site/content-backup/posts/a.md")

    def test_parent_is_outside(self):
        assert not is_within("/site/content", "/site")


class TestResolveCollectionPath:
    """Tests for collection name validation."""

    def test_valid_collection(self, guard: PathGuard):
        assert guard.resolve_collection_path("posts") == guard.content_root / "posts"

    @pytest.mark.parametrize("name", ["", "   ", "posts/drafts", "posts\\drafts", "..", ".", "/etc"])
    def test_invalid_collection_rejected(self, guard: PathGuard, name: str):
        with pytest.raises(ValidationError) as exc_info:
            guard.resolve_collection_path(name, operation="list_documents")

        assert exc_info.value.details["field"] == "collection"
        assert exc_info.value.details["operation"] == "list_documents"

    def test_dotted_name_without_traversal_allowed(self, guard: PathGuard):
        assert guard.resolve_collection_path("v1..2").name == "v1..2"

    def test_hidden_style_name_allowed(self, guard: PathGuard):
        assert guard.resolve_collection_path(".drafts").name == ".drafts"

    def test_content_root_is_normalized(self, tmp_path: Path):
        guard = PathGuard(tmp_path / "content" / "." / "sub" / "..")
        assert guard.content_root == Path(os.path.normpath(tmp_path / "content"))


class TestResolveDocumentPath:
    """Tests for document path validation."""

    def test_flat_document(self, guard: PathGuard):
        collection_path = guard.resolve_collection_path("posts")
        result = guard.resolve_document_path(collection_path, "hello.md")
        assert result == collection_path / "hello.md"

    def test_subdirectory_rejected_by_default(self, guard: PathGuard):
        collection_path = guard.resolve_collection_path("posts")
        with pytest.raises(ValidationError, match="subdirectories"):
            guard.resolve_document_path(collection_path, "2024/hello.md")

    def test_backslash_rejected_by_default(self, guard: PathGuard):
        collection_path = guard.resolve_collection_path("posts")
        with pytest.raises(ValidationError):
            guard.resolve_document_path(collection_path, "2024\\hello.md")

    def test_subdirectory_allowed_when_requested(self, guard: PathGuard):
        collection_path = guard.resolve_collection_path("posts")
        result = guard.resolve_document_path(collection_path, "2024/hello.md", allow_subdirectories=True)
        assert result == collection_path / "2024" / "hello.md"

    @pytest.mark.parametrize(
        "relative_path",
        ["../other/a.md", "sub/../../a.md", "..", "sub\\..\\..\\a.md", "a/.."],
    )
    def test_traversal_rejected(self, guard: PathGuard, relative_path: str):
        collection_path = guard.resolve_collection_path("posts")
        with pytest.raises(ValidationError):
            guard.resolve_document_path(collection_path, relative_path, allow_subdirectories=True)

    @pytest.mark.parametrize("relative_path", ["/etc/passwd", "\\windows\\win.ini", "C:\\secret.md", "c:/secret.md"])
    def test_absolute_paths_rejected(self, guard: PathGuard, relative_path: str):
        collection_path = guard.resolve_collection_path("posts")
        with pytest.raises(ValidationError, match="absolute"):
            guard.resolve_document_path(collection_path, relative_path, allow_subdirectories=True)

    @pytest.mark.parametrize("relative_path", ["", "  ", ".", "./"])
    def test_paths_not_naming_a_document_rejected(self, guard: PathGuard, relative_path: str):
        collection_path = guard.resolve_collection_path("posts")
        with pytest.raises(ValidationError):
            guard.resolve_document_path(collection_path, relative_path, allow_subdirectories=True)

    def test_dots_inside_file_name_allowed(self, guard: PathGuard):
        collection_path = guard.resolve_collection_path("posts")
        result = guard.resolve_document_path(collection_path, "release..notes.md")
        assert result.name == "release..notes.md"

    def test_error_reports_field_name(self, guard: PathGuard):
        collection_path = guard.resolve_collection_path("posts")
        with pytest.raises(ValidationError) as exc_info:
            guard.resolve_document_path(collection_path, "../x.md", field="new_relative_path")
        assert exc_info.value.details["field"] == "new_relative_path"

    def test_no_filesystem_access(self, guard: PathGuard):
        collection_path = guard.resolve_collection_path("missing")
        guard.resolve_document_path(collection_path, "a/b.md", allow_subdirectories=True)
        assert not guard.content_root.exists()
