"""Integration tests for the Tina Content MCP tool server.

Drives the registered tools through ``ToolClient`` and checks both the
returned values and the resulting file system state.
"""

import json
from pathlib import Path

import pytest
from mcp.server.fastmcp.exceptions import ToolError
from starlette.testclient import TestClient

from tina_mcp.config import Settings
from tina_mcp.mcp_client import ToolClient
from tina_mcp.server import create_server

pytestmark = pytest.mark.integration

POST = "---\ntitle: Hello\ndraft: true\n---\n\n# Hello\n"


def _tool_error(exc_info) -> dict:
    return json.loads(str(exc_info.value))


# ===================================
# Server Construction
# ===================================


def test_all_tools_registered(settings: Settings):
    """Test that every tool is registered under its public name."""
    server = create_server(settings)

    names = {tool.name for tool in server._tool_manager.list_tools()}

    assert names == {
        "list_collections",
        "list_documents",
        "read_document",
        "create_document",
        "update_document",
        "delete_document",
        "move_document",
        "copy_document",
        "get_document_metadata",
        "update_document_metadata",
        "read_schema",
    }


def test_server_uses_configured_sse_address(project_root: Path):
    server = create_server(Settings(project_root=str(project_root), sse_port=4123, _env_file=None))

    assert server.settings.port == 4123


# ===================================
# Document Lifecycle
# ===================================


@pytest.mark.asyncio
async def test_document_lifecycle(tool_client: ToolClient, content_root: Path):
    """Test create, read, update, move, copy and delete through the tools."""
    # Pre-condition: No collections exist
    assert await tool_client.list_collections() == []

    created = await tool_client.create_document("posts", "hello.md", POST)
    assert created.success is True
    assert created.details == {"collection": "posts", "relative_path": "hello.md"}
    assert await tool_client.list_collections() == ["posts"]
    assert await tool_client.read_document("posts", "hello.md") == POST

    updated = await tool_client.update_document("posts", "hello.md", "Replaced")
    assert updated.success is True
    assert (content_root / "posts" / "hello.md").read_text() == "Replaced"

    copied = await tool_client.copy_document("posts", "hello.md", "drafts/hello.md")
    assert copied.success is True
    moved = await tool_client.move_document("posts", "hello.md", "archive/hello.md")
    assert moved.success is True
    assert await tool_client.list_documents("posts", recursive=True) == ["archive/hello.md", "drafts/hello.md"]
    assert await tool_client.list_documents("posts") == []

    # delete only accepts documents directly inside the collection
    deleted = await tool_client.delete_document("posts", "drafts/hello.md")
    assert deleted.success is False
    assert deleted.error.error_code == "VALIDATION_ERROR"

    moved_back = await tool_client.move_document("posts", "archive/hello.md", "hello.md")
    assert moved_back.success is True
    deleted = await tool_client.delete_document("posts", "hello.md")
    assert deleted.success is True
    assert await tool_client.list_documents("posts", recursive=True) == ["drafts/hello.md"]


@pytest.mark.asyncio
async def test_create_existing_document_reports_failure(tool_client: ToolClient, document_factory):
    """Test that write failures come back as a failed OperationStatus."""
    collection = document_factory("posts", {"hello.md": "original"})

    result = await tool_client.create_document("posts", "hello.md", "new")

    assert result.success is False
    assert result.error.error_type == "DocumentExistsError"
    assert result.error.error_code == "DOCUMENT_EXISTS"
    assert result.error.details["path"] == "hello.md"
    assert "already exists" in result.message
    assert (collection / "hello.md").read_text() == "original"


@pytest.mark.asyncio
async def test_update_missing_document_reports_failure(tool_client: ToolClient, document_factory):
    document_factory("posts")

    result = await tool_client.update_document("posts", "missing.md", "x")

    assert result.success is False
    assert result.error.error_code == "DOCUMENT_NOT_FOUND"


@pytest.mark.asyncio
async def test_read_missing_document_raises_tool_error(tool_client: ToolClient, document_factory):
    """Test that query tools raise ToolError carrying the error code."""
    document_factory("posts")

    with pytest.raises(ToolError) as exc_info:
        await tool_client.read_document("posts", "missing.md")

    payload = _tool_error(exc_info)
    assert payload["error_code"] == "DOCUMENT_NOT_FOUND"
    assert payload["details"]["operation"] == "read_document"


@pytest.mark.asyncio
async def test_traversal_rejected_by_query_tools(tool_client: ToolClient, project_root: Path):
    (project_root / "content-backup").mkdir()
    (project_root / "content-backup" / "secret.md").write_text("secret")

    with pytest.raises(ToolError) as exc_info:
        await tool_client.read_document("posts", "../../content-backup/secret.md")

    assert _tool_error(exc_info)["error_code"] == "VALIDATION_ERROR"


# ===================================
# Metadata Tools
# ===================================


@pytest.mark.asyncio
async def test_metadata_read_and_update(tool_client: ToolClient, document_factory):
    """Test reading frontmatter as JSON and merging updates."""
    document_factory("posts", {"hello.md": "---\ntitle: Hello\ndate: 2024-01-15\n---\n\nBody\n"})

    assert json.loads(await tool_client.get_document_metadata("posts", "hello.md")) == {
        "title": "Hello",
        "date": "2024-01-15",
    }

    result = await tool_client.update_document_metadata("posts", "hello.md", '{"draft": false}')
    assert result.success is True

    metadata = json.loads(await tool_client.get_document_metadata("posts", "hello.md"))
    assert metadata == {"title": "Hello", "date": "2024-01-15", "draft": False}
    assert (await tool_client.read_document("posts", "hello.md")).endswith("\n\nBody\n")


@pytest.mark.asyncio
async def test_metadata_of_plain_document(tool_client: ToolClient, document_factory):
    document_factory("posts", {"plain.md": "No frontmatter"})

    assert await tool_client.get_document_metadata("posts", "plain.md") == "{}"


@pytest.mark.asyncio
async def test_invalid_metadata_json_reports_failure(tool_client: ToolClient, document_factory):
    collection = document_factory("posts", {"hello.md": POST})

    result = await tool_client.update_document_metadata("posts", "hello.md", "[1, 2]")

    assert result.success is False
    assert result.error.error_code == "VALIDATION_ERROR"
    assert (collection / "hello.md").read_text() == POST


@pytest.mark.asyncio
async def test_malformed_frontmatter_raises_tool_error(tool_client: ToolClient, document_factory):
    document_factory("posts", {"bad.md": "---\ntitle: [oops\n---\n"})

    with pytest.raises(ToolError) as exc_info:
        await tool_client.get_document_metadata("posts", "bad.md")

    assert _tool_error(exc_info)["error_code"] == "FRONTMATTER_FORMAT_ERROR"


# ===================================
# Schema and Configuration
# ===================================


@pytest.mark.asyncio
async def test_read_schema(tool_client: ToolClient, project_root: Path):
    (project_root / ".tina").mkdir()
    (project_root / ".tina" / "schema.json").write_text('{"collections": []}')

    assert await tool_client.read_schema() == '{"collections": []}'
    assert await tool_client.read_schema("posts") == '{"collections": []}'


@pytest.mark.asyncio
async def test_read_missing_schema(tool_client: ToolClient):
    with pytest.raises(ToolError) as exc_info:
        await tool_client.read_schema()

    assert _tool_error(exc_info)["error_code"] == "SCHEMA_NOT_FOUND"


@pytest.mark.asyncio
async def test_unconfigured_server_reports_configuration_error():
    """Test that every tool fails cleanly when no project root is configured."""
    client = ToolClient(create_server(Settings(_env_file=None)))

    with pytest.raises(ToolError) as exc_info:
        await client.list_collections()
    assert _tool_error(exc_info)["error_code"] == "CONFIGURATION_ERROR"

    result = await client.create_document("posts", "a.md", "x")
    assert result.success is False
    assert result.error.error_code == "CONFIGURATION_ERROR"


# ===================================
# Encoding Failures
# ===================================


@pytest.mark.asyncio
async def test_unencodable_update_reports_failure(tool_client: ToolClient, document_factory):
    """Test that an unencodable write is a failed OperationStatus and the file survives."""
    collection = document_factory("posts", {"a.md": "original body"})

    result = await tool_client.update_document("posts", "a.md", "bad \ud800 text")

    assert result.success is False
    assert result.error.error_code == "VALIDATION_ERROR"
    assert result.error.details["field"] == "content"
    assert (collection / "a.md").read_bytes() == b"original body"


@pytest.mark.asyncio
async def test_non_utf8_document_reports_failure(tool_client: ToolClient, content_root: Path):
    (content_root / "posts").mkdir()
    (content_root / "posts" / "img.md").write_bytes(b"\xff\xfe")

    result = await tool_client.update_document_metadata("posts", "img.md", '{"a": 1}')

    assert result.success is False
    assert result.error.error_code == "FILE_SYSTEM_ERROR"

    with pytest.raises(ToolError) as exc_info:
        await tool_client.read_document("posts", "img.md")
    assert _tool_error(exc_info)["error_code"] == "FILE_SYSTEM_ERROR"


# ===================================
# HTTP Routes
# ===================================


def test_health_and_metrics_routes(settings: Settings):
    """Test the HTTP routes served beside the SSE transport."""
    client = TestClient(create_server(settings).sse_app())

    assert client.get("/health").status_code == 200

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert metrics.text == "# Metrics not available\n"

    summary = client.get("/metrics/summary")
    assert summary.status_code == 200
    assert summary.json() == {"status": "disabled"}
