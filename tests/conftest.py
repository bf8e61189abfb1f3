"""The pytest configuration for Tina Content MCP testing.

Provides a temporary TinaCMS project root and ready-made settings, store and
tool client fixtures bound to it.
"""

from pathlib import Path

import pytest

from tina_mcp.config import Settings
from tina_mcp.config import reset_settings
from tina_mcp.mcp_client import ToolClient
from tina_mcp.server import create_server
from tina_mcp.storage import DocumentStore
from tina_mcp.storage import SchemaAccessor


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep developer environment variables out of the tests."""
    for key in ("TINA_PROJECT_ROOT", "TINA_CONTENT_DIR_NAME", "TINA_SCHEMA_RELATIVE_PATH"):
        monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Provide a temporary project root with an empty content directory."""
    root = tmp_path / "site"
    (root / "content").mkdir(parents=True)
    return root


@pytest.fixture
def content_root(project_root: Path) -> Path:
    return project_root / "content"


@pytest.fixture
def settings(project_root: Path) -> Settings:
    return Settings(project_root=str(project_root), _env_file=None)


@pytest.fixture
def store(settings: Settings) -> DocumentStore:
    return DocumentStore(settings)


@pytest.fixture
def schema_accessor(settings: Settings) -> SchemaAccessor:
    return SchemaAccessor(settings)


@pytest.fixture
def tool_client(settings: Settings) -> ToolClient:
    return ToolClient(create_server(settings))


@pytest.fixture
def document_factory(content_root: Path):
    """Factory for creating test documents inside a collection."""

    def _create_document(collection: str, documents: dict[str, str] | None = None) -> Path:
        collection_path = content_root / collection
        collection_path.mkdir(parents=True, exist_ok=True)
        for relative_path, content in (documents or {}).items():
            file_path = collection_path / relative_path
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(content.encode("utf-8"))
        return collection_path

    return _create_document


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: tests that drive the registered MCP tools")
