"""Read-only access to the generated TinaCMS schema descriptor."""

from __future__ import annotations

import logging

from ..config import Settings
from ..exceptions import ConfigurationError
from ..exceptions import SchemaNotFoundError
from ..logger_config import ErrorCategory
from ..logger_config import log_structured_error
from .document_store import _filesystem_errors
from .document_store import read_text

logger = logging.getLogger(__name__)


class SchemaAccessor:
    """Return ``<project_root>/.tina/schema.json`` verbatim, without parsing it."""

    def __init__(self, settings: Settings):
        self._settings = settings

    async def read_schema(self) -> str:
        project_root = self._settings.project_root_path
        if project_root is None or not project_root.is_dir():
            raise ConfigurationError(
                "Project root is not configured or does not exist.",
                setting="project_root",
                operation="read_schema",
            )

        schema_path = self._settings.schema_path
        if not schema_path.is_file():
            log_structured_error(
                category=ErrorCategory.WARNING,
                message="Schema file not found. Ensure TinaCMS has generated schema.json.",
                context={"file_path": str(schema_path)},
                operation="read_schema",
            )
            raise SchemaNotFoundError(str(schema_path))

        with _filesystem_errors("read_schema", schema_path):
            content = read_text(schema_path)
        logger.info("Successfully read schema file: %s", schema_path)
        return content
