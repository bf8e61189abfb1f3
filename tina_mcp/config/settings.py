"""Centralized configuration management for the Tina Content MCP server.

Settings are read from environment variables (prefixed with ``TINA_``) and an
optional ``.env`` file. The resulting value is passed explicitly into the
server and the document store; nothing below reads it implicitly.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_CONTENT_DIR = "content"
DEFAULT_SCHEMA_PATH = ".tina/schema.json"


class Settings(BaseSettings):
    """Centralized settings for the Tina Content MCP server."""

    # === Project Configuration ===
    project_root: str | None = Field(
        default=None, description="Root directory of the TinaCMS project"
    )
    content_dir_name: str = Field(
        default=DEFAULT_CONTENT_DIR, description="Content directory, relative to the project root"
    )
    schema_relative_path: str = Field(
        default=DEFAULT_SCHEMA_PATH, description="Schema descriptor, relative to the project root"
    )

    # === HTTP SSE Server Configuration ===
    sse_host: str = Field(default="localhost", description="SSE server host")
    sse_port: int = Field(default=3001, description="SSE server port")

    # === Logging Configuration ===
    log_level: str = Field(default="INFO", description="Logging level")
    structured_logging: bool = Field(default=True, description="Enable structured JSON logging")
    call_log_file: str | None = Field(
        default=None, description="Optional rotating log file for tool calls"
    )

    # === Metrics Configuration ===
    metrics_enabled: bool = Field(default=False, description="Enable metrics collection")

    model_config = {
        "env_prefix": "TINA_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("project_root")
    @classmethod
    def _blank_root_is_unset(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def project_root_path(self) -> Path | None:
        """Get the project root as an absolute path, or None when unset."""
        if self.project_root is None:
            return None
        return Path(os.path.abspath(os.path.expanduser(self.project_root)))

    @property
    def content_root_path(self) -> Path | None:
        """Get the content root (``<project_root>/content`` by default)."""
        root = self.project_root_path
        if root is None:
            return None
        return Path(os.path.normpath(root / self.content_dir_name))

    @property
    def schema_path(self) -> Path | None:
        """Get the schema descriptor path, which lives outside the content root."""
        root = self.project_root_path
        if root is None:
            return None
        return root / self.schema_relative_path


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the cached settings instance used by the command line entry point."""
    global _settings
    if _settings is None:
        load_dotenv()
        _settings = Settings()
    return _settings


def reset_settings():
    """Reset the cached settings instance (primarily for testing)."""
    global _settings
    _settings = None
