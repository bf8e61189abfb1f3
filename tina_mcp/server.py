"""MCP Server for TinaCMS content.

This module provides a FastMCP-based MCP server exposing the documents of a
TinaCMS project: listing collections and documents, reading, creating,
updating, deleting, moving and copying documents, patching their YAML
frontmatter, and reading the generated schema.

Documents live at ``{project_root}/content/{collection}/{relative_path}``;
no tool can reach outside the content directory.
"""

from __future__ import annotations

import argparse
import json
import logging

from mcp.server import FastMCP
from starlette.requests import Request
from starlette.responses import Response

from .config import Settings
from .config import get_settings
from .logger_config import configure_logging
from .metrics_config import ensure_metrics_initialized
from .metrics_config import get_metrics_export
from .metrics_config import get_metrics_summary
from .metrics_config import shutdown_metrics
from .storage import DocumentStore
from .storage import SchemaAccessor
from .tools import register_collection_tools
from .tools import register_document_tools
from .tools import register_metadata_tools
from .tools import register_schema_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "TinaContentTools"


def create_server(settings: Settings) -> FastMCP:
    """Build an MCP server whose tools operate on the configured project."""
    store = DocumentStore(settings)
    schema = SchemaAccessor(settings)

    mcp_server = FastMCP(
        name=SERVER_NAME,
        instructions=(
            "Tools for the documents of a TinaCMS project. Documents are grouped in "
            "collections under the project's content directory."
        ),
    )
    mcp_server.settings.host = settings.sse_host
    mcp_server.settings.port = settings.sse_port

    register_collection_tools(mcp_server, store)
    register_document_tools(mcp_server, store)
    register_metadata_tools(mcp_server, store)
    register_schema_tools(mcp_server, schema)
    register_http_routes(mcp_server)
    return mcp_server


def register_http_routes(mcp_server: FastMCP) -> None:
    """Register the health and metrics endpoints served alongside the SSE transport."""

    @mcp_server.custom_route("/health", methods=["GET"], name="health")
    async def health_check(request: Request) -> Response:
        """Health check endpoint to verify server readiness."""
        return Response(status_code=200)

    @mcp_server.custom_route("/metrics", methods=["GET"], name="metrics")
    async def metrics_endpoint(request: Request) -> Response:
        """Prometheus metrics endpoint for monitoring MCP tool usage."""
        metrics_data, content_type = get_metrics_export()
        return Response(content=metrics_data, status_code=200, media_type=content_type)

    @mcp_server.custom_route("/metrics/summary", methods=["GET"], name="metrics_summary")
    async def metrics_summary_endpoint(request: Request) -> Response:
        """JSON summary of the current metrics configuration and status."""
        return Response(
            content=json.dumps(get_metrics_summary(), indent=2),
            status_code=200,
            media_type="application/json",
        )


# --- Main Server Execution ---
def main(argv: list[str] | None = None):
    """Run the main entry point for the server with argument parsing."""
    parser = argparse.ArgumentParser(description="Tina Content MCP Server")
    parser.add_argument(
        "transport",
        choices=["sse", "stdio"],
        default="stdio",
        nargs="?",
        help="Transport: 'sse' for HTTP SSE or 'stdio' for standard I/O (default: stdio)",
    )
    parser.add_argument(
        "--project-root",
        default=None,
        help="TinaCMS project root (default: TINA_PROJECT_ROOT)",
    )
    parser.add_argument("--host", default=None, help="Host to bind to for SSE transport")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to for SSE transport")
    args = parser.parse_args(argv)

    settings = get_settings()
    overrides = {}
    if args.project_root is not None:
        overrides["project_root"] = args.project_root
    if args.host is not None:
        overrides["sse_host"] = args.host
    if args.port is not None:
        overrides["sse_port"] = args.port
    if overrides:
        settings = settings.model_copy(update=overrides)

    # stdout carries the stdio transport, so all logging goes to stderr
    configure_logging(settings)
    ensure_metrics_initialized(settings.metrics_enabled)

    mcp_server = create_server(settings)
    logger.info("Serving tools for project root: %s", settings.project_root_path)

    try:
        if args.transport == "stdio":
            logger.info("MCP server running with stdio transport. Waiting for client connection...")
            mcp_server.run(transport="stdio")
        else:
            logger.info(
                "MCP server running with HTTP SSE transport on %s:%s",
                settings.sse_host,
                settings.sse_port,
            )
            logger.info("Health endpoint: http://%s:%s/health", settings.sse_host, settings.sse_port)
            logger.info("Metrics endpoint: http://%s:%s/metrics", settings.sse_host, settings.sse_port)
            mcp_server.run(transport="sse")
    finally:
        shutdown_metrics()


if __name__ == "__main__":
    main()
