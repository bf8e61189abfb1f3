"""Schema Tools.

- read_schema: Return the generated TinaCMS schema file
"""

from mcp.server import FastMCP

from ..exceptions import TinaMCPError
from ..helpers import to_tool_error
from ..logger_config import log_mcp_call
from ..storage import SchemaAccessor


def register_schema_tools(mcp_server: FastMCP, schema: SchemaAccessor) -> None:
    """Register schema tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    async def read_schema(collection: str | None = None) -> str:
        """Get the content of the TinaCMS schema file ({RootPath}/.tina/schema.json).

        Parameters:
            collection (str, optional): Reserved for filtering by collection; currently ignored.

        Returns:
            str: The schema file content, unparsed.
        """
        try:
            return await schema.read_schema()
        except TinaMCPError as e:
            raise to_tool_error(e) from e
