"""
Discovery tool registration for chuk-mcp-maps.

Registers the echo and status tools.
"""

import logging

from ...constants import ALL_TOOLS, ServerConfig, SuccessMessages
from ...models.responses import ErrorResponse, StatusResponse, format_response
from ...rpc.protocol import ToolResult

logger = logging.getLogger(__name__)


def register_discovery_tools(mcp, maps):
    """Register discovery tools with the MCP server."""

    @mcp.tool()
    async def echo(message: str) -> str:
        """Echoes back the input message."""
        return message

    @mcp.tool()
    async def maps_status(output_mode: str = "json") -> str | ToolResult:
        """Get maps server status.

        Returns server version, active provider, cache stats, and tool count.

        Args:
            output_mode: "json" (default) or "text"

        Returns:
            Server status information
        """
        try:
            response = StatusResponse(
                server=ServerConfig.NAME,
                version=ServerConfig.VERSION,
                provider=maps.provider_name,
                cache_entries=maps.cache_entries,
                tool_count=len(ALL_TOOLS),
                tools=ALL_TOOLS,
                message=SuccessMessages.STATUS.format(ServerConfig.VERSION, maps.provider_name),
            )
            return format_response(response, output_mode)
        except Exception as e:
            logger.error("maps_status failed: %s", e)
            return ToolResult.error(format_response(ErrorResponse(error=str(e)), output_mode))
