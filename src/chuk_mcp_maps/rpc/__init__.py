"""MCP protocol layer: Streamable HTTP sessions, JSON-RPC dispatch, tool registry."""

from .dispatcher import RpcDispatcher
from .errors import InvalidParamsError, InvalidSessionError, MCPError, UnknownToolError
from .protocol import TextContent, ToolResult
from .registry import Tool, ToolRegistry
from .server import MCPServer
from .session_manager import SessionManager
from .transport import SessionState, SessionTransport

__all__ = [
    "InvalidParamsError",
    "InvalidSessionError",
    "MCPError",
    "MCPServer",
    "RpcDispatcher",
    "SessionManager",
    "SessionState",
    "SessionTransport",
    "TextContent",
    "Tool",
    "ToolRegistry",
    "ToolResult",
    "UnknownToolError",
]
