"""
MCPServer: tool registration plus the Streamable HTTP endpoint.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import uvicorn
from starlette.applications import Starlette

from ..constants import ServerConfig, TransportConfig
from .app import create_app
from .dispatcher import RpcDispatcher
from .registry import Tool, ToolRegistry
from .session_manager import SessionManager

logger = logging.getLogger(__name__)


class MCPServer:
    """An MCP server reachable over Streamable HTTP.

    Tools are registered with the ``tool()`` decorator:

        mcp = MCPServer("my-server")

        @mcp.tool()
        async def echo(message: str) -> str:
            return message
    """

    def __init__(
        self,
        name: str,
        version: str = ServerConfig.VERSION,
        instructions: str | None = None,
        tool_timeout: float = TransportConfig.TOOL_TIMEOUT_SECONDS,
        unknown_session_policy: str = TransportConfig.UNKNOWN_SESSION_CREATE,
        session_idle_timeout: float = TransportConfig.SESSION_IDLE_TIMEOUT_SECONDS,
    ):
        self.name = name
        self.version = version
        self.registry = ToolRegistry()
        self.dispatcher = RpcDispatcher(
            self.registry,
            server_name=name,
            server_version=version,
            instructions=instructions,
            tool_timeout=tool_timeout,
        )
        self.session_manager = SessionManager(
            self.dispatcher,
            unknown_session_policy=unknown_session_policy,
            session_idle_timeout=session_idle_timeout,
        )
        self._health_fields: dict[str, Callable[[], Any]] = {}
        self._close_hooks: list[Callable[[], Awaitable[None]]] = []

    def tool(self, name: str | None = None, description: str | None = None):
        """Decorator registering an async function as a tool."""
        return self.registry.tool(name=name, description=description)

    def get_tools(self) -> list[Tool]:
        return self.registry.get_tools()

    def add_health_field(self, key: str, getter: Callable[[], Any]) -> None:
        """Report an extra value from the health endpoint."""
        self._health_fields[key] = getter

    def on_close(self, hook: Callable[[], Awaitable[None]]) -> None:
        """Run an async hook when the app shuts down."""
        self._close_hooks.append(hook)

    def health(self) -> dict[str, Any]:
        status: dict[str, Any] = {"status": "ok", "server": self.name, "version": self.version}
        for key, getter in self._health_fields.items():
            status[key] = getter()
        status["sessions"] = self.session_manager.session_count
        status["tools"] = len(self.registry)
        return status

    async def close(self) -> None:
        for hook in self._close_hooks:
            try:
                await hook()
            except Exception:
                logger.exception("Shutdown hook failed")

    def create_app(self) -> Starlette:
        return create_app(self)

    def run(self, host: str = ServerConfig.DEFAULT_HOST, port: int = ServerConfig.DEFAULT_PORT) -> None:
        logger.info("%s listening on http://%s:%d%s", self.name, host, port, TransportConfig.PATH)
        uvicorn.run(self.create_app(), host=host, port=port, log_level=logging.getLogger().level)
