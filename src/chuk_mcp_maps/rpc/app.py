"""
Starlette application exposing the MCP endpoint and a health check.
"""

import contextlib
import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from ..constants import TransportConfig

if TYPE_CHECKING:
    from .server import MCPServer

logger = logging.getLogger(__name__)


def create_app(server: "MCPServer") -> Starlette:
    """Build the ASGI app for a server.

    The lifespan runs the session manager; on shutdown every session is
    closed before the server's own resources are released.
    """
    manager = server.session_manager

    async def mcp_endpoint(request: Request) -> Response:
        if request.method == "POST":
            return await manager.handle_post(request)
        if request.method == "DELETE":
            return await manager.handle_delete(request)
        return await manager.handle_get(request)

    async def health(request: Request) -> Response:
        return JSONResponse(server.health())

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        try:
            async with manager.run():
                yield
        finally:
            await server.close()

    return Starlette(
        routes=[
            Route(TransportConfig.PATH, mcp_endpoint, methods=["GET", "POST", "DELETE"]),
            Route(TransportConfig.HEALTH_PATH, health, methods=["GET"]),
        ],
        lifespan=lifespan,
    )
