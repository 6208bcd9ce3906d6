"""
JSON-RPC method routing and the tool invocation boundary.

Every tool-level failure (unknown tool, bad arguments, handler exception,
timeout) is turned into a structured response here; nothing raised by a
handler escapes to the transport.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import anyio
from pydantic import BaseModel

from ..constants import LOG_LEVELS, ErrorMessages, TransportConfig
from .errors import InvalidParamsError, UnknownToolError
from .protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    JSONRPCMessage,
    JSONRPCRequest,
    ToolResult,
    error_response,
    notification,
    result_response,
)
from .registry import ToolRegistry

logger = logging.getLogger(__name__)


class SessionLike(Protocol):
    session_id: str
    log_level: str | None

    async def send(self, message: dict[str, Any]) -> bool: ...


MethodHandler = Callable[[dict[str, Any], SessionLike | None], Awaitable[dict[str, Any]]]


class RpcDispatcher:
    """Routes JSON-RPC requests for one server to their handlers."""

    def __init__(
        self,
        registry: ToolRegistry,
        server_name: str,
        server_version: str,
        instructions: str | None = None,
        tool_timeout: float | None = TransportConfig.TOOL_TIMEOUT_SECONDS,
    ):
        self._registry = registry
        self._server_name = server_name
        self._server_version = server_version
        self._instructions = instructions
        self._tool_timeout = tool_timeout or None
        self._methods: dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
            "logging/setLevel": self._set_level,
        }

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def handle_message(
        self, message: JSONRPCMessage, session: SessionLike | None = None
    ) -> dict[str, Any] | None:
        """Handle one parsed message; returns the response, or None for
        notifications and client responses."""
        if not isinstance(message, JSONRPCRequest):
            logger.debug("Received %s", getattr(message, "method", "response"))
            return None

        handler = self._methods.get(message.method)
        if handler is None:
            return error_response(
                message.id, METHOD_NOT_FOUND, ErrorMessages.METHOD_NOT_FOUND.format(message.method)
            )

        try:
            result = await handler(message.params or {}, session)
        except UnknownToolError as e:
            return error_response(message.id, INVALID_PARAMS, ErrorMessages.UNKNOWN_TOOL.format(e.name))
        except ValueError as e:
            return error_response(message.id, INVALID_PARAMS, str(e))
        except Exception as e:
            logger.exception("Method %s failed", message.method)
            return error_response(message.id, INTERNAL_ERROR, str(e))
        return result_response(message.id, result)

    async def dispatch(self, tool_name: str, raw_params: dict[str, Any] | None) -> ToolResult:
        """Validate arguments and run a tool.

        Raises:
            UnknownToolError: If no tool has this exact name
        """
        tool = self._registry.get(tool_name)
        try:
            kwargs = tool.validate(raw_params)
        except InvalidParamsError as e:
            logger.info("Rejected arguments for %s: %s", tool_name, e)
            return ToolResult.error(ErrorMessages.INVALID_PARAMS.format(tool_name, e))

        # A TimeoutError raised by the handler itself is a tool failure, not our timeout
        try:
            with anyio.move_on_after(self._tool_timeout) as scope:
                result = await tool.fn(**kwargs)
        except Exception as e:
            logger.exception("Tool %s failed", tool_name)
            return ToolResult.error(ErrorMessages.TOOL_FAILED.format(tool_name, e))
        if scope.cancelled_caught:
            logger.warning("Tool %s timed out after %ss", tool_name, self._tool_timeout)
            return ToolResult.error(ErrorMessages.TOOL_TIMEOUT.format(tool_name, self._tool_timeout))

        if isinstance(result, ToolResult):
            return result
        if isinstance(result, BaseModel):
            return ToolResult.text(result.model_dump_json())
        if isinstance(result, str):
            return ToolResult.text(result)
        return ToolResult.text(json.dumps(result, default=str))

    # --- Method handlers ---

    async def _initialize(self, params: dict[str, Any], session: SessionLike | None) -> dict:
        requested = params.get("protocolVersion")
        if requested in TransportConfig.SUPPORTED_PROTOCOL_VERSIONS:
            version = requested
        else:
            version = TransportConfig.LATEST_PROTOCOL_VERSION
        client = params.get("clientInfo") or {}
        if not isinstance(client, dict):
            raise ValueError("initialize 'clientInfo' must be an object")
        logger.info(
            "Initializing session %s for %s %s (protocol %s)",
            session.session_id if session else "-",
            client.get("name", "unknown client"),
            client.get("version", ""),
            version,
        )
        result: dict[str, Any] = {
            "protocolVersion": version,
            "capabilities": {"logging": {}, "tools": {"listChanged": False}},
            "serverInfo": {"name": self._server_name, "version": self._server_version},
        }
        if self._instructions:
            result["instructions"] = self._instructions
        return result

    async def _ping(self, params: dict[str, Any], session: SessionLike | None) -> dict:
        return {}

    async def _list_tools(self, params: dict[str, Any], session: SessionLike | None) -> dict:
        return {"tools": [tool.to_wire() for tool in self._registry.get_tools()]}

    async def _call_tool(self, params: dict[str, Any], session: SessionLike | None) -> dict:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("tools/call requires a tool 'name'")
        arguments = params.get("arguments")
        if arguments is not None and not isinstance(arguments, dict):
            raise ValueError("tools/call 'arguments' must be an object")

        result = await self.dispatch(name, arguments)
        if result.is_error:
            await self._notify(session, "error", f"{name}: {result.content[0].text}")
        else:
            await self._notify(session, "info", f"{name} completed")
        return result.to_wire()

    async def _set_level(self, params: dict[str, Any], session: SessionLike | None) -> dict:
        level = params.get("level")
        if level not in LOG_LEVELS:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level, ", ".join(LOG_LEVELS)))
        if session is not None:
            session.log_level = level
        return {}

    async def _notify(self, session: SessionLike | None, level: str, data: str) -> None:
        """Push a log notification to the session if its level allows it."""
        if session is None or session.log_level is None:
            return
        if LOG_LEVELS.index(level) < LOG_LEVELS.index(session.log_level):
            return
        await session.send(
            notification(
                "notifications/message",
                {"level": level, "logger": self._server_name, "data": data},
            )
        )
