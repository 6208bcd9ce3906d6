"""Tests for JSON-RPC method routing and tool invocation."""

import json
from typing import Annotated
from unittest.mock import AsyncMock

import anyio
import pytest
from pydantic import BaseModel, Field

from chuk_mcp_maps.rpc.dispatcher import RpcDispatcher
from chuk_mcp_maps.rpc.errors import UnknownToolError
from chuk_mcp_maps.rpc.protocol import ToolResult, parse_message
from chuk_mcp_maps.rpc.registry import ToolRegistry


class FakeSession:
    """Collects pushed messages instead of streaming them."""

    def __init__(self):
        self.session_id = "s1"
        self.log_level = None
        self.sent = []

    async def send(self, message):
        self.sent.append(message)
        return True


class Point(BaseModel):
    lat: float
    lng: float


@pytest.fixture
def handler():
    return AsyncMock(return_value="rated")


@pytest.fixture
def registry(handler):
    reg = ToolRegistry()

    @reg.tool()
    async def echo(message: str) -> str:
        """Echo a message."""
        return message

    @reg.tool()
    async def rated(
        min_rating: Annotated[float | None, Field(alias="minRating", ge=0, le=5)] = None,
    ) -> str:
        return await handler(min_rating=min_rating)

    @reg.tool()
    async def boom() -> str:
        raise RuntimeError("kaboom")

    @reg.tool()
    async def slow() -> str:
        await anyio.sleep(5)
        return "late"

    @reg.tool()
    async def failing() -> ToolResult:
        return ToolResult.error("handled")

    @reg.tool()
    async def point() -> Point:
        return Point(lat=1.0, lng=2.0)

    @reg.tool()
    async def counts() -> dict:
        return {"n": 2}

    return reg


@pytest.fixture
def dispatcher(registry):
    return RpcDispatcher(registry, "test-server", "9.9.9", instructions="Be nice", tool_timeout=0.05)


def request(method, params=None, request_id=1):
    raw = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        raw["params"] = params
    return parse_message(raw)


def call(name, arguments=None):
    params = {"name": name}
    if arguments is not None:
        params["arguments"] = arguments
    return request("tools/call", params)


class TestInitialize:
    async def test_echoes_supported_version(self, dispatcher):
        resp = await dispatcher.handle_message(request("initialize", {"protocolVersion": "2024-11-05"}))
        result = resp["result"]
        assert result["protocolVersion"] == "2024-11-05"
        assert result["serverInfo"] == {"name": "test-server", "version": "9.9.9"}
        assert result["instructions"] == "Be nice"
        assert "tools" in result["capabilities"]
        assert "logging" in result["capabilities"]

    async def test_unsupported_version_gets_latest(self, dispatcher):
        resp = await dispatcher.handle_message(request("initialize", {"protocolVersion": "1999-01-01"}))
        assert resp["result"]["protocolVersion"] == "2025-06-18"

    async def test_client_info_must_be_object(self, dispatcher):
        resp = await dispatcher.handle_message(
            request("initialize", {"protocolVersion": "2025-06-18", "clientInfo": "pytest"})
        )
        assert resp["error"]["code"] == -32602
        assert "clientInfo" in resp["error"]["message"]

    async def test_no_instructions(self, registry):
        d = RpcDispatcher(registry, "s", "1")
        resp = await d.handle_message(request("initialize", {}))
        assert "instructions" not in resp["result"]


class TestRouting:
    async def test_ping(self, dispatcher):
        assert await dispatcher.handle_message(request("ping", request_id="p")) == {
            "jsonrpc": "2.0",
            "id": "p",
            "result": {},
        }

    async def test_unknown_method(self, dispatcher):
        resp = await dispatcher.handle_message(request("resources/list"))
        assert resp["error"]["code"] == -32601
        assert "resources/list" in resp["error"]["message"]

    async def test_notification_returns_none(self, dispatcher):
        msg = parse_message({"jsonrpc": "2.0", "method": "notifications/initialized"})
        assert await dispatcher.handle_message(msg) is None

    async def test_client_response_returns_none(self, dispatcher):
        msg = parse_message({"jsonrpc": "2.0", "id": 4, "result": {}})
        assert await dispatcher.handle_message(msg) is None

    async def test_list_tools(self, dispatcher):
        resp = await dispatcher.handle_message(request("tools/list"))
        tools = {t["name"]: t for t in resp["result"]["tools"]}
        assert set(tools) == {"echo", "rated", "boom", "slow", "failing", "point", "counts"}
        assert tools["echo"]["description"] == "Echo a message."
        assert "minRating" in tools["rated"]["inputSchema"]["properties"]


class TestToolsCall:
    async def test_success(self, dispatcher):
        resp = await dispatcher.handle_message(call("echo", {"message": "hi"}))
        assert resp["result"] == {"content": [{"type": "text", "text": "hi"}], "isError": False}

    async def test_unknown_tool_is_protocol_error(self, dispatcher):
        resp = await dispatcher.handle_message(call("nope", {}))
        assert resp["error"] == {"code": -32602, "message": "Unknown tool: nope"}

    async def test_missing_name(self, dispatcher):
        resp = await dispatcher.handle_message(request("tools/call", {"arguments": {}}))
        assert resp["error"]["code"] == -32602

    async def test_arguments_not_object(self, dispatcher):
        resp = await dispatcher.handle_message(call("echo", ["hi"]))
        assert resp["error"]["code"] == -32602

    async def test_invalid_params_never_reach_handler(self, dispatcher, handler):
        resp = await dispatcher.handle_message(call("rated", {"minRating": 7}))
        result = resp["result"]
        assert result["isError"] is True
        assert "minRating" in result["content"][0]["text"]
        handler.assert_not_awaited()

    async def test_valid_params_reach_handler(self, dispatcher, handler):
        await dispatcher.handle_message(call("rated", {"minRating": 4.5}))
        handler.assert_awaited_once_with(min_rating=4.5)

    async def test_missing_arguments_uses_defaults(self, dispatcher, handler):
        await dispatcher.handle_message(call("rated"))
        handler.assert_awaited_once_with(min_rating=None)


class TestDispatch:
    async def test_unknown_raises(self, dispatcher):
        with pytest.raises(UnknownToolError):
            await dispatcher.dispatch("nope", {})

    async def test_handler_exception(self, dispatcher):
        result = await dispatcher.dispatch("boom", {})
        assert result.is_error
        assert result.content[0].text == "Error executing tool boom: kaboom"

    async def test_timeout(self, dispatcher):
        result = await dispatcher.dispatch("slow", {})
        assert result.is_error
        assert result.content[0].text == "Tool 'slow' timed out after 0.05s"

    async def test_handler_timeout_error_is_failure(self, dispatcher, registry):
        @registry.tool()
        async def upstream() -> str:
            raise TimeoutError("upstream read timed out")

        result = await dispatcher.dispatch("upstream", {})
        assert result.is_error
        assert result.content[0].text == "Error executing tool upstream: upstream read timed out"

    async def test_timeout_disabled(self, registry):
        d = RpcDispatcher(registry, "s", "1", tool_timeout=0)
        result = await d.dispatch("echo", {"message": "x"})
        assert not result.is_error

    async def test_tool_result_passthrough(self, dispatcher):
        result = await dispatcher.dispatch("failing", {})
        assert result.is_error
        assert result.content[0].text == "handled"

    async def test_model_result(self, dispatcher):
        result = await dispatcher.dispatch("point", {})
        assert json.loads(result.content[0].text) == {"lat": 1.0, "lng": 2.0}

    async def test_dict_result(self, dispatcher):
        result = await dispatcher.dispatch("counts", {})
        assert json.loads(result.content[0].text) == {"n": 2}


class TestLogging:
    async def test_set_level(self, dispatcher):
        session = FakeSession()
        resp = await dispatcher.handle_message(request("logging/setLevel", {"level": "warning"}), session)
        assert resp["result"] == {}
        assert session.log_level == "warning"

    async def test_invalid_level(self, dispatcher):
        session = FakeSession()
        resp = await dispatcher.handle_message(request("logging/setLevel", {"level": "loud"}), session)
        assert resp["error"]["code"] == -32602
        assert session.log_level is None

    async def test_no_notifications_without_level(self, dispatcher):
        session = FakeSession()
        await dispatcher.handle_message(call("echo", {"message": "x"}), session)
        assert session.sent == []

    async def test_info_notification(self, dispatcher):
        session = FakeSession()
        session.log_level = "info"
        await dispatcher.handle_message(call("echo", {"message": "x"}), session)
        assert session.sent == [
            {
                "jsonrpc": "2.0",
                "method": "notifications/message",
                "params": {"level": "info", "logger": "test-server", "data": "echo completed"},
            }
        ]

    async def test_level_filters_info(self, dispatcher):
        session = FakeSession()
        session.log_level = "error"
        await dispatcher.handle_message(call("echo", {"message": "x"}), session)
        await dispatcher.handle_message(call("boom"), session)
        assert len(session.sent) == 1
        params = session.sent[0]["params"]
        assert params["level"] == "error"
        assert params["data"] == "boom: Error executing tool boom: kaboom"
