"""
JSON-RPC 2.0 envelopes and the MCP result types used by the dispatcher.
"""

from typing import Annotated, Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

JSONRPC_VERSION: Final[str] = "2.0"

PARSE_ERROR: Final[int] = -32700
INVALID_REQUEST: Final[int] = -32600
METHOD_NOT_FOUND: Final[int] = -32601
INVALID_PARAMS: Final[int] = -32602
INTERNAL_ERROR: Final[int] = -32603

RequestId = Annotated[int, Field(strict=True)] | str


class JSONRPCBase(BaseModel):
    model_config = ConfigDict(extra="allow")

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION


class JSONRPCRequest(JSONRPCBase):
    """A request that expects a response."""

    id: RequestId
    method: str
    params: dict[str, Any] | None = None


class JSONRPCNotification(JSONRPCBase):
    """A notification which does not expect a response."""

    method: str
    params: dict[str, Any] | None = None


class ErrorData(BaseModel):
    code: int
    message: str
    data: Any | None = None


class JSONRPCResponse(JSONRPCBase):
    """A response sent by the client (e.g. to a server-initiated request)."""

    id: RequestId | None = None
    result: Any | None = None
    error: ErrorData | None = None


JSONRPCMessage = JSONRPCRequest | JSONRPCNotification | JSONRPCResponse


def parse_message(raw: Any) -> JSONRPCMessage:
    """Classify one decoded JSON value as a request, notification or response.

    Raises:
        ValueError: If the value is not a well-formed JSON-RPC 2.0 message
    """
    if not isinstance(raw, dict):
        raise ValueError("message must be a JSON object")
    try:
        if "method" in raw:
            if "id" in raw:
                return JSONRPCRequest.model_validate(raw)
            return JSONRPCNotification.model_validate(raw)
        if "result" in raw or "error" in raw:
            return JSONRPCResponse.model_validate(raw)
    except ValidationError as e:
        raise ValueError(format_validation_error(e)) from e
    raise ValueError("message has neither 'method' nor 'result'/'error'")


def validation_messages(error: ValidationError) -> list[str]:
    """Render each pydantic error as "field: message"."""
    messages = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "arguments"
        messages.append(f"{loc}: {err['msg']}")
    return messages


def format_validation_error(error: ValidationError) -> str:
    return "; ".join(validation_messages(error))


def result_response(request_id: RequestId, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(
    request_id: RequestId | None, code: int, message: str, data: Any = None
) -> dict[str, Any]:
    error = ErrorData(code=code, message=message, data=data).model_dump(exclude_none=True)
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


def notification(method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    message: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "method": method}
    if params is not None:
        message["params"] = params
    return message


class TextContent(BaseModel):
    """Text returned by a tool."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Outcome of one tool invocation.

    Build with ToolResult.text() or ToolResult.error() so the error flag
    always agrees with the content.
    """

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent]
    is_error: Annotated[bool, Field(alias="isError")] = False

    @classmethod
    def text(cls, *texts: str) -> "ToolResult":
        return cls(content=[TextContent(text=t) for t in texts], is_error=False)

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(content=[TextContent(text=message)], is_error=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
