"""
Tool registry: name -> (description, parameter model, handler).

Parameter models are generated from handler signatures, so constraints,
wire names and descriptions are declared once with
``Annotated[..., Field(...)]`` on the handler itself.
"""

import inspect
import logging
import typing
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, create_model

from .errors import InvalidParamsError, UnknownToolError
from .protocol import validation_messages

logger = logging.getLogger(__name__)

ToolHandler = Callable[..., Awaitable[Any]]


def _model_name(tool_name: str) -> str:
    return "".join(part.capitalize() for part in tool_name.split("_")) + "Arguments"


def build_params_model(fn: ToolHandler, tool_name: str) -> type[BaseModel]:
    """Create a pydantic model mirroring the handler's keyword parameters."""
    hints = typing.get_type_hints(fn, include_extras=True)
    fields: dict[str, Any] = {}
    for param in inspect.signature(fn).parameters.values():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        annotation = hints.get(param.name, Any)
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[param.name] = (annotation, default)
    return create_model(
        _model_name(tool_name),
        __config__=ConfigDict(populate_by_name=True),
        **fields,
    )


@dataclass(frozen=True)
class Tool:
    """A registered tool."""

    name: str
    description: str
    fn: ToolHandler
    params_model: type[BaseModel]

    @property
    def input_schema(self) -> dict[str, Any]:
        schema = self.params_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        return schema

    def validate(self, arguments: dict[str, Any] | None) -> dict[str, Any]:
        """Validate raw arguments and return handler keyword arguments.

        Raises:
            InvalidParamsError: If the arguments violate the parameter schema
        """
        try:
            model = self.params_model.model_validate(arguments or {})
        except ValidationError as e:
            raise InvalidParamsError(self.name, validation_messages(e)) from e
        return {name: getattr(model, name) for name in self.params_model.model_fields}

    def to_wire(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class ToolRegistry:
    """Static catalogue of tools, looked up by exact name."""

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def add_tool(
        self,
        fn: ToolHandler,
        name: str | None = None,
        description: str | None = None,
    ) -> Tool:
        tool_name = name or fn.__name__
        if tool_name in self._tools:
            raise ValueError(f"Tool already registered: {tool_name}")
        if not inspect.iscoroutinefunction(fn):
            raise TypeError(f"Tool handler {tool_name} must be an async function")
        tool = Tool(
            name=tool_name,
            description=description or inspect.cleandoc(fn.__doc__ or ""),
            fn=fn,
            params_model=build_params_model(fn, tool_name),
        )
        self._tools[tool_name] = tool
        logger.debug("Registered tool %s", tool_name)
        return tool

    def tool(self, name: str | None = None, description: str | None = None):
        """Decorator registering an async handler as a tool."""

        def decorator(fn: ToolHandler) -> ToolHandler:
            self.add_tool(fn, name=name, description=description)
            return fn

        return decorator

    def get(self, name: str) -> Tool:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def get_tools(self) -> list[Tool]:
        return list(self._tools.values())

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
