"""
Exceptions raised by the session, dispatch and registry layers.
"""


class MCPError(Exception):
    """Base class for protocol-level failures."""


class InvalidSessionError(MCPError):
    """A GET/DELETE (or, under the reject policy, a POST) named no live session."""


class UnknownToolError(MCPError):
    """A tool name is not in the registry."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name


class InvalidParamsError(MCPError):
    """Tool arguments failed schema validation."""

    def __init__(self, tool_name: str, errors: list[str]):
        super().__init__("; ".join(errors))
        self.tool_name = tool_name
        self.errors = errors
