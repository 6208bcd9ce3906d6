"""MCP tool modules for chuk-mcp-maps."""

from .discovery import register_discovery_tools
from .geocoding import register_geocoding_tools
from .places import register_places_tools
from .routing import register_routing_tools

__all__ = [
    "register_discovery_tools",
    "register_geocoding_tools",
    "register_places_tools",
    "register_routing_tools",
]
