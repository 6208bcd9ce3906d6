"""
chuk-mcp-maps: places, geocoding, routing and elevation tools over MCP.
"""

from .constants import ServerConfig

__version__ = ServerConfig.VERSION

__all__ = ["__version__"]
