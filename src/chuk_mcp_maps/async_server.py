#!/usr/bin/env python3
"""
Async Maps MCP Server

Nearby place search, place details, geocoding, distance matrices,
directions and elevation backed by Google Maps, OpenStreetMap or RiskScape.
"""

import logging

from .constants import ProviderName, ServerConfig, TransportConfig
from .core.maps import MapService
from .core.providers import create_provider
from .rpc.server import MCPServer
from .tools.discovery import register_discovery_tools
from .tools.geocoding import register_geocoding_tools
from .tools.places import register_places_tools
from .tools.routing import register_routing_tools

logger = logging.getLogger(__name__)


def create_server(
    provider: str = ServerConfig.DEFAULT_PROVIDER,
    google_api_key: str | None = None,
    riskscape_api_key: str | None = None,
    tool_timeout: float = TransportConfig.TOOL_TIMEOUT_SECONDS,
    unknown_session_policy: str = TransportConfig.UNKNOWN_SESSION_CREATE,
    session_idle_timeout: float = TransportConfig.SESSION_IDLE_TIMEOUT_SECONDS,
) -> tuple[MCPServer, MapService]:
    """Create the MCP server instance with every tool module registered.

    Raises:
        ValueError: If the provider name is unknown
    """
    provider = (provider or "").strip().lower()
    map_provider = create_provider(
        provider, google_api_key=google_api_key, riskscape_api_key=riskscape_api_key
    )
    if provider == ProviderName.GOOGLE and not google_api_key:
        logger.warning("No Google Maps API key configured; map tools will report errors")
    if provider == ProviderName.RISKSCAPE and not riskscape_api_key:
        logger.warning("No RiskScape API key configured; map tools will report errors")

    maps = MapService(map_provider)

    mcp = MCPServer(
        ServerConfig.NAME,
        version=ServerConfig.VERSION,
        instructions=ServerConfig.INSTRUCTIONS,
        tool_timeout=tool_timeout,
        unknown_session_policy=unknown_session_policy,
        session_idle_timeout=session_idle_timeout,
    )
    mcp.add_health_field("provider", lambda: maps.provider_name)
    mcp.on_close(maps.close)

    # Register all tool modules
    register_places_tools(mcp, maps)
    register_geocoding_tools(mcp, maps)
    register_routing_tools(mcp, maps)
    register_discovery_tools(mcp, maps)

    logger.info("Using %s, %d tools available", maps.provider_name, len(mcp.get_tools()))
    return mcp, maps
