"""
Geocoding tool registration for chuk-mcp-maps.

Registers forward and reverse geocoding tools.
"""

import logging
from typing import Annotated

from pydantic import Field

from ...constants import SuccessMessages
from ...models.responses import (
    AddressComponentModel,
    Coordinates,
    ErrorResponse,
    GeocodeResponse,
    ReverseGeocodeResponse,
    format_response,
)
from ...rpc.protocol import ToolResult

logger = logging.getLogger(__name__)


def register_geocoding_tools(mcp, maps):
    """Register geocoding tools with the MCP server."""

    @mcp.tool()
    async def maps_geocode(
        address: Annotated[str, Field(description="Address or place name to convert")],
        output_mode: str = "json",
    ) -> str | ToolResult:
        """Convert an address or place name to geographic coordinates.

        Args:
            address: Address or place name (e.g. "1600 Amphitheatre Parkway")
            output_mode: "json" (default) or "text"

        Returns:
            Coordinates, formatted address and place ID
        """
        try:
            item = await maps.geocode(address)
            response = GeocodeResponse(
                address=address,
                location=Coordinates(lat=item.lat, lng=item.lng),
                formatted_address=item.formatted_address,
                place_id=item.place_id,
                message=SuccessMessages.GEOCODE_FOUND.format(address, item.lat, item.lng),
            )
            return format_response(response, output_mode)
        except Exception as e:
            logger.error("maps_geocode failed: %s", e)
            return ToolResult.error(format_response(ErrorResponse(error=str(e)), output_mode))

    @mcp.tool()
    async def maps_reverse_geocode(
        latitude: Annotated[float, Field(ge=-90, le=90, description="Latitude")],
        longitude: Annotated[float, Field(ge=-180, le=180, description="Longitude")],
        output_mode: str = "json",
    ) -> str | ToolResult:
        """Convert coordinates to an address.

        Args:
            latitude: Latitude (-90 to 90)
            longitude: Longitude (-180 to 180)
            output_mode: "json" (default) or "text"

        Returns:
            Formatted address, place ID and address components
        """
        try:
            item = await maps.reverse_geocode(latitude, longitude)
            response = ReverseGeocodeResponse(
                location=Coordinates(lat=latitude, lng=longitude),
                formatted_address=item.formatted_address,
                place_id=item.place_id,
                address_components=[
                    AddressComponentModel(
                        long_name=c.long_name, short_name=c.short_name, types=c.types
                    )
                    for c in item.components
                ],
                message=SuccessMessages.REVERSE_FOUND.format(
                    latitude, longitude, item.formatted_address
                ),
            )
            return format_response(response, output_mode)
        except Exception as e:
            logger.error("maps_reverse_geocode failed: %s", e)
            return ToolResult.error(format_response(ErrorResponse(error=str(e)), output_mode))
