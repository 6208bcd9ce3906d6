"""
Routing tool registration for chuk-mcp-maps.

Registers distance matrix, directions, and elevation tools.
"""

import logging
import re
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from ...constants import MAX_ELEVATION_POINTS, MAX_MATRIX_ENTRIES, SuccessMessages
from ...core.providers import LatLng
from ...models.responses import (
    Coordinates,
    DirectionsResponse,
    DistanceMatrixResponse,
    ElevationResponse,
    ElevationResult,
    ErrorResponse,
    MatrixElement,
    format_response,
)
from ...rpc.protocol import ToolResult

logger = logging.getLogger(__name__)

TravelMode = Literal["driving", "walking", "bicycling", "transit"]

_TAG_RE = re.compile(r"<[^>]+>")


class ElevationLocation(BaseModel):
    model_config = ConfigDict(extra="forbid")

    latitude: float = Field(..., ge=-90, le=90, description="Latitude")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude")


def _step_text(step: dict) -> str:
    if step.get("html_instructions"):
        return _TAG_RE.sub("", step["html_instructions"]).strip()
    if step.get("instruction"):
        return str(step["instruction"])
    maneuver = step.get("maneuver")
    if isinstance(maneuver, dict):
        # OSRM: {"type": "turn", "modifier": "left"} plus the road name
        text = " ".join(p for p in (maneuver.get("type"), maneuver.get("modifier")) if p)
        if step.get("name"):
            text += f" onto {step['name']}"
        return text
    return ""


def route_steps(routes: list[dict]) -> list[str]:
    """Turn-by-turn instructions for the first route, whatever the provider."""
    if not routes:
        return []
    route = routes[0]
    raw_steps = [step for leg in route.get("legs") or [] for step in leg.get("steps") or []]
    if not raw_steps:
        raw_steps = route.get("steps") or []
    return [text for text in (_step_text(s) for s in raw_steps) if text]


def register_routing_tools(mcp, maps):
    """Register routing tools with the MCP server."""

    @mcp.tool()
    async def maps_distance_matrix(
        origins: Annotated[
            list[str],
            Field(
                min_length=1,
                max_length=MAX_MATRIX_ENTRIES,
                description="Origin addresses or 'lat,lng' coordinates",
            ),
        ],
        destinations: Annotated[
            list[str],
            Field(
                min_length=1,
                max_length=MAX_MATRIX_ENTRIES,
                description="Destination addresses or 'lat,lng' coordinates",
            ),
        ],
        mode: Annotated[TravelMode, Field(description="Travel mode")] = "driving",
        output_mode: str = "json",
    ) -> str | ToolResult:
        """Calculate travel distances and times between multiple origins and destinations.

        Args:
            origins: Origin addresses or coordinates (1-25)
            destinations: Destination addresses or coordinates (1-25)
            mode: driving (default), walking, bicycling or transit
            output_mode: "json" (default) or "text"

        Returns:
            Distance and duration for every origin/destination pair
        """
        try:
            matrix = await maps.distance_matrix(origins, destinations, mode)
            rows = []
            for distance_row, duration_row in zip(matrix.distances, matrix.durations):
                row = []
                for distance, duration in zip(distance_row, duration_row):
                    if distance is None or duration is None:
                        row.append(MatrixElement(status="NOT_FOUND"))
                        continue
                    row.append(
                        MatrixElement(
                            status="OK",
                            distance_m=distance.value,
                            distance_text=distance.text,
                            duration_s=duration.value,
                            duration_text=duration.text,
                        )
                    )
                rows.append(row)
            response = DistanceMatrixResponse(
                origin_addresses=matrix.origin_addresses,
                destination_addresses=matrix.destination_addresses,
                rows=rows,
                mode=mode,
                message=SuccessMessages.DISTANCE_MATRIX.format(
                    len(origins), len(destinations), mode
                ),
            )
            return format_response(response, output_mode)
        except Exception as e:
            logger.error("maps_distance_matrix failed: %s", e)
            return ToolResult.error(format_response(ErrorResponse(error=str(e)), output_mode))

    @mcp.tool()
    async def maps_directions(
        origin: Annotated[str, Field(description="Starting address or 'lat,lng'")],
        destination: Annotated[str, Field(description="Destination address or 'lat,lng'")],
        mode: Annotated[TravelMode, Field(description="Travel mode")] = "driving",
        departure_time: Annotated[
            str | None, Field(description="Departure time (ISO 8601)")
        ] = None,
        arrival_time: Annotated[str | None, Field(description="Arrival time (ISO 8601)")] = None,
        output_mode: str = "json",
    ) -> str | ToolResult:
        """Get directions between two points.

        Args:
            origin: Starting point address or coordinates
            destination: End point address or coordinates
            mode: driving (default), walking, bicycling or transit
            departure_time: Optional departure time, ISO 8601
            arrival_time: Optional arrival time, ISO 8601
            output_mode: "json" (default) or "text"

        Returns:
            Route summary, total distance and duration, and step instructions
        """
        try:
            route = await maps.directions(
                origin,
                destination,
                mode,
                departure_time=departure_time,
                arrival_time=arrival_time,
            )
            response = DirectionsResponse(
                origin=origin,
                destination=destination,
                mode=mode,
                summary=route.summary,
                distance_m=route.total_distance.value,
                distance_text=route.total_distance.text,
                duration_s=route.total_duration.value,
                duration_text=route.total_duration.text,
                departure_time=route.departure_time,
                arrival_time=route.arrival_time,
                steps=route_steps(route.routes),
                message=SuccessMessages.DIRECTIONS.format(
                    origin, destination, route.total_distance.text, route.total_duration.text
                ),
            )
            return format_response(response, output_mode)
        except Exception as e:
            logger.error("maps_directions failed: %s", e)
            return ToolResult.error(format_response(ErrorResponse(error=str(e)), output_mode))

    @mcp.tool()
    async def maps_elevation(
        locations: Annotated[
            list[ElevationLocation],
            Field(
                min_length=1,
                max_length=MAX_ELEVATION_POINTS,
                description="Locations to get elevation for",
            ),
        ],
        output_mode: str = "json",
    ) -> str | ToolResult:
        """Get elevation data (metres above sea level) for locations on the earth.

        Args:
            locations: List of {latitude, longitude} points (1-512)
            output_mode: "json" (default) or "text"

        Returns:
            Elevation for each location
        """
        try:
            points = [LatLng(lat=loc.latitude, lng=loc.longitude) for loc in locations]
            items = await maps.elevation(points)
            results = [
                ElevationResult(
                    location=Coordinates(lat=item.location.lat, lng=item.location.lng),
                    elevation=item.elevation,
                )
                for item in items
            ]
            response = ElevationResponse(
                results=results,
                count=len(results),
                message=SuccessMessages.ELEVATION.format(len(results)),
            )
            return format_response(response, output_mode)
        except Exception as e:
            logger.error("maps_elevation failed: %s", e)
            return ToolResult.error(format_response(ErrorResponse(error=str(e)), output_mode))
