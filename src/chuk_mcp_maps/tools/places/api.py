"""
Places tool registration for chuk-mcp-maps.

Registers nearby search and place details tools.
"""

import logging
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from ...constants import MAX_SEARCH_RADIUS_M, SuccessMessages
from ...models.responses import (
    Coordinates,
    ErrorResponse,
    NearbyPlace,
    PlaceDetailsResponse,
    PlaceReview,
    SearchNearbyResponse,
    format_response,
)
from ...rpc.protocol import ToolResult

logger = logging.getLogger(__name__)


class SearchCenter(BaseModel):
    """Search centre point."""

    model_config = ConfigDict(populate_by_name=True)

    value: str = Field(
        ..., description="Address, landmark name, or coordinates (coordinate format: lat,lng)"
    )
    is_coordinates: bool = Field(
        False, alias="isCoordinates", description="Whether the value is coordinates"
    )


def _review(raw: dict) -> PlaceReview:
    rating = raw.get("rating")
    return PlaceReview(
        author=raw.get("author_name") or raw.get("author"),
        rating=float(rating) if rating is not None else None,
        text=raw.get("text"),
        time=raw.get("relative_time_description") or raw.get("time"),
    )


def register_places_tools(mcp, maps):
    """Register places tools with the MCP server."""

    @mcp.tool()
    async def search_nearby(
        center: SearchCenter,
        keyword: Annotated[
            str | None, Field(description="Search keyword (e.g., restaurant, cafe, hotel)")
        ] = None,
        radius: Annotated[
            float, Field(gt=0, le=MAX_SEARCH_RADIUS_M, description="Search radius in meters")
        ] = 1000,
        open_now: Annotated[
            bool, Field(alias="openNow", description="Only show places that are currently open")
        ] = False,
        min_rating: Annotated[
            float | None,
            Field(alias="minRating", ge=0, le=5, description="Minimum rating requirement (0-5)"),
        ] = None,
        output_mode: str = "json",
    ) -> str | ToolResult:
        """Search for nearby places based on location, with optional filtering
        by keywords, distance, rating, and operating hours.

        Args:
            center: Search centre; an address or landmark, or "lat,lng" with isCoordinates true
            keyword: Search keyword (e.g. "restaurant", "cafe")
            radius: Search radius in metres (default 1000, max 50000)
            openNow: Only show places that are currently open
            minRating: Minimum rating (0-5)
            output_mode: "json" (default) or "text"

        Returns:
            Resolved centre and matching places sorted by distance
        """
        try:
            location, items = await maps.search_nearby(
                center.value,
                is_coordinates=center.is_coordinates,
                radius=radius,
                keyword=keyword,
                open_now=open_now,
                min_rating=min_rating,
            )
            places = [
                NearbyPlace(
                    name=item.name,
                    place_id=item.place_id,
                    location=Coordinates(lat=item.lat, lng=item.lng),
                    address=item.formatted_address,
                    rating=item.rating,
                    user_ratings_total=item.user_ratings_total,
                    open_now=item.open_now,
                    distance_m=item.distance_m,
                )
                for item in items
            ]
            response = SearchNearbyResponse(
                center=center.value,
                location=Coordinates(lat=location.lat, lng=location.lng),
                radius=radius,
                keyword=keyword,
                places=places,
                count=len(places),
                message=SuccessMessages.NEARBY_FOUND.format(
                    len(places), radius, location.lat, location.lng
                ),
            )
            return format_response(response, output_mode)
        except Exception as e:
            logger.error("search_nearby failed: %s", e)
            return ToolResult.error(format_response(ErrorResponse(error=str(e)), output_mode))

    @mcp.tool()
    async def get_place_details(
        place_id: Annotated[
            str, Field(alias="placeId", description="Place ID returned by search_nearby")
        ],
        output_mode: str = "json",
    ) -> str | ToolResult:
        """Get detailed information about a specific place.

        Args:
            placeId: Place ID from a search_nearby result
            output_mode: "json" (default) or "text"

        Returns:
            Address, contact details, rating, opening state and reviews
        """
        try:
            detail = await maps.place_details(place_id)
            response = PlaceDetailsResponse(
                name=detail.name,
                place_id=detail.place_id,
                location=Coordinates(lat=detail.lat, lng=detail.lng),
                address=detail.formatted_address,
                phone=detail.phone,
                website=detail.website,
                rating=detail.rating,
                price_level=detail.price_level,
                open_now=detail.open_now,
                reviews=[_review(r) for r in detail.reviews],
                photo_count=len(detail.photos),
                message=SuccessMessages.PLACE_DETAILS.format(detail.name),
            )
            return format_response(response, output_mode)
        except Exception as e:
            logger.error("get_place_details failed: %s", e)
            return ToolResult.error(format_response(ErrorResponse(error=str(e)), output_mode))
