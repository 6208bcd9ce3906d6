"""
Response models for chuk-mcp-maps tools.

All tool responses are Pydantic models for type safety and consistent API.
"""

from pydantic import BaseModel, ConfigDict, Field


def format_response(model: BaseModel, output_mode: str = "json") -> str:
    """Format a response model as JSON or human-readable text.

    Args:
        model: Pydantic response model instance
        output_mode: "json" (default) or "text"

    Returns:
        Formatted string
    """
    if output_mode == "text" and hasattr(model, "to_text"):
        return str(model.to_text())
    return str(model.model_dump_json())


class ErrorResponse(BaseModel):
    """Error response model for tool failures."""

    model_config = ConfigDict(extra="forbid")

    error: str = Field(..., description="Error message describing what went wrong")

    def to_text(self) -> str:
        return f"Error: {self.error}"


class Coordinates(BaseModel):
    model_config = ConfigDict(extra="forbid")

    lat: float = Field(..., description="Latitude")
    lng: float = Field(..., description="Longitude")


class NearbyPlace(BaseModel):
    """A place found by a nearby search."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Place name")
    place_id: str = Field(..., description="Provider place identifier")
    location: Coordinates = Field(..., description="Place coordinates")
    address: str | None = Field(None, description="Formatted address")
    rating: float | None = Field(None, description="Average rating (0-5)")
    user_ratings_total: int | None = Field(None, description="Number of ratings")
    open_now: bool | None = Field(None, description="Open at request time, if known")
    distance_m: float | None = Field(None, description="Distance from the search centre in metres")

    def to_text(self) -> str:
        parts = [self.name]
        if self.distance_m is not None:
            parts.append(f"{self.distance_m:.0f}m")
        if self.rating is not None:
            parts.append(f"rating {self.rating:.1f}")
        if self.open_now is not None:
            parts.append("open" if self.open_now else "closed")
        line = " | ".join(parts)
        if self.address:
            line += f"\n   {self.address}"
        return f"{line}\n   id: {self.place_id}"


class SearchNearbyResponse(BaseModel):
    """Nearby place search response."""

    model_config = ConfigDict(extra="forbid")

    center: str = Field(..., description="Search centre as given")
    location: Coordinates = Field(..., description="Resolved search centre")
    radius: float = Field(..., description="Search radius in metres", gt=0)
    keyword: str | None = Field(None, description="Search keyword")
    places: list[NearbyPlace] = Field(..., description="Places sorted by distance")
    count: int = Field(..., description="Number of places", ge=0)
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [self.message, ""]
        for i, p in enumerate(self.places, 1):
            lines.append(f"{i}. {p.to_text()}")
        return "\n".join(lines)


class PlaceReview(BaseModel):
    model_config = ConfigDict(extra="forbid")

    author: str | None = Field(None, description="Review author")
    rating: float | None = Field(None, description="Review rating")
    text: str | None = Field(None, description="Review text")
    time: str | None = Field(None, description="When the review was written")


class PlaceDetailsResponse(BaseModel):
    """Details for a single place."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Place name")
    place_id: str = Field(..., description="Provider place identifier")
    location: Coordinates = Field(..., description="Place coordinates")
    address: str | None = Field(None, description="Formatted address")
    phone: str | None = Field(None, description="Phone number")
    website: str | None = Field(None, description="Website URL")
    rating: float | None = Field(None, description="Average rating (0-5)")
    price_level: int | None = Field(None, description="Price level (0-4)")
    open_now: bool | None = Field(None, description="Open at request time, if known")
    reviews: list[PlaceReview] = Field(default_factory=list, description="Recent reviews")
    photo_count: int = Field(default=0, description="Number of photos available", ge=0)
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [self.message, f"  Coordinates: {self.location.lat:.6f}, {self.location.lng:.6f}"]
        if self.address:
            lines.append(f"  Address: {self.address}")
        if self.phone:
            lines.append(f"  Phone: {self.phone}")
        if self.website:
            lines.append(f"  Website: {self.website}")
        if self.rating is not None:
            lines.append(f"  Rating: {self.rating:.1f}")
        if self.open_now is not None:
            lines.append(f"  Open now: {'yes' if self.open_now else 'no'}")
        for review in self.reviews:
            lines.append(f"  - {review.author or 'Anonymous'}: {review.text or ''}".rstrip())
        return "\n".join(lines)


class GeocodeResponse(BaseModel):
    """Forward geocoding response."""

    model_config = ConfigDict(extra="forbid")

    address: str = Field(..., description="Address as given")
    location: Coordinates = Field(..., description="Resolved coordinates")
    formatted_address: str = Field(..., description="Provider formatted address")
    place_id: str = Field(..., description="Provider place identifier")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        return "\n".join(
            [
                self.message,
                f"  Address: {self.formatted_address}",
                f"  Place ID: {self.place_id}",
            ]
        )


class AddressComponentModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    long_name: str = Field(..., description="Full component name")
    short_name: str = Field(..., description="Abbreviated component name")
    types: list[str] = Field(..., description="Component types (locality, country, ...)")


class ReverseGeocodeResponse(BaseModel):
    """Reverse geocoding response."""

    model_config = ConfigDict(extra="forbid")

    location: Coordinates = Field(..., description="Queried coordinates")
    formatted_address: str = Field(..., description="Address at this location")
    place_id: str = Field(..., description="Provider place identifier")
    address_components: list[AddressComponentModel] = Field(
        default_factory=list, description="Structured address components"
    )
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [self.message]
        for c in self.address_components:
            lines.append(f"  {', '.join(c.types) or 'component'}: {c.long_name}")
        return "\n".join(lines)


class MatrixElement(BaseModel):
    """One origin/destination pair."""

    model_config = ConfigDict(extra="forbid")

    status: str = Field(..., description="OK or NOT_FOUND")
    distance_m: float | None = Field(None, description="Distance in metres")
    distance_text: str | None = Field(None, description="Human-readable distance")
    duration_s: float | None = Field(None, description="Duration in seconds")
    duration_text: str | None = Field(None, description="Human-readable duration")


class DistanceMatrixResponse(BaseModel):
    """Response for distance matrix computation."""

    model_config = ConfigDict(extra="forbid")

    origin_addresses: list[str] = Field(..., description="Resolved origins")
    destination_addresses: list[str] = Field(..., description="Resolved destinations")
    rows: list[list[MatrixElement]] = Field(..., description="Origins x destinations")
    mode: str = Field(..., description="Travel mode")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [self.message, ""]
        for origin, row in zip(self.origin_addresses, self.rows):
            lines.append(origin)
            for destination, element in zip(self.destination_addresses, row):
                if element.status == "OK":
                    lines.append(f"  -> {destination}: {element.distance_text}, {element.duration_text}")
                else:
                    lines.append(f"  -> {destination}: no route")
        return "\n".join(lines)


class DirectionsResponse(BaseModel):
    """Route between two points."""

    model_config = ConfigDict(extra="forbid")

    origin: str = Field(..., description="Origin as given")
    destination: str = Field(..., description="Destination as given")
    mode: str = Field(..., description="Travel mode")
    summary: str = Field(..., description="Route summary")
    distance_m: float = Field(..., description="Total distance in metres", ge=0)
    distance_text: str = Field(..., description="Human-readable distance")
    duration_s: float = Field(..., description="Total duration in seconds", ge=0)
    duration_text: str = Field(..., description="Human-readable duration")
    departure_time: str = Field(..., description="Departure time (ISO 8601)")
    arrival_time: str = Field(..., description="Arrival time (ISO 8601)")
    steps: list[str] = Field(default_factory=list, description="Turn-by-turn instructions")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [self.message, f"  Depart: {self.departure_time}", f"  Arrive: {self.arrival_time}"]
        for i, step in enumerate(self.steps, 1):
            lines.append(f"  {i}. {step}")
        return "\n".join(lines)


class ElevationResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    location: Coordinates = Field(..., description="Queried point")
    elevation: float = Field(..., description="Metres above sea level")


class ElevationResponse(BaseModel):
    """Elevation lookup response."""

    model_config = ConfigDict(extra="forbid")

    results: list[ElevationResult] = Field(..., description="One result per location")
    count: int = Field(..., description="Number of results", ge=0)
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [self.message, ""]
        for r in self.results:
            lines.append(f"  ({r.location.lat:.6f}, {r.location.lng:.6f}): {r.elevation:.1f}m")
        return "\n".join(lines)


class StatusResponse(BaseModel):
    """Response model for server status queries."""

    model_config = ConfigDict(extra="forbid")

    server: str = Field(default="chuk-mcp-maps", description="Server name")
    version: str = Field(default="0.1.0", description="Server version")
    provider: str = Field(..., description="Active map provider")
    cache_entries: int = Field(default=0, description="Number of cached upstream responses", ge=0)
    tool_count: int = Field(..., description="Number of available tools", ge=0)
    tools: list[str] = Field(default_factory=list, description="Available tools")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [
            f"{self.server} v{self.version}",
            f"Provider: {self.provider}",
            f"Cache: {self.cache_entries} entries",
            f"Tools: {self.tool_count}",
        ]
        return "\n".join(lines)
