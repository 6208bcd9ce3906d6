"""Response models for chuk-mcp-maps."""

from .responses import (
    AddressComponentModel,
    Coordinates,
    DirectionsResponse,
    DistanceMatrixResponse,
    ElevationResponse,
    ElevationResult,
    ErrorResponse,
    GeocodeResponse,
    MatrixElement,
    NearbyPlace,
    PlaceDetailsResponse,
    PlaceReview,
    ReverseGeocodeResponse,
    SearchNearbyResponse,
    StatusResponse,
    format_response,
)

__all__ = [
    "AddressComponentModel",
    "Coordinates",
    "DirectionsResponse",
    "DistanceMatrixResponse",
    "ElevationResponse",
    "ElevationResult",
    "ErrorResponse",
    "GeocodeResponse",
    "MatrixElement",
    "NearbyPlace",
    "PlaceDetailsResponse",
    "PlaceReview",
    "ReverseGeocodeResponse",
    "SearchNearbyResponse",
    "StatusResponse",
    "format_response",
]
