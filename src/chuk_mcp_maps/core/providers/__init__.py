"""Map providers and the factory that selects one at startup."""

from ...constants import PROVIDER_CHOICES, ErrorMessages, ProviderName
from .base import (
    AddressComponent,
    DistanceMatrix,
    ElevationPoint,
    GeocodeItem,
    LatLng,
    MapProvider,
    MatrixCell,
    Place,
    PlaceDetail,
    ReverseGeocodeItem,
    Route,
)
from .google import GoogleMapsProvider
from .osm import OpenStreetMapProvider
from .riskscape import RiskScapeProvider


def create_provider(
    name: str,
    google_api_key: str | None = None,
    riskscape_api_key: str | None = None,
) -> MapProvider:
    """Build the provider named by the configuration.

    Raises:
        ValueError: If the name is not a known provider
    """
    key = (name or "").strip().lower()
    if key == ProviderName.GOOGLE:
        return GoogleMapsProvider(api_key=google_api_key)
    if key in (ProviderName.OSM, ProviderName.OPENSTREETMAP):
        return OpenStreetMapProvider()
    if key == ProviderName.RISKSCAPE:
        return RiskScapeProvider(api_key=riskscape_api_key)
    raise ValueError(ErrorMessages.UNKNOWN_PROVIDER.format(name, ", ".join(PROVIDER_CHOICES)))


__all__ = [
    "AddressComponent",
    "DistanceMatrix",
    "ElevationPoint",
    "GeocodeItem",
    "GoogleMapsProvider",
    "LatLng",
    "MapProvider",
    "MatrixCell",
    "OpenStreetMapProvider",
    "Place",
    "PlaceDetail",
    "ReverseGeocodeItem",
    "RiskScapeProvider",
    "Route",
    "create_provider",
]
