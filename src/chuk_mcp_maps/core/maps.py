"""
Map service manager: async orchestrator for map operations.

Wraps the configured MapProvider with validation, search centre resolution,
and distance annotation.
"""

import logging
from datetime import datetime

from ..constants import (
    MAX_ELEVATION_POINTS,
    MAX_MATRIX_ENTRIES,
    PROVIDER_DISPLAY_NAMES,
    TRAVEL_MODES,
    ErrorMessages,
)
from .geo import haversine_distance, parse_coordinates, validate_coordinates
from .providers import (
    DistanceMatrix,
    ElevationPoint,
    GeocodeItem,
    LatLng,
    MapProvider,
    Place,
    PlaceDetail,
    ReverseGeocodeItem,
    Route,
)

logger = logging.getLogger(__name__)


class MapService:
    """Central manager for map operations.

    Tool handlers talk to this class; it validates input and delegates to
    whichever provider was selected at startup.
    """

    def __init__(self, provider: MapProvider):
        self._provider = provider

    @property
    def provider(self) -> MapProvider:
        return self._provider

    @property
    def provider_name(self) -> str:
        return PROVIDER_DISPLAY_NAMES.get(self._provider.name, self._provider.name)

    @property
    def cache_entries(self) -> int:
        return self._provider.cache_entries

    # --- Validation helpers ---

    @staticmethod
    def _validate_text(value: str, label: str) -> None:
        if not value or not value.strip():
            raise ValueError(ErrorMessages.EMPTY_QUERY.format(label))

    @staticmethod
    def _validate_mode(mode: str) -> None:
        if mode not in TRAVEL_MODES:
            raise ValueError(ErrorMessages.INVALID_MODE.format(mode, ", ".join(TRAVEL_MODES)))

    @staticmethod
    def _validate_list(values: list, label: str, maximum: int) -> None:
        if not values:
            raise ValueError(ErrorMessages.EMPTY_QUERY.format(label))
        if len(values) > maximum:
            raise ValueError(ErrorMessages.TOO_MANY.format(label, maximum, len(values)))

    @staticmethod
    def parse_time(value: str | None, label: str) -> datetime | None:
        """Parse an optional ISO 8601 timestamp."""
        if not value:
            return None
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError(ErrorMessages.INVALID_DATETIME.format(label, value)) from e

    # --- Primary operations ---

    async def resolve_location(self, value: str, is_coordinates: bool = False) -> GeocodeItem:
        """Resolve a search centre given as coordinates or an address."""
        self._validate_text(value, "Location")
        if is_coordinates:
            lat, lng = parse_coordinates(value)
            validate_coordinates(lat, lng)
            return GeocodeItem(lat=lat, lng=lng, formatted_address=value, place_id="")
        return await self._provider.geocode(value)

    async def search_nearby(
        self,
        center: str,
        is_coordinates: bool = False,
        radius: float = 1000,
        keyword: str | None = None,
        open_now: bool = False,
        min_rating: float | None = None,
    ) -> tuple[GeocodeItem, list[Place]]:
        """Find places around a centre point.

        Returns:
            Tuple of (resolved centre, places sorted by distance)
        """
        location = await self.resolve_location(center, is_coordinates)
        places = await self._provider.search_nearby(
            LatLng(lat=location.lat, lng=location.lng),
            radius,
            keyword=keyword,
            open_now=open_now,
            min_rating=min_rating,
        )
        for place in places:
            place.distance_m = round(
                haversine_distance(location.lat, location.lng, place.lat, place.lng), 1
            )
        places.sort(key=lambda p: p.distance_m if p.distance_m is not None else float("inf"))
        return location, places

    async def place_details(self, place_id: str) -> PlaceDetail:
        self._validate_text(place_id, "Place ID")
        return await self._provider.place_details(place_id.strip())

    async def geocode(self, address: str) -> GeocodeItem:
        self._validate_text(address, "Address")
        return await self._provider.geocode(address)

    async def reverse_geocode(self, lat: float, lng: float) -> ReverseGeocodeItem:
        validate_coordinates(lat, lng)
        return await self._provider.reverse_geocode(lat, lng)

    async def distance_matrix(
        self,
        origins: list[str],
        destinations: list[str],
        mode: str = "driving",
    ) -> DistanceMatrix:
        self._validate_list(origins, "Origins", MAX_MATRIX_ENTRIES)
        self._validate_list(destinations, "Destinations", MAX_MATRIX_ENTRIES)
        self._validate_mode(mode)
        return await self._provider.distance_matrix(origins, destinations, mode)

    async def directions(
        self,
        origin: str,
        destination: str,
        mode: str = "driving",
        departure_time: str | None = None,
        arrival_time: str | None = None,
    ) -> Route:
        self._validate_text(origin, "Origin")
        self._validate_text(destination, "Destination")
        self._validate_mode(mode)
        return await self._provider.directions(
            origin,
            destination,
            mode,
            departure_time=self.parse_time(departure_time, "departure_time"),
            arrival_time=self.parse_time(arrival_time, "arrival_time"),
        )

    async def elevation(self, points: list[LatLng]) -> list[ElevationPoint]:
        self._validate_list(points, "Locations", MAX_ELEVATION_POINTS)
        for point in points:
            validate_coordinates(point.lat, point.lng)
        return await self._provider.elevation(points)

    async def close(self) -> None:
        await self._provider.close()
