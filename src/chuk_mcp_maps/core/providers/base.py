"""
Map provider interface and the typed results every provider returns.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class LatLng:
    lat: float
    lng: float


@dataclass
class Place:
    """A single place returned by a nearby search."""

    name: str
    place_id: str
    lat: float
    lng: float
    formatted_address: str | None = None
    rating: float | None = None
    user_ratings_total: int | None = None
    open_now: bool | None = None
    distance_m: float | None = None


@dataclass
class PlaceDetail:
    """Detailed information about one place."""

    name: str
    place_id: str
    lat: float
    lng: float
    formatted_address: str | None = None
    rating: float | None = None
    open_now: bool | None = None
    phone: str | None = None
    website: str | None = None
    price_level: int | None = None
    reviews: list[dict[str, Any]] = field(default_factory=list)
    photos: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class GeocodeItem:
    """Parsed result from forward geocoding."""

    lat: float
    lng: float
    formatted_address: str
    place_id: str


@dataclass
class AddressComponent:
    long_name: str
    short_name: str
    types: list[str]


@dataclass
class ReverseGeocodeItem:
    """Parsed result from reverse geocoding."""

    formatted_address: str
    place_id: str
    components: list[AddressComponent] = field(default_factory=list)


@dataclass
class MatrixCell:
    """One distance or duration value with its display text."""

    value: float
    text: str


@dataclass
class DistanceMatrix:
    """Distances (metres) and durations (seconds), origins x destinations."""

    distances: list[list[MatrixCell | None]]
    durations: list[list[MatrixCell | None]]
    origin_addresses: list[str]
    destination_addresses: list[str]


@dataclass
class Route:
    """Directions between two points."""

    summary: str
    total_distance: MatrixCell
    total_duration: MatrixCell
    departure_time: str
    arrival_time: str
    routes: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class ElevationPoint:
    elevation: float
    location: LatLng


class MapProvider(ABC):
    """Interface implemented by every upstream map provider.

    A provider is chosen once at configuration time; shared code only ever
    talks to this interface.
    """

    name: str = ""

    @abstractmethod
    async def search_nearby(
        self,
        location: LatLng,
        radius: float,
        keyword: str | None = None,
        open_now: bool = False,
        min_rating: float | None = None,
    ) -> list[Place]: ...

    @abstractmethod
    async def place_details(self, place_id: str) -> PlaceDetail: ...

    @abstractmethod
    async def geocode(self, address: str) -> GeocodeItem: ...

    @abstractmethod
    async def reverse_geocode(self, lat: float, lng: float) -> ReverseGeocodeItem: ...

    @abstractmethod
    async def distance_matrix(
        self,
        origins: list[str],
        destinations: list[str],
        mode: str = "driving",
    ) -> DistanceMatrix: ...

    @abstractmethod
    async def directions(
        self,
        origin: str,
        destination: str,
        mode: str = "driving",
        departure_time: datetime | None = None,
        arrival_time: datetime | None = None,
    ) -> Route: ...

    @abstractmethod
    async def elevation(self, points: list[LatLng]) -> list[ElevationPoint]: ...

    async def close(self) -> None:
        """Release HTTP resources held by the provider."""

    @property
    def cache_entries(self) -> int:
        return 0
