"""
Google Maps Platform provider (Places, Geocoding, Distance Matrix,
Directions and Elevation web services).
"""

import logging
from datetime import datetime

from ...constants import ErrorMessages, GoogleMapsConfig, ProviderName
from ..client import ApiClient
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

logger = logging.getLogger(__name__)


def _cell(raw: dict | None) -> MatrixCell | None:
    if not raw:
        return None
    return MatrixCell(value=raw["value"], text=raw["text"])


class GoogleMapsProvider(MapProvider):
    """Map provider backed by the Google Maps web service APIs."""

    name = ProviderName.GOOGLE

    def __init__(self, api_key: str | None, client: ApiClient | None = None):
        self._api_key = api_key or ""
        self._client = client or ApiClient(
            GoogleMapsConfig.BASE_URL, "Google Maps", params={"key": self._api_key}
        )

    async def _call(self, path: str, params: dict) -> dict:
        """GET a Google endpoint and check the status field."""
        if not self._api_key:
            raise RuntimeError(ErrorMessages.MISSING_API_KEY.format("Google Maps"))
        data = await self._client.get(path, params)
        status = data.get("status", "OK")
        if status not in GoogleMapsConfig.OK_STATUSES:
            message = data.get("error_message") or status
            raise RuntimeError(ErrorMessages.UPSTREAM_STATUS.format("Google Maps", message))
        return data

    async def search_nearby(
        self,
        location: LatLng,
        radius: float,
        keyword: str | None = None,
        open_now: bool = False,
        min_rating: float | None = None,
    ) -> list[Place]:
        params: dict[str, str | float] = {
            "location": f"{location.lat},{location.lng}",
            "radius": radius,
        }
        if keyword:
            params["keyword"] = keyword
        if open_now:
            params["opennow"] = "true"
        data = await self._call("/place/nearbysearch/json", params)

        places = []
        for result in data.get("results", []):
            rating = result.get("rating")
            if min_rating is not None and (rating or 0) < min_rating:
                continue
            loc = result["geometry"]["location"]
            places.append(
                Place(
                    name=result.get("name", ""),
                    place_id=result.get("place_id", ""),
                    lat=loc["lat"],
                    lng=loc["lng"],
                    formatted_address=result.get("vicinity") or result.get("formatted_address"),
                    rating=rating,
                    user_ratings_total=result.get("user_ratings_total"),
                    open_now=(result.get("opening_hours") or {}).get("open_now"),
                )
            )
        return places

    async def place_details(self, place_id: str) -> PlaceDetail:
        data = await self._call(
            "/place/details/json",
            {"place_id": place_id, "fields": GoogleMapsConfig.DETAIL_FIELDS},
        )
        result = data.get("result")
        if not result:
            raise ValueError(ErrorMessages.PLACE_NOT_FOUND)
        loc = result["geometry"]["location"]
        return PlaceDetail(
            name=result.get("name", ""),
            place_id=result.get("place_id", place_id),
            lat=loc["lat"],
            lng=loc["lng"],
            formatted_address=result.get("formatted_address"),
            rating=result.get("rating"),
            open_now=(result.get("opening_hours") or {}).get("open_now"),
            phone=result.get("formatted_phone_number"),
            website=result.get("website"),
            price_level=result.get("price_level"),
            reviews=result.get("reviews", []),
            photos=result.get("photos", []),
        )

    async def geocode(self, address: str) -> GeocodeItem:
        data = await self._call("/geocode/json", {"address": address})
        results = data.get("results", [])
        if not results:
            raise ValueError(ErrorMessages.NOT_FOUND_ADDRESS)
        result = results[0]
        loc = result["geometry"]["location"]
        return GeocodeItem(
            lat=loc["lat"],
            lng=loc["lng"],
            formatted_address=result.get("formatted_address", ""),
            place_id=result.get("place_id", ""),
        )

    async def reverse_geocode(self, lat: float, lng: float) -> ReverseGeocodeItem:
        data = await self._call("/geocode/json", {"latlng": f"{lat},{lng}"})
        results = data.get("results", [])
        if not results:
            raise ValueError(ErrorMessages.NOT_FOUND_COORDINATES)
        result = results[0]
        return ReverseGeocodeItem(
            formatted_address=result.get("formatted_address", ""),
            place_id=result.get("place_id", ""),
            components=[
                AddressComponent(
                    long_name=c.get("long_name", ""),
                    short_name=c.get("short_name", ""),
                    types=c.get("types", []),
                )
                for c in result.get("address_components", [])
            ],
        )

    async def distance_matrix(
        self,
        origins: list[str],
        destinations: list[str],
        mode: str = "driving",
    ) -> DistanceMatrix:
        data = await self._call(
            "/distancematrix/json",
            {
                "origins": "|".join(origins),
                "destinations": "|".join(destinations),
                "mode": mode,
            },
        )
        distances: list[list[MatrixCell | None]] = []
        durations: list[list[MatrixCell | None]] = []
        for row in data.get("rows", []):
            distance_row: list[MatrixCell | None] = []
            duration_row: list[MatrixCell | None] = []
            for element in row.get("elements", []):
                ok = element.get("status") == "OK"
                distance_row.append(_cell(element.get("distance")) if ok else None)
                duration_row.append(_cell(element.get("duration")) if ok else None)
            distances.append(distance_row)
            durations.append(duration_row)

        return DistanceMatrix(
            distances=distances,
            durations=durations,
            origin_addresses=data.get("origin_addresses", list(origins)),
            destination_addresses=data.get("destination_addresses", list(destinations)),
        )

    async def directions(
        self,
        origin: str,
        destination: str,
        mode: str = "driving",
        departure_time: datetime | None = None,
        arrival_time: datetime | None = None,
    ) -> Route:
        params: dict[str, str | int] = {
            "origin": origin,
            "destination": destination,
            "mode": mode,
        }
        if departure_time:
            params["departure_time"] = int(departure_time.timestamp())
        if arrival_time:
            params["arrival_time"] = int(arrival_time.timestamp())
        data = await self._call("/directions/json", params)
        routes = data.get("routes", [])
        if not routes:
            raise ValueError(ErrorMessages.NO_ROUTES)

        leg = routes[0]["legs"][0]
        return Route(
            summary=routes[0].get("summary", ""),
            total_distance=MatrixCell(leg["distance"]["value"], leg["distance"]["text"]),
            total_duration=MatrixCell(leg["duration"]["value"], leg["duration"]["text"]),
            departure_time=(leg.get("departure_time") or {}).get("text", ""),
            arrival_time=(leg.get("arrival_time") or {}).get("text", ""),
            routes=routes,
        )

    async def elevation(self, points: list[LatLng]) -> list[ElevationPoint]:
        data = await self._call(
            "/elevation/json",
            {"locations": "|".join(f"{p.lat},{p.lng}" for p in points)},
        )
        return [
            ElevationPoint(
                elevation=result["elevation"],
                location=LatLng(lat=result["location"]["lat"], lng=result["location"]["lng"]),
            )
            for result in data.get("results", [])
        ]

    @property
    def cache_entries(self) -> int:
        return self._client.cache_entries

    async def close(self) -> None:
        await self._client.close()
