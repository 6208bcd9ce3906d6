"""
RiskScape provider (v2 REST API, bearer token authentication).
"""

import asyncio
import logging
from datetime import datetime

from ...constants import ErrorMessages, ProviderName, RiskScapeConfig
from ..client import ApiClient
from ..geo import format_distance, format_duration, is_coordinate, parse_coordinates
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


def _riskscape_mode(mode: str) -> str:
    return "cycling" if mode == "bicycling" else mode


def _cell(raw) -> MatrixCell | None:
    if raw is None:
        return None
    if isinstance(raw, dict):
        return MatrixCell(value=raw["value"], text=raw.get("text", str(raw["value"])))
    return MatrixCell(value=raw, text=str(raw))


class RiskScapeProvider(MapProvider):
    """Map provider backed by the RiskScape v2 API."""

    name = ProviderName.RISKSCAPE

    def __init__(self, api_key: str | None, client: ApiClient | None = None):
        self._api_key = api_key or ""
        self._client = client or ApiClient(
            RiskScapeConfig.BASE_URL,
            "RiskScape",
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Accept": "application/json",
                "X-API-Version": RiskScapeConfig.API_VERSION,
            },
        )

    def _check_key(self) -> None:
        if not self._api_key:
            raise RuntimeError(ErrorMessages.MISSING_API_KEY.format("RiskScape"))

    async def _get(self, path: str, params: dict) -> dict:
        self._check_key()
        return await self._client.get(path, params)

    async def _post(self, path: str, body: dict) -> dict:
        self._check_key()
        return await self._client.post(path, json_body=body)

    async def search_nearby(
        self,
        location: LatLng,
        radius: float,
        keyword: str | None = None,
        open_now: bool = False,
        min_rating: float | None = None,
    ) -> list[Place]:
        params: dict[str, str | float | int] = {
            "lat": location.lat,
            "lng": location.lng,
            "radius": radius,
            "limit": RiskScapeConfig.RESULT_LIMIT,
        }
        if keyword:
            params["category"] = keyword
        data = await self._get("/places/v2/search", params)

        places = []
        for result in data.get("results", []):
            hours = result.get("hours") or {}
            if open_now and hours.get("open_now") is not True:
                continue
            if min_rating is not None and (result.get("rating") or 0) < min_rating:
                continue
            places.append(
                Place(
                    name=result.get("name", ""),
                    place_id=str(result.get("id", "")),
                    lat=result["location"]["lat"],
                    lng=result["location"]["lng"],
                    formatted_address=result.get("address"),
                    rating=result.get("rating"),
                    user_ratings_total=result.get("review_count"),
                    open_now=hours.get("open_now"),
                )
            )
        return places

    async def place_details(self, place_id: str) -> PlaceDetail:
        data = await self._get(f"/places/v2/details/{place_id}", {})
        contact = data.get("contact") or {}
        return PlaceDetail(
            name=data.get("name", ""),
            place_id=place_id,
            lat=data["location"]["lat"],
            lng=data["location"]["lng"],
            formatted_address=data.get("address"),
            rating=data.get("rating"),
            open_now=(data.get("hours") or {}).get("open_now"),
            phone=contact.get("phone"),
            website=contact.get("website"),
            price_level=data.get("price_level"),
            reviews=data.get("reviews") or [],
            photos=data.get("photos") or [],
        )

    async def geocode(self, address: str) -> GeocodeItem:
        data = await self._get("/addressing/v2/geocode", {"address": address, "limit": 1})
        results = data.get("results") or []
        if not results:
            raise ValueError(ErrorMessages.NOT_FOUND_ADDRESS)
        result = results[0]
        return GeocodeItem(
            lat=result["location"]["lat"],
            lng=result["location"]["lng"],
            formatted_address=result.get("formatted_address", ""),
            place_id=str(result.get("address_id", "")),
        )

    async def reverse_geocode(self, lat: float, lng: float) -> ReverseGeocodeItem:
        data = await self._get("/addressing/v2/reverse-geocode", {"lat": lat, "lng": lng})
        address = data.get("address")
        if not address:
            raise ValueError(ErrorMessages.NOT_FOUND_COORDINATES)
        return ReverseGeocodeItem(
            formatted_address=address.get("formatted_address", ""),
            place_id=str(address.get("address_id", "")),
            components=[
                AddressComponent(long_name=value, short_name=value, types=[key])
                for key, value in (address.get("components") or {}).items()
            ],
        )

    async def _resolve(self, value: str) -> dict:
        if is_coordinate(value):
            lat, lng = parse_coordinates(value)
        else:
            item = await self.geocode(value)
            lat, lng = item.lat, item.lng
        return {"lat": lat, "lng": lng}

    async def distance_matrix(
        self,
        origins: list[str],
        destinations: list[str],
        mode: str = "driving",
    ) -> DistanceMatrix:
        origin_coords = await asyncio.gather(*(self._resolve(o) for o in origins))
        dest_coords = await asyncio.gather(*(self._resolve(d) for d in destinations))
        data = await self._post(
            "/routing/v2/matrix",
            {
                "origins": list(origin_coords),
                "destinations": list(dest_coords),
                "mode": _riskscape_mode(mode),
                "units": "metric",
            },
        )
        return DistanceMatrix(
            distances=[[_cell(v) for v in row] for row in data.get("distances", [])],
            durations=[[_cell(v) for v in row] for row in data.get("durations", [])],
            origin_addresses=data.get("origin_addresses") or list(origins),
            destination_addresses=data.get("destination_addresses") or list(destinations),
        )

    async def directions(
        self,
        origin: str,
        destination: str,
        mode: str = "driving",
        departure_time: datetime | None = None,
        arrival_time: datetime | None = None,
    ) -> Route:
        params = {
            "origin": origin,
            "destination": destination,
            "mode": _riskscape_mode(mode),
            "units": "metric",
        }
        if departure_time:
            params["departure_time"] = departure_time.isoformat()
        if arrival_time:
            params["arrival_time"] = arrival_time.isoformat()
        data = await self._get("/routing/v2/directions", params)
        routes = data.get("routes") or []
        if not routes:
            raise ValueError(ErrorMessages.NO_ROUTES)

        route = routes[0]
        return Route(
            summary=route.get("summary", ""),
            total_distance=MatrixCell(route["distance"], format_distance(route["distance"])),
            total_duration=MatrixCell(route["duration"], format_duration(route["duration"])),
            departure_time=route.get("departure_time", ""),
            arrival_time=route.get("arrival_time", ""),
            routes=routes,
        )

    async def elevation(self, points: list[LatLng]) -> list[ElevationPoint]:
        data = await self._post(
            "/elevation/v2/lookup",
            {"points": [{"lat": p.lat, "lng": p.lng} for p in points], "resolution": "high"},
        )
        elevations = data.get("elevations")
        if elevations is None:
            raise RuntimeError("Failed to get elevation data")
        return [
            ElevationPoint(elevation=value, location=points[i])
            for i, value in enumerate(elevations)
        ]

    @property
    def cache_entries(self) -> int:
        return self._client.cache_entries

    async def close(self) -> None:
        await self._client.close()
