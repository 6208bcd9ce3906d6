"""
OpenStreetMap provider.

Combines the free community services: Nominatim for geocoding and place
lookup, Overpass for nearby amenities, OSRM for routing, and Open-Elevation
for heights. No API key is required.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from ...constants import (
    OSM_ADDRESS_COMPONENT_TYPES,
    OSM_ADDRESS_TAGS,
    OSM_AMENITY_MAP,
    OSRM_PROFILES,
    ErrorMessages,
    OSMConfig,
    ProviderName,
)
from ..client import ApiClient
from ..geo import centroid, format_distance, format_duration, is_coordinate, parse_coordinates
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


def is_open_now(opening_hours: str | None) -> bool | None:
    """Rough open-now check for an OSM opening_hours tag.

    Only "24/7" and "closed" are recognised; anything else is unknown.
    """
    if not opening_hours:
        return None
    if "24/7" in opening_hours:
        return True
    if "closed" in opening_hours:
        return False
    return None


def format_osm_address(tags: dict) -> str:
    parts = [tags[key] for key in OSM_ADDRESS_TAGS if tags.get(key)]
    return ", ".join(parts) if parts else "Address not available"


def convert_address_components(address: dict) -> list[AddressComponent]:
    """Convert a Nominatim address dict to Google-style components."""
    components = []
    for key, value in address.items():
        component_type = OSM_ADDRESS_COMPONENT_TYPES.get(key)
        if component_type and value:
            components.append(
                AddressComponent(long_name=value, short_name=value, types=[component_type])
            )
    return components


def escape_overpass_string(value: str) -> str:
    """Escape a value for a double-quoted Overpass QL string."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def build_overpass_query(amenities: list[str], radius: float, lat: float, lng: float) -> str:
    around = f"(around:{radius:g},{lat},{lng})"
    values = [escape_overpass_string(a) for a in amenities]
    statements = "\n  ".join(
        f'node["amenity"="{a}"]{around};\n  way["amenity"="{a}"]{around};' for a in values
    )
    return f"[out:json][timeout:{OSMConfig.OVERPASS_TIMEOUT}];\n(\n  {statements}\n);\nout geom;"


class OpenStreetMapProvider(MapProvider):
    """Map provider backed by Nominatim, Overpass, OSRM and Open-Elevation."""

    name = ProviderName.OSM

    def __init__(
        self,
        nominatim: ApiClient | None = None,
        overpass: ApiClient | None = None,
        osrm: ApiClient | None = None,
        elevation_api: ApiClient | None = None,
    ):
        self._nominatim = nominatim or ApiClient(
            OSMConfig.NOMINATIM_URL, "Nominatim", min_interval=OSMConfig.RATE_LIMIT_SECONDS
        )
        self._overpass = overpass or ApiClient(OSMConfig.OVERPASS_URL, "Overpass")
        self._osrm = osrm or ApiClient(OSMConfig.OSRM_URL, "OSRM")
        self._elevation = elevation_api or ApiClient(OSMConfig.ELEVATION_URL, "Open-Elevation")

    async def search_nearby(
        self,
        location: LatLng,
        radius: float,
        keyword: str | None = None,
        open_now: bool = False,
        min_rating: float | None = None,
    ) -> list[Place]:
        if keyword:
            amenities = OSM_AMENITY_MAP.get(keyword.lower(), [keyword.lower()])
        else:
            amenities = OSMConfig.DEFAULT_AMENITIES
        query = build_overpass_query(amenities, radius, location.lat, location.lng)
        data = await self._overpass.post(
            "/interpreter", content=query, headers={"Content-Type": "text/plain"}
        )

        places: list[Place] = []
        for element in data.get("elements", []):
            tags = element.get("tags", {})
            if element.get("type") == "node":
                lat, lng = element["lat"], element["lon"]
            elif element.get("type") == "way" and element.get("geometry"):
                lat, lng = centroid(element["geometry"])
            else:
                continue
            places.append(
                Place(
                    name=tags.get("name") or tags.get("amenity") or "Place",
                    place_id=f"{element['type']}/{element['id']}",
                    lat=lat,
                    lng=lng,
                    formatted_address=format_osm_address(tags),
                    open_now=is_open_now(tags.get("opening_hours")),
                )
            )

        # OSM has no ratings, so min_rating cannot filter anything
        if open_now:
            places = [p for p in places if p.open_now is not False]
        return places[: OSMConfig.MAX_RESULTS]

    async def place_details(self, place_id: str) -> PlaceDetail:
        osm_type, _, osm_id = place_id.partition("/")
        if not osm_type or not osm_id:
            raise ValueError(f"Invalid OpenStreetMap place id '{place_id}': expected 'type/id'")
        data = await self._nominatim.get(
            "/lookup",
            {
                "osm_ids": f"{osm_type[0].upper()}{osm_id}",
                "format": "json",
                "addressdetails": "1",
                "extratags": "1",
            },
        )
        if not data:
            raise ValueError(ErrorMessages.PLACE_NOT_FOUND)

        place = data[0]
        extratags = place.get("extratags") or {}
        display_name = place.get("display_name", "")
        return PlaceDetail(
            name=display_name.split(",")[0],
            place_id=place_id,
            lat=float(place["lat"]),
            lng=float(place["lon"]),
            formatted_address=display_name,
            open_now=is_open_now(extratags.get("opening_hours")),
            phone=extratags.get("phone") or extratags.get("contact:phone"),
            website=extratags.get("website") or extratags.get("contact:website"),
        )

    async def geocode(self, address: str) -> GeocodeItem:
        data = await self._nominatim.get(
            "/search", {"q": address, "format": "json", "limit": 1, "addressdetails": "1"}
        )
        if not data:
            raise ValueError(ErrorMessages.NOT_FOUND_ADDRESS)
        result = data[0]
        return GeocodeItem(
            lat=float(result["lat"]),
            lng=float(result["lon"]),
            formatted_address=result.get("display_name", ""),
            place_id=f"{result.get('osm_type')}/{result.get('osm_id')}",
        )

    async def reverse_geocode(self, lat: float, lng: float) -> ReverseGeocodeItem:
        data = await self._nominatim.get(
            "/reverse", {"lat": lat, "lon": lng, "format": "json", "addressdetails": "1"}
        )
        if not data or data.get("error"):
            raise ValueError(ErrorMessages.NOT_FOUND_COORDINATES)
        return ReverseGeocodeItem(
            formatted_address=data.get("display_name", ""),
            place_id=f"{data.get('osm_type')}/{data.get('osm_id')}",
            components=convert_address_components(data.get("address", {})),
        )

    async def _resolve(self, value: str) -> LatLng:
        if is_coordinate(value):
            lat, lng = parse_coordinates(value)
            return LatLng(lat=lat, lng=lng)
        item = await self.geocode(value)
        return LatLng(lat=item.lat, lng=item.lng)

    async def _osrm_get(self, service: str, profile: str, coords: list[LatLng], params: dict):
        coord_str = ";".join(f"{c.lng},{c.lat}" for c in coords)
        data = await self._osrm.get(f"/{service}/v1/{profile}/{coord_str}", params)
        if data.get("code") != "Ok":
            raise RuntimeError(ErrorMessages.UPSTREAM_STATUS.format("OSRM", data.get("code")))
        return data

    async def distance_matrix(
        self,
        origins: list[str],
        destinations: list[str],
        mode: str = "driving",
    ) -> DistanceMatrix:
        origin_coords = await asyncio.gather(*(self._resolve(o) for o in origins))
        dest_coords = await asyncio.gather(*(self._resolve(d) for d in destinations))
        n_origins = len(origin_coords)
        data = await self._osrm_get(
            "table",
            OSRM_PROFILES.get(mode, "driving"),
            [*origin_coords, *dest_coords],
            {
                "sources": ";".join(str(i) for i in range(n_origins)),
                "destinations": ";".join(
                    str(i + n_origins) for i in range(len(dest_coords))
                ),
                "annotations": "duration,distance",
            },
        )

        distances: list[list[MatrixCell | None]] = []
        durations: list[list[MatrixCell | None]] = []
        for i, row in enumerate(data.get("durations", [])):
            distance_row: list[MatrixCell | None] = []
            duration_row: list[MatrixCell | None] = []
            for j, duration in enumerate(row):
                distance = data["distances"][i][j]
                if duration is None or distance is None:
                    distance_row.append(None)
                    duration_row.append(None)
                    continue
                distance_row.append(MatrixCell(round(distance), format_distance(distance)))
                duration_row.append(MatrixCell(round(duration), format_duration(duration)))
            distances.append(distance_row)
            durations.append(duration_row)

        return DistanceMatrix(
            distances=distances,
            durations=durations,
            origin_addresses=list(origins),
            destination_addresses=list(destinations),
        )

    async def directions(
        self,
        origin: str,
        destination: str,
        mode: str = "driving",
        departure_time: datetime | None = None,
        arrival_time: datetime | None = None,
    ) -> Route:
        origin_coord = await self._resolve(origin)
        dest_coord = await self._resolve(destination)
        profile = OSRM_PROFILES.get(mode, "driving")
        data = await self._osrm_get(
            "route",
            profile,
            [origin_coord, dest_coord],
            {"steps": "true", "geometries": "geojson", "overview": "full"},
        )
        if not data.get("routes"):
            raise ValueError(ErrorMessages.NO_ROUTES)

        route = data["routes"][0]
        departure = departure_time or datetime.now(timezone.utc)
        arrival = arrival_time or departure + timedelta(seconds=route["duration"])
        return Route(
            summary=f"Route via OSRM {profile}",
            total_distance=MatrixCell(round(route["distance"]), format_distance(route["distance"])),
            total_duration=MatrixCell(round(route["duration"]), format_duration(route["duration"])),
            departure_time=departure.isoformat(),
            arrival_time=arrival.isoformat(),
            routes=data["routes"],
        )

    async def elevation(self, points: list[LatLng]) -> list[ElevationPoint]:
        data = await self._elevation.post(
            "/lookup",
            json_body={"locations": [{"latitude": p.lat, "longitude": p.lng} for p in points]},
        )
        if "results" not in data:
            raise RuntimeError("Invalid response from elevation service")
        return [
            ElevationPoint(
                elevation=item["elevation"],
                location=LatLng(lat=item["latitude"], lng=item["longitude"]),
            )
            for item in data["results"]
        ]

    @property
    def cache_entries(self) -> int:
        return self._nominatim.cache_entries + self._osrm.cache_entries

    async def close(self) -> None:
        for client in (self._nominatim, self._overpass, self._osrm, self._elevation):
            await client.close()
