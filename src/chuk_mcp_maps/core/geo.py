"""
Geographic helper functions shared by the providers and the map service.
"""

import math
import re

from ..constants import ErrorMessages

_COORDINATE_RE = re.compile(r"^\s*-?\d+(\.\d+)?\s*,\s*-?\d+(\.\d+)?\s*$")


def is_coordinate(value: str) -> bool:
    """Return True if value looks like a "lat,lng" pair."""
    return bool(_COORDINATE_RE.match(value))


def parse_coordinates(value: str) -> tuple[float, float]:
    """Parse a "lat,lng" string.

    Args:
        value: Coordinates such as "40.0,-75.0"

    Returns:
        Tuple of (lat, lng)

    Raises:
        ValueError: If the string is not two comma-separated numbers
    """
    parts = value.split(",")
    if len(parts) != 2:
        raise ValueError(ErrorMessages.INVALID_COORDINATES)
    try:
        lat, lng = (float(p.strip()) for p in parts)
    except ValueError as e:
        raise ValueError(ErrorMessages.INVALID_COORDINATES) from e
    if math.isnan(lat) or math.isnan(lng):
        raise ValueError(ErrorMessages.INVALID_COORDINATES)
    return lat, lng


def validate_coordinates(lat: float, lng: float) -> None:
    """Validate lat/lng ranges."""
    if not (-90 <= lat <= 90):
        raise ValueError(ErrorMessages.INVALID_LAT.format(lat))
    if not (-180 <= lng <= 180):
        raise ValueError(ErrorMessages.INVALID_LON.format(lng))


def centroid(geometry: list[dict]) -> tuple[float, float]:
    """Average of an Overpass geometry list ([{"lat": .., "lon": ..}, ...])."""
    if not geometry:
        raise ValueError("Invalid geometry for centroid calculation")
    lat = sum(p["lat"] for p in geometry) / len(geometry)
    lng = sum(p["lon"] for p in geometry) / len(geometry)
    return lat, lng


def format_distance(meters: float) -> str:
    """Format a distance as "850 m" or "12.3 km"."""
    if meters < 1000:
        return f"{round(meters)} m"
    return f"{meters / 1000:.1f} km"


def format_duration(seconds: float) -> str:
    """Format a duration as "7 min" or "1 h 5 min"."""
    minutes = round(seconds / 60)
    if minutes < 60:
        return f"{minutes} min"
    hours, remaining = divmod(minutes, 60)
    return f"{hours} h {remaining} min"


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate distance between two points in metres using Haversine formula.

    Args:
        lat1, lon1: First point coordinates
        lat2, lon2: Second point coordinates

    Returns:
        Distance in metres
    """
    r = 6371000.0  # Earth radius in metres
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return r * c
