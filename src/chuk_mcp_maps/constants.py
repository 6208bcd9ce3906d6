"""
Constants for chuk-mcp-maps server.

All magic strings, upstream API metadata, and configuration values live here.
"""


class ServerConfig:
    NAME = "chuk-mcp-maps"
    VERSION = "0.1.0"
    DESCRIPTION = "Maps MCP Server: places, geocoding, routing and elevation"
    DEFAULT_HOST = "0.0.0.0"  # noqa: S104
    DEFAULT_PORT = 3000
    DEFAULT_PROVIDER = "google"
    INSTRUCTIONS = (
        "Use 'maps_geocode' to convert addresses to coordinates and "
        "'maps_reverse_geocode' for the opposite direction. "
        "Use 'search_nearby' to find places around a point, then "
        "'get_place_details' with a returned place_id. "
        "Use 'maps_distance_matrix' and 'maps_directions' for travel "
        "distances and routes, and 'maps_elevation' for heights above sea level."
    )


class TransportConfig:
    PATH = "/mcp"
    HEALTH_PATH = "/health"
    SESSION_HEADER = "mcp-session-id"
    PUSH_BUFFER_SIZE = 100
    PING_INTERVAL_SECONDS = 15
    TOOL_TIMEOUT_SECONDS = 30.0
    SESSION_IDLE_TIMEOUT_SECONDS = 1800.0
    UNKNOWN_SESSION_CREATE = "create"
    UNKNOWN_SESSION_REJECT = "reject"
    UNKNOWN_SESSION_POLICIES = (UNKNOWN_SESSION_CREATE, UNKNOWN_SESSION_REJECT)
    SUPPORTED_PROTOCOL_VERSIONS = ("2024-11-05", "2025-03-26", "2025-06-18")
    LATEST_PROTOCOL_VERSION = "2025-06-18"


class ApiClientConfig:
    USER_AGENT = "chuk-mcp-maps/0.1.0"
    TIMEOUT_SECONDS = 30.0
    CACHE_TTL_SECONDS = 3600  # 1 hour
    CACHE_MAX_SIZE = 1000
    MAX_RETRIES = 3
    RETRY_BASE_DELAY = 2.0  # seconds, doubles each attempt
    RETRYABLE_STATUS_CODES = (429, 503)


class GoogleMapsConfig:
    BASE_URL = "https://maps.googleapis.com/maps/api"
    DETAIL_FIELDS = (
        "name,place_id,rating,formatted_address,opening_hours,reviews,geometry,"
        "formatted_phone_number,website,price_level,photos"
    )
    OK_STATUSES = ("OK", "ZERO_RESULTS")


class OSMConfig:
    NOMINATIM_URL = "https://nominatim.openstreetmap.org"
    OVERPASS_URL = "https://overpass-api.de/api"
    OSRM_URL = "https://router.project-osrm.org"
    ELEVATION_URL = "https://api.open-elevation.com/api/v1"
    RATE_LIMIT_SECONDS = 1.0
    OVERPASS_TIMEOUT = 25
    MAX_RESULTS = 20
    DEFAULT_AMENITIES = ["restaurant", "cafe", "shop", "hotel", "hospital"]


class RiskScapeConfig:
    BASE_URL = "https://api.riskscape.pro"
    API_VERSION = "v2"
    RESULT_LIMIT = 20


class EnvVar:
    MCP_SERVER_HOST = "MCP_SERVER_HOST"
    MCP_SERVER_PORT = "MCP_SERVER_PORT"
    MAP_API_PROVIDER = "MAP_API_PROVIDER"
    GOOGLE_MAPS_API_KEY = "GOOGLE_MAPS_API_KEY"
    RISKSCAPE_API_KEY = "RISKSCAPE_API_KEY"
    MCP_TOOL_TIMEOUT = "MCP_TOOL_TIMEOUT"
    MCP_SESSION_IDLE_TIMEOUT = "MCP_SESSION_IDLE_TIMEOUT"
    MCP_UNKNOWN_SESSION = "MCP_UNKNOWN_SESSION"
    LOG_LEVEL = "LOG_LEVEL"


class ProviderName:
    GOOGLE = "google"
    OSM = "osm"
    OPENSTREETMAP = "openstreetmap"
    RISKSCAPE = "riskscape"


PROVIDER_CHOICES = [
    ProviderName.GOOGLE,
    ProviderName.OSM,
    ProviderName.OPENSTREETMAP,
    ProviderName.RISKSCAPE,
]

PROVIDER_DISPLAY_NAMES = {
    ProviderName.GOOGLE: "Google Maps",
    ProviderName.OSM: "OpenStreetMap",
    ProviderName.OPENSTREETMAP: "OpenStreetMap",
    ProviderName.RISKSCAPE: "RiskScape",
}

# Travel modes accepted by the routing tools
TRAVEL_MODES = ["driving", "walking", "bicycling", "transit"]

# OSRM has no transit profile, so transit falls back to driving
OSRM_PROFILES = {
    "driving": "driving",
    "walking": "foot",
    "bicycling": "bike",
    "transit": "driving",
}

# Common search keywords mapped to OSM amenity values
OSM_AMENITY_MAP: dict[str, list[str]] = {
    "restaurant": ["restaurant", "fast_food", "cafe"],
    "food": ["restaurant", "fast_food", "cafe", "bar", "pub"],
    "cafe": ["cafe"],
    "hotel": ["hotel", "motel", "guest_house"],
    "gas": ["fuel"],
    "hospital": ["hospital", "clinic"],
    "bank": ["bank", "atm"],
    "pharmacy": ["pharmacy"],
    "shop": ["shop"],
    "shopping": ["shop", "mall"],
    "school": ["school", "university"],
    "park": ["park"],
}

# Nominatim address keys mapped to Google-style component types
OSM_ADDRESS_COMPONENT_TYPES = {
    "house_number": "street_number",
    "road": "route",
    "city": "locality",
    "town": "locality",
    "village": "locality",
    "state": "administrative_area_level_1",
    "postcode": "postal_code",
    "country": "country",
}

# Overpass address tags in display order
OSM_ADDRESS_TAGS = [
    "addr:housenumber",
    "addr:street",
    "addr:city",
    "addr:state",
    "addr:postcode",
    "addr:country",
]

# Input limits
MAX_SEARCH_RADIUS_M = 50000
MAX_MATRIX_ENTRIES = 25
MAX_ELEVATION_POINTS = 512

# RFC 5424 severities used by logging/setLevel, least to most severe
LOG_LEVELS = ["debug", "info", "notice", "warning", "error", "critical", "alert", "emergency"]

# Tool lists
PLACES_TOOLS = ["search_nearby", "get_place_details"]
GEOCODING_TOOLS = ["maps_geocode", "maps_reverse_geocode"]
ROUTING_TOOLS = ["maps_distance_matrix", "maps_directions", "maps_elevation"]
DISCOVERY_TOOLS = ["echo", "maps_status"]
ALL_TOOLS = PLACES_TOOLS + GEOCODING_TOOLS + ROUTING_TOOLS + DISCOVERY_TOOLS


class ErrorMessages:
    EMPTY_QUERY = "{} cannot be empty"
    INVALID_LAT = "Invalid latitude {}: must be between -90 and 90"
    INVALID_LON = "Invalid longitude {}: must be between -180 and 180"
    INVALID_COORDINATES = "Invalid coordinate format, please use 'latitude,longitude' format"
    INVALID_MODE = "Invalid travel mode '{}': must be one of {}"
    INVALID_DATETIME = "Invalid {} '{}': expected an ISO 8601 timestamp"
    TOO_MANY = "{} accepts at most {} entries, got {}"
    NOT_FOUND_ADDRESS = "Cannot find location for this address"
    NOT_FOUND_COORDINATES = "Cannot find address for these coordinates"
    PLACE_NOT_FOUND = "Place not found"
    NO_ROUTES = "No routes found"
    RATE_LIMITED = "{} rate limit exceeded. Please wait and retry."
    API_ERROR = "{} API error (HTTP {}): {}"
    UPSTREAM_STATUS = "{} error: {}"
    NETWORK_ERROR = "Network error contacting {}: {}"
    MISSING_API_KEY = "{} API key is required"
    UNKNOWN_PROVIDER = "Unknown map provider '{}': must be one of {}"
    UNKNOWN_TOOL = "Unknown tool: {}"
    INVALID_PARAMS = "Invalid arguments for tool {}: {}"
    TOOL_FAILED = "Error executing tool {}: {}"
    TOOL_TIMEOUT = "Tool '{}' timed out after {}s"
    INVALID_SESSION = "Bad Request: No valid session ID provided"
    SESSION_NOT_INITIALIZED = "Bad Request: Session not initialized"
    SESSION_ALREADY_INITIALIZED = "Invalid Request: Session already initialized"
    SESSION_TERMINATED = "Session terminated"
    BATCHED_INITIALIZE = "Invalid Request: initialize must not be part of a batch"
    STREAM_CONFLICT = "Conflict: Only one push stream is allowed per session"
    SHUTTING_DOWN = "Service Unavailable: server is shutting down"
    PARSE_ERROR = "Parse error: {}"
    INVALID_REQUEST = "Invalid Request: {}"
    METHOD_NOT_FOUND = "Method not found: {}"
    INVALID_LOG_LEVEL = "Invalid log level '{}': must be one of {}"


class SuccessMessages:
    NEARBY_FOUND = "Found {} place(s) within {:.0f} m of ({:.6f}, {:.6f})"
    PLACE_DETAILS = "Details for {}"
    GEOCODE_FOUND = "Geocoded '{}' to ({:.6f}, {:.6f})"
    REVERSE_FOUND = "Reverse geocoded ({}, {}) to: {}"
    DISTANCE_MATRIX = "Distance matrix for {} origin(s) x {} destination(s) by {}"
    DIRECTIONS = "Route from '{}' to '{}': {}, {}"
    ELEVATION = "Elevation for {} location(s)"
    STATUS = "Maps MCP Server v{} using {}"
