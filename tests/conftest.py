"""Shared test fixtures for chuk-mcp-maps."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.requests import Request

from chuk_mcp_maps.core.providers import (
    AddressComponent,
    DistanceMatrix,
    ElevationPoint,
    GeocodeItem,
    LatLng,
    MatrixCell,
    Place,
    PlaceDetail,
    ReverseGeocodeItem,
    Route,
)

# Sample provider results (Boulder, Colorado)
SAMPLE_GEOCODE = GeocodeItem(
    lat=40.0149856,
    lng=-105.2705456,
    formatted_address="Boulder, CO, USA",
    place_id="ChIJ06-NJ06Na4cRWIAboHw7Ocw",
)

SAMPLE_PLACES = [
    Place(
        name="Far Cafe",
        place_id="far",
        lat=40.0249856,
        lng=-105.2705456,
        formatted_address="2 Far St",
        rating=4.1,
        user_ratings_total=12,
        open_now=True,
    ),
    Place(
        name="Near Cafe",
        place_id="near",
        lat=40.0159856,
        lng=-105.2705456,
        formatted_address="1 Near St",
        rating=4.6,
        user_ratings_total=230,
        open_now=None,
    ),
]

SAMPLE_DETAIL = PlaceDetail(
    name="Near Cafe",
    place_id="near",
    lat=40.0159856,
    lng=-105.2705456,
    formatted_address="1 Near St, Boulder, CO",
    rating=4.6,
    open_now=True,
    phone="(303) 555-0100",
    website="https://near.example.com",
    price_level=2,
    reviews=[
        {
            "author_name": "Ana",
            "rating": 5,
            "text": "Great coffee",
            "relative_time_description": "a week ago",
        }
    ],
    photos=[{"photo_reference": "abc"}],
)

SAMPLE_REVERSE = ReverseGeocodeItem(
    formatted_address="1 Near St, Boulder, CO 80302, USA",
    place_id="rev-1",
    components=[
        AddressComponent(long_name="Boulder", short_name="Boulder", types=["locality"]),
        AddressComponent(long_name="Colorado", short_name="CO", types=["administrative_area_level_1"]),
    ],
)

SAMPLE_MATRIX = DistanceMatrix(
    distances=[[MatrixCell(48200, "48.2 km"), None]],
    durations=[[MatrixCell(2700, "45 min"), None]],
    origin_addresses=["Boulder, CO, USA"],
    destination_addresses=["Denver, CO, USA", "Nowhere"],
)

SAMPLE_ROUTE = Route(
    summary="US-36 E",
    total_distance=MatrixCell(48200, "48.2 km"),
    total_duration=MatrixCell(2700, "45 min"),
    departure_time="2026-01-01T09:00:00+00:00",
    arrival_time="2026-01-01T09:45:00+00:00",
    routes=[
        {
            "legs": [
                {
                    "steps": [
                        {"html_instructions": "Head <b>south</b> on Broadway"},
                        {"html_instructions": "Merge onto <b>US-36 E</b>"},
                    ]
                }
            ]
        }
    ],
)

SAMPLE_ELEVATION = [
    ElevationPoint(elevation=1655.0, location=LatLng(lat=40.0149856, lng=-105.2705456)),
    ElevationPoint(elevation=1609.3, location=LatLng(lat=39.7392, lng=-104.9903)),
]


@pytest.fixture
def mock_provider():
    """MapProvider stand-in with canned results."""
    provider = MagicMock()
    provider.name = "google"
    provider.cache_entries = 3
    # Fresh Place objects per call; the service annotates them in place
    provider.search_nearby = AsyncMock(
        side_effect=lambda *args, **kwargs: [Place(**vars(p)) for p in SAMPLE_PLACES]
    )
    provider.place_details = AsyncMock(return_value=SAMPLE_DETAIL)
    provider.geocode = AsyncMock(return_value=SAMPLE_GEOCODE)
    provider.reverse_geocode = AsyncMock(return_value=SAMPLE_REVERSE)
    provider.distance_matrix = AsyncMock(return_value=SAMPLE_MATRIX)
    provider.directions = AsyncMock(return_value=SAMPLE_ROUTE)
    provider.elevation = AsyncMock(return_value=SAMPLE_ELEVATION)
    provider.close = AsyncMock()
    return provider


@pytest.fixture
def map_service(mock_provider):
    """MapService with a mocked provider."""
    from chuk_mcp_maps.core.maps import MapService

    return MapService(mock_provider)


@pytest.fixture
def capture_tools():
    """Run a register_* function against a mock server and return its tools by name."""

    def run(register, maps):
        tools = {}

        def capture_tool(**kwargs):
            def decorator(fn):
                tools[fn.__name__] = fn
                return fn

            return decorator

        mcp = MagicMock()
        mcp.tool = capture_tool
        register(mcp, maps)
        return tools

    return run


@pytest.fixture
def rpc_registry():
    """Registry with a single echo tool for transport tests."""
    from chuk_mcp_maps.rpc.registry import ToolRegistry

    registry = ToolRegistry()

    @registry.tool()
    async def echo(message: str) -> str:
        """Echo a message."""
        return message

    return registry


@pytest.fixture
def rpc_dispatcher(rpc_registry):
    from chuk_mcp_maps.rpc.dispatcher import RpcDispatcher

    return RpcDispatcher(rpc_registry, "test-server", "1.0.0")


@pytest.fixture
def make_request():
    """Build a Starlette request for the /mcp endpoint."""

    def build(method="POST", body=None, session_id=None):
        if body is not None and not isinstance(body, (bytes, str)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode()
        headers = [(b"content-type", b"application/json")]
        if session_id is not None:
            headers.append((b"mcp-session-id", session_id.encode()))

        async def receive():
            return {"type": "http.request", "body": body or b"", "more_body": False}

        scope = {
            "type": "http",
            "method": method,
            "path": "/mcp",
            "query_string": b"",
            "headers": headers,
        }
        return Request(scope, receive)

    return build


@pytest.fixture
def rpc():
    """Build a JSON-RPC request body."""

    def build(method, params=None, request_id=1):
        message = {"jsonrpc": "2.0", "id": request_id, "method": method}
        if params is not None:
            message["params"] = params
        return message

    return build


@pytest.fixture
def initialize_body(rpc):
    return rpc(
        "initialize",
        {
            "protocolVersion": "2025-06-18",
            "capabilities": {},
            "clientInfo": {"name": "pytest", "version": "1"},
        },
    )
