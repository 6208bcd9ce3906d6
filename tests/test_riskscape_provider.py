"""Tests for the RiskScape provider."""

import json

import httpx
import pytest
import respx

from chuk_mcp_maps.constants import RiskScapeConfig
from chuk_mcp_maps.core.providers import LatLng, RiskScapeProvider

BASE = RiskScapeConfig.BASE_URL

SEARCH_JSON = {
    "results": [
        {
            "id": 1,
            "name": "Open Diner",
            "location": {"lat": 40.01, "lng": -105.27},
            "rating": 4.5,
            "hours": {"open_now": True},
        },
        {
            "id": 2,
            "name": "Closed Bistro",
            "location": {"lat": 40.02, "lng": -105.28},
            "rating": 4.9,
            "hours": {"open_now": False},
        },
        {
            "id": 3,
            "name": "Low Rated",
            "location": {"lat": 40.03, "lng": -105.29},
            "rating": 2.0,
        },
    ]
}


@pytest.fixture
def provider():
    return RiskScapeProvider(api_key="rs-key")


class TestAuth:
    async def test_missing_key(self):
        provider = RiskScapeProvider(api_key=None)
        with pytest.raises(RuntimeError, match="RiskScape API key is required"):
            await provider.geocode("Boulder")

    @respx.mock
    async def test_headers(self, provider):
        route = respx.get(f"{BASE}/places/v2/search").mock(
            return_value=httpx.Response(200, json={"results": []})
        )
        await provider.search_nearby(LatLng(40.0, -105.0), 1000)
        headers = route.calls[0].request.headers
        assert headers["Authorization"] == "Bearer rs-key"
        assert headers["X-API-Version"] == "v2"


class TestSearchNearby:
    @respx.mock
    async def test_keyword_as_category(self, provider):
        route = respx.get(f"{BASE}/places/v2/search").mock(
            return_value=httpx.Response(200, json=SEARCH_JSON)
        )
        places = await provider.search_nearby(LatLng(40.0, -105.0), 1000, keyword="restaurant")
        assert route.calls[0].request.url.params["category"] == "restaurant"
        assert len(places) == 3
        assert places[0].place_id == "1"

    @respx.mock
    async def test_open_now_filter(self, provider):
        respx.get(f"{BASE}/places/v2/search").mock(return_value=httpx.Response(200, json=SEARCH_JSON))
        places = await provider.search_nearby(LatLng(40.0, -105.0), 1000, open_now=True)
        assert [p.name for p in places] == ["Open Diner"]

    @respx.mock
    async def test_min_rating_filter(self, provider):
        respx.get(f"{BASE}/places/v2/search").mock(return_value=httpx.Response(200, json=SEARCH_JSON))
        places = await provider.search_nearby(LatLng(40.0, -105.0), 1000, min_rating=4.0)
        assert [p.name for p in places] == ["Open Diner", "Closed Bistro"]


class TestGeocoding:
    @respx.mock
    async def test_geocode(self, provider):
        respx.get(f"{BASE}/addressing/v2/geocode").mock(
            return_value=httpx.Response(
                200,
                json={
                    "results": [
                        {
                            "location": {"lat": 40.01, "lng": -105.27},
                            "formatted_address": "Boulder, CO",
                            "address_id": 55,
                        }
                    ]
                },
            )
        )
        item = await provider.geocode("Boulder")
        assert item.place_id == "55"
        assert item.formatted_address == "Boulder, CO"

    @respx.mock
    async def test_reverse_not_found(self, provider):
        respx.get(f"{BASE}/addressing/v2/reverse-geocode").mock(
            return_value=httpx.Response(200, json={})
        )
        with pytest.raises(ValueError, match="Cannot find address"):
            await provider.reverse_geocode(0.0, 0.0)


class TestRouting:
    @respx.mock
    async def test_matrix_resolves_and_maps_mode(self, provider):
        route = respx.post(f"{BASE}/routing/v2/matrix").mock(
            return_value=httpx.Response(
                200,
                json={
                    "distances": [[{"value": 1200, "text": "1.2 km"}]],
                    "durations": [[300]],
                },
            )
        )
        matrix = await provider.distance_matrix(["40.0,-105.0"], ["39.7,-104.9"], "bicycling")
        body = json.loads(route.calls[0].request.content)
        assert body["mode"] == "cycling"
        assert body["origins"] == [{"lat": 40.0, "lng": -105.0}]
        assert matrix.distances[0][0].text == "1.2 km"
        assert matrix.durations[0][0].value == 300

    @respx.mock
    async def test_directions(self, provider):
        route = respx.get(f"{BASE}/routing/v2/directions").mock(
            return_value=httpx.Response(
                200,
                json={"routes": [{"summary": "Main St", "distance": 850, "duration": 420}]},
            )
        )
        result = await provider.directions("A", "B", "walking")
        assert route.calls[0].request.url.params["mode"] == "walking"
        assert result.total_distance.text == "850 m"
        assert result.total_duration.text == "7 min"

    @respx.mock
    async def test_elevation(self, provider):
        respx.post(f"{BASE}/elevation/v2/lookup").mock(
            return_value=httpx.Response(200, json={"elevations": [1655.0]})
        )
        points = await provider.elevation([LatLng(40.0, -105.0)])
        assert points[0].elevation == 1655.0
        assert points[0].location == LatLng(40.0, -105.0)
