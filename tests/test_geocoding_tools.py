"""Tests for geocoding tool registration and execution."""

import json

import pytest

from chuk_mcp_maps.tools.geocoding.api import register_geocoding_tools


@pytest.fixture
def geocoding_tools(capture_tools, map_service):
    return capture_tools(register_geocoding_tools, map_service)


class TestRegistration:
    def test_registers_two_tools(self, geocoding_tools):
        assert len(geocoding_tools) == 2

    def test_registers_geocode(self, geocoding_tools):
        assert "maps_geocode" in geocoding_tools

    def test_registers_reverse_geocode(self, geocoding_tools):
        assert "maps_reverse_geocode" in geocoding_tools


class TestGeocode:
    async def test_returns_json(self, geocoding_tools):
        data = json.loads(await geocoding_tools["maps_geocode"](address="Boulder"))
        assert data["address"] == "Boulder"
        assert data["location"] == {"lat": 40.0149856, "lng": -105.2705456}
        assert data["formatted_address"] == "Boulder, CO, USA"

    async def test_message(self, geocoding_tools):
        data = json.loads(await geocoding_tools["maps_geocode"](address="Boulder"))
        assert data["message"] == "Geocoded 'Boulder' to (40.014986, -105.270546)"

    async def test_text_output(self, geocoding_tools):
        result = await geocoding_tools["maps_geocode"](address="Boulder", output_mode="text")
        assert "Address: Boulder, CO, USA" in result

    async def test_not_found(self, geocoding_tools, mock_provider):
        mock_provider.geocode.side_effect = ValueError("Cannot find location for this address")
        result = await geocoding_tools["maps_geocode"](address="Atlantis")
        assert result.is_error
        assert "Cannot find location" in result.content[0].text


class TestReverseGeocode:
    async def test_returns_json(self, geocoding_tools, mock_provider):
        data = json.loads(
            await geocoding_tools["maps_reverse_geocode"](latitude=40.0, longitude=-105.0)
        )
        mock_provider.reverse_geocode.assert_awaited_once_with(40.0, -105.0)
        assert data["formatted_address"].startswith("1 Near St")
        assert data["address_components"][1]["short_name"] == "CO"

    async def test_text_output(self, geocoding_tools):
        result = await geocoding_tools["maps_reverse_geocode"](
            latitude=40.0, longitude=-105.0, output_mode="text"
        )
        assert "locality: Boulder" in result

    async def test_provider_failure(self, geocoding_tools, mock_provider):
        mock_provider.reverse_geocode.side_effect = ConnectionError("Network error contacting Nominatim")
        result = await geocoding_tools["maps_reverse_geocode"](latitude=1.0, longitude=2.0)
        assert result.is_error
