"""Tests for geographic helper functions."""

import pytest

from chuk_mcp_maps.core.geo import (
    centroid,
    format_distance,
    format_duration,
    haversine_distance,
    is_coordinate,
    parse_coordinates,
    validate_coordinates,
)


class TestIsCoordinate:
    def test_plain_pair(self):
        assert is_coordinate("40.0,-105.27")

    def test_with_spaces(self):
        assert is_coordinate(" 40.0 , -105.27 ")

    def test_integers(self):
        assert is_coordinate("40,-105")

    def test_address(self):
        assert not is_coordinate("Boulder, Colorado")

    def test_three_parts(self):
        assert not is_coordinate("1,2,3")


class TestParseCoordinates:
    def test_parses_pair(self):
        assert parse_coordinates("40.5,-105.25") == (40.5, -105.25)

    def test_strips_whitespace(self):
        assert parse_coordinates(" 1.5 , 2.5 ") == (1.5, 2.5)

    def test_rejects_single_value(self):
        with pytest.raises(ValueError, match="latitude,longitude"):
            parse_coordinates("40.5")

    def test_rejects_text(self):
        with pytest.raises(ValueError, match="latitude,longitude"):
            parse_coordinates("north,south")

    def test_rejects_nan(self):
        with pytest.raises(ValueError):
            parse_coordinates("nan,1")


class TestValidateCoordinates:
    def test_valid(self):
        validate_coordinates(40.0, -105.0)

    def test_bounds_inclusive(self):
        validate_coordinates(90, 180)
        validate_coordinates(-90, -180)

    def test_lat_out_of_range(self):
        with pytest.raises(ValueError, match="latitude"):
            validate_coordinates(91, 0)

    def test_lng_out_of_range(self):
        with pytest.raises(ValueError, match="longitude"):
            validate_coordinates(0, 181)


class TestCentroid:
    def test_average(self):
        lat, lng = centroid([{"lat": 0.0, "lon": 0.0}, {"lat": 2.0, "lon": 4.0}])
        assert lat == 1.0
        assert lng == 2.0

    def test_single_point(self):
        assert centroid([{"lat": 5.0, "lon": 6.0}]) == (5.0, 6.0)

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            centroid([])


class TestFormatDistance:
    def test_metres(self):
        assert format_distance(850) == "850 m"

    def test_kilometres(self):
        assert format_distance(12345) == "12.3 km"

    def test_exactly_one_km(self):
        assert format_distance(1000) == "1.0 km"


class TestFormatDuration:
    def test_minutes(self):
        assert format_duration(420) == "7 min"

    def test_hours(self):
        assert format_duration(3900) == "1 h 5 min"

    def test_rounds(self):
        assert format_duration(89) == "1 min"


class TestHaversine:
    def test_same_point(self):
        assert haversine_distance(40.0, -105.0, 40.0, -105.0) == 0.0

    def test_one_degree_latitude(self):
        d = haversine_distance(0.0, 0.0, 1.0, 0.0)
        assert 111000 < d < 111400

    def test_symmetric(self):
        a = haversine_distance(40.0, -105.0, 39.7, -104.9)
        b = haversine_distance(39.7, -104.9, 40.0, -105.0)
        assert a == pytest.approx(b)
