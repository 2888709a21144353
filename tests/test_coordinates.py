"""Tests for coordinate validation and distance helpers."""

import math

import pytest

from validation.coordinates import (
    calculate_distance,
    is_within_radius,
    validate_coordinate_precision,
    validate_coordinates,
    validate_coordinates_for_region,
)


class TestValidateCoordinates:
    def test_both_missing_is_valid(self):
        result = validate_coordinates(None, None)
        assert result.is_valid
        assert result.lat is None and result.lng is None

    def test_valid_pair(self):
        result = validate_coordinates(40.7306, -73.9352)
        assert result.is_valid
        assert (result.lat, result.lng) == (40.7306, -73.9352)
        assert result.warnings == []

    def test_partial_rejected(self):
        result = validate_coordinates(40.7, None)
        assert not result.is_valid
        assert result.error == "Both latitude and longitude must be provided"

    def test_partial_allowed(self):
        assert validate_coordinates(40.7, None, allow_partial=True).is_valid

    def test_null_island_rejected(self):
        result = validate_coordinates(0, 0)
        assert not result.is_valid
        assert "(0,0)" in result.error

    def test_null_island_rejected_without_realism_checks(self):
        assert not validate_coordinates(0, 0, check_realistic_bounds=False).is_valid

    @pytest.mark.parametrize(("lat", "lng"), [(91, 0), (-90.5, 10), (10, 181), (10, -180.01)])
    def test_out_of_range(self, lat, lng):
        result = validate_coordinates(lat, lng)
        assert not result.is_valid
        assert "must be between" in result.error

    @pytest.mark.parametrize(
        ("lat", "lng", "message"),
        [
            (math.nan, 10, "Latitude must be a valid number"),
            (10, "abc", "Longitude must be a valid number"),
            (math.inf, 10, "Latitude must be a finite number"),
            (True, 10, "Latitude must be a valid number"),
        ],
    )
    def test_non_numbers(self, lat, lng, message):
        result = validate_coordinates(lat, lng)
        assert not result.is_valid
        assert result.error == message

    def test_rounds_and_warns_on_excess_precision(self):
        result = validate_coordinates(40.123456789, -73.1)
        assert result.is_valid
        assert result.lat == 40.123457
        assert result.warnings == ["Latitude has 9 decimal places (recommended: 6)"]

    def test_custom_precision(self):
        result = validate_coordinates(40.12345, -73.12345, precision=2)
        assert (result.lat, result.lng) == (40.12, -73.12)
        assert len(result.warnings) == 2

    def test_polar_warning(self):
        result = validate_coordinates(86.5, 20)
        assert result.is_valid
        assert any("poles" in w for w in result.warnings)
        assert any("uninhabited" in w for w in result.warnings)

    def test_ocean_sentinel_warning(self):
        result = validate_coordinates(0.5, 179.5)
        assert any("ocean" in w for w in result.warnings)

    def test_realism_checks_can_be_disabled(self):
        assert validate_coordinates(86.5, 20, check_realistic_bounds=False).warnings == []


class TestCoordinateHelpers:
    def test_precision_for_use_case(self):
        assert validate_coordinate_precision(40.7128, -74.006, "venue").is_valid
        result = validate_coordinate_precision(40.7, -74.0, "city")
        assert not result.is_valid
        assert result.recommended_precision == 3

    def test_precision_too_fine(self):
        result = validate_coordinate_precision(40.123456789, -74.1234, "exact")
        assert result.error == "Coordinates have too many decimal places (max 8)"

    def test_distance_new_york_to_los_angeles(self):
        distance = calculate_distance(40.7128, -74.0060, 34.0522, -118.2437)
        assert distance == pytest.approx(3936, rel=0.01)

    def test_distance_same_point(self):
        assert calculate_distance(51.5, -0.12, 51.5, -0.12) == pytest.approx(0)

    def test_within_radius(self):
        assert is_within_radius(40.73, -73.99, 40.7128, -74.0060, 5)
        assert not is_within_radius(34.05, -118.24, 40.7128, -74.0060, 100)

    def test_region_bounds(self):
        assert validate_coordinates_for_region(40.7, -74.0, "US").is_valid
        result = validate_coordinates_for_region(48.85, 2.35, "US")
        assert not result.is_valid
        assert "outside US bounds" in result.error

    def test_region_boundary_warning(self):
        result = validate_coordinates_for_region(25.0, -80.0, "US")
        assert result.is_valid
        assert "Latitude is near US boundary" in result.warnings
