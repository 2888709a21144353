"""Latitude/longitude validation and distance helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal

EARTH_RADIUS_KM = 6371.0

# Sentinel points that almost always mean "no real location".
OCEAN_SENTINELS = ((0, 0), (0, 180), (0, -180), (90, 0), (-90, 0))

PRECISION_REQUIREMENTS = {
    "general": 2,  # ~1.1 km
    "city": 3,  # ~110 m
    "venue": 4,  # ~11 m
    "exact": 6,  # ~0.11 m
}

REGION_BOUNDS = {
    "US": (24, 71, -179, -66),
    "EU": (35, 71, -25, 45),
    "ASIA": (-11, 55, 73, 180),
    "GLOBAL": (-90, 90, -180, 180),
}


@dataclass
class CoordinateValidationResult:
    is_valid: bool
    error: str | None = None
    warnings: list[str] = field(default_factory=list)
    lat: float | None = None
    lng: float | None = None


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def decimal_places(value: float) -> int:
    if float(value).is_integer():
        return 0
    exponent = Decimal(repr(float(value))).as_tuple().exponent
    return max(0, -exponent)


def _realism_warnings(lat: float, lng: float) -> list[str]:
    warnings = []
    if any(abs(s_lat - lat) < 1 and abs(s_lng - lng) < 1 for s_lat, s_lng in OCEAN_SENTINELS):
        warnings.append("Coordinates appear to be in the ocean - please verify location")
    if abs(lat) > 80 or (abs(lat) < 5 and abs(lng) > 150):
        warnings.append(
            "Coordinates appear to be in an uninhabited area - please verify location"
        )
    if abs(lat) > 85:
        warnings.append("Coordinates are very close to the poles - please verify location")
    return warnings


def validate_coordinates(
    lat: float | None,
    lng: float | None,
    allow_partial: bool = False,
    precision: int = 6,
    check_realistic_bounds: bool = True,
) -> CoordinateValidationResult:
    """Check a coordinate pair and round it to *precision* decimal places.

    ``(0, 0)`` is rejected as a placeholder location regardless of
    *check_realistic_bounds*.
    """
    if lat is None and lng is None:
        return CoordinateValidationResult(is_valid=True)
    if not allow_partial and (lat is None or lng is None):
        return CoordinateValidationResult(False, "Both latitude and longitude must be provided")

    for label, value, limit in (("Latitude", lat, 90), ("Longitude", lng, 180)):
        if value is None:
            continue
        if not _is_number(value) or math.isnan(value):
            return CoordinateValidationResult(False, f"{label} must be a valid number")
        if not math.isfinite(value):
            return CoordinateValidationResult(False, f"{label} must be a finite number")
        if not -limit <= value <= limit:
            return CoordinateValidationResult(
                False, f"{label} must be between -{limit} and {limit} degrees"
            )

    if lat == 0 and lng == 0:
        return CoordinateValidationResult(
            False, "Coordinates (0,0) are in the ocean and likely incorrect"
        )

    warnings: list[str] = []
    for label, value in (("Latitude", lat), ("Longitude", lng)):
        if value is not None and decimal_places(value) > precision:
            warnings.append(
                f"{label} has {decimal_places(value)} decimal places (recommended: {precision})"
            )

    if check_realistic_bounds and lat is not None and lng is not None:
        warnings.extend(_realism_warnings(lat, lng))

    return CoordinateValidationResult(
        is_valid=True,
        warnings=warnings,
        lat=round(lat, precision) if lat is not None else None,
        lng=round(lng, precision) if lng is not None else None,
    )


@dataclass
class PrecisionCheck:
    is_valid: bool
    error: str | None = None
    recommended_precision: int | None = None


def validate_coordinate_precision(lat: float, lng: float, use_case: str = "general") -> PrecisionCheck:
    """Check that the pair carries enough decimals for *use_case* (at most 8)."""
    places = max(decimal_places(lat), decimal_places(lng))
    required = PRECISION_REQUIREMENTS[use_case]
    if places < required:
        return PrecisionCheck(
            False,
            f"Coordinates need at least {required} decimal places for {use_case} use case",
            required,
        )
    if places > 8:
        return PrecisionCheck(False, "Coordinates have too many decimal places (max 8)", 6)
    return PrecisionCheck(True)


def calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres (haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def is_within_radius(
    lat: float, lng: float, center_lat: float, center_lng: float, radius_km: float
) -> bool:
    return calculate_distance(lat, lng, center_lat, center_lng) <= radius_km


def validate_coordinates_for_region(lat: float, lng: float, region: str) -> CoordinateValidationResult:
    lat_min, lat_max, lng_min, lng_max = REGION_BOUNDS[region]
    if not lat_min <= lat <= lat_max:
        return CoordinateValidationResult(False, f"Latitude {lat} is outside {region} bounds")
    if not lng_min <= lng <= lng_max:
        return CoordinateValidationResult(False, f"Longitude {lng} is outside {region} bounds")

    warnings = []
    if lat < lat_min + 5 or lat > lat_max - 5:
        warnings.append(f"Latitude is near {region} boundary")
    if lng < lng_min + 5 or lng > lng_max - 5:
        warnings.append(f"Longitude is near {region} boundary")
    return CoordinateValidationResult(True, warnings=warnings, lat=lat, lng=lng)
