"""Geometry and easing helpers for camera interpolation and place lookup."""

from __future__ import annotations

import math

EARTH_RADIUS_KM = 6371.0


def ease_in_out_quad(progress: float) -> float:
    """Quadratic ease-in-out on [0, 1]."""
    if progress < 0.5:
        return 2 * progress * progress
    return 1 - ((-2 * progress + 2) ** 2) / 2


def lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


def shortest_arc_delta(start: float, end: float) -> float:
    """Signed longitude difference taking the shorter way around the globe."""
    diff = end - start
    if diff > 180:
        diff -= 360
    elif diff < -180:
        diff += 360
    return diff


def normalize_longitude(lng: float) -> float:
    """Wrap a longitude into (-180, 180]."""
    while lng > 180:
        lng -= 360
    while lng <= -180:
        lng += 360
    return lng


def interpolate_longitude(start: float, end: float, t: float) -> float:
    return normalize_longitude(start + shortest_arc_delta(start, end) * t)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance in kilometers between two lat/lon points."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def is_valid_coordinate(lat: float, lng: float) -> bool:
    try:
        lat_f = float(lat)
        lng_f = float(lng)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat_f) and math.isfinite(lng_f)):
        return False
    return -90.0 <= lat_f <= 90.0 and -180.0 <= lng_f <= 180.0
