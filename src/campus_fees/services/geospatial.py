"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import Point, Polygon

EARTH_RADIUS_METERS = 6_371_000.0


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres; the fallback when no route distance is available."""

    lat1_rad, lat2_rad = math.radians(lat1), math.radians(lat2)
    half_chord = (
        math.sin((lat2_rad - lat1_rad) / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(math.radians(lon2 - lon1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(half_chord)))


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    return haversine_meters(lat1, lon1, lat2, lon2) / 1000.0


def polygon_from_lnglat(boundary: Sequence[tuple[float, float]]) -> Polygon:
    """Build a polygon from ``(lng, lat)`` vertices. Raises ``ValueError`` for degenerate rings."""

    if len(boundary) < 3:
        raise ValueError(f"A region boundary needs at least 3 points, got {len(boundary)}.")
    polygon = Polygon(boundary)
    if not polygon.is_valid:
        raise ValueError("Region boundary is self-intersecting or otherwise invalid.")
    return polygon


def point_in_polygon(lat: float, lon: float, polygon: Polygon) -> bool:
    """Return True if the point lies inside or on the edge of ``polygon``."""

    return polygon.covers(Point(lon, lat))
