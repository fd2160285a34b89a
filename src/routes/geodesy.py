"""
Great-circle geometry for route segments.

Waypoints arrive from the map as latitude/longitude pairs in degrees;
the fuel model only consumes the derived leg distances in nautical miles.
"""

import logging
import math
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
KM_PER_NM = 1.852


@dataclass(frozen=True)
class GeoPoint:
    """A geographic coordinate in degrees."""
    lat: float
    lon: float


def calculate_distance(point_a: GeoPoint, point_b: GeoPoint) -> float:
    """
    Calculate great circle distance between two points (haversine).

    Args:
        point_a: First point
        point_b: Second point

    Returns:
        Distance in nautical miles
    """
    dlat = (point_b.lat - point_a.lat) * math.pi / 180
    dlon = (point_b.lon - point_a.lon) * math.pi / 180

    a = (math.sin(dlat / 2) * math.sin(dlat / 2) +
         math.cos(point_a.lat * math.pi / 180) * math.cos(point_b.lat * math.pi / 180) *
         math.sin(dlon / 2) * math.sin(dlon / 2))
    # Rounding can push a past 1 for near-antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    distance_km = EARTH_RADIUS_KM * c
    return distance_km / KM_PER_NM


def path_distance_nm(points: Sequence[GeoPoint]) -> float:
    """Sum of leg distances along a polyline. Zero for fewer than two points."""
    total = 0.0
    for i in range(len(points) - 1):
        total += calculate_distance(points[i], points[i + 1])
    return total
