"""Great-circle distance helpers."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence

from route_overlay.constants import EARTH_RADIUS_KM
from route_overlay.models import Coordinate, value_at


def to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180)


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Distance in km between two coordinates."""
    d_lat = to_radians(b.lat - a.lat)
    d_lng = to_radians(b.lng - a.lng)
    h = (math.sin(d_lat / 2) ** 2
         + math.cos(to_radians(a.lat)) * math.cos(to_radians(b.lat)) * math.sin(d_lng / 2) ** 2)
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def calculate_distance(coordinates: Sequence[Coordinate]) -> float:
    total = 0.0
    for i in range(1, len(coordinates)):
        total += haversine_distance(coordinates[i - 1], coordinates[i])
    return total


def cumulative_distances(coordinates: Sequence[Coordinate]) -> List[float]:
    """Running km total at every sample, starting at 0. Never decreases."""
    if not coordinates:
        return []
    distances = [0.0]
    for i in range(1, len(coordinates)):
        distances.append(distances[-1] + haversine_distance(coordinates[i - 1], coordinates[i]))
    return distances


def closest_point_info(route, target: Coordinate) -> Optional[Dict[str, Any]]:
    """
    Locate the recorded sample nearest to ``target``.

    Returns:
        {'index': int, 'distance': km from start, 'time': seconds from the
        first timestamp or None}, or None for an empty route.
    """
    coordinates = route.coordinates
    if not coordinates:
        return None

    closest_index = min(
        range(len(coordinates)),
        key=lambda i: haversine_distance(coordinates[i], target),
    )
    distance = calculate_distance(coordinates[:closest_index + 1])

    elapsed = None
    start = value_at(route.timestamps, 0)
    current = value_at(route.timestamps, closest_index)
    if start is not None and current is not None:
        elapsed = (current - start).total_seconds()

    return {'index': closest_index, 'distance': distance, 'time': elapsed}
