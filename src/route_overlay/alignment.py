"""Distance-to-elapsed-time lookup used to compare routes at equal distance."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from route_overlay.geo import haversine_distance
from route_overlay.models import value_at


@dataclass(frozen=True)
class DistanceTimeMap:
    """Parallel ascending arrays: cumulative km and seconds since start."""

    distances: Tuple[float, ...]
    times: Tuple[float, ...]

    @property
    def max_distance(self) -> float:
        return self.distances[-1]


def build_time_distance_map(route) -> Optional[DistanceTimeMap]:
    """
    Map cumulative distance to elapsed time for every timed sample.

    Distance keeps accumulating across samples without a timestamp, but only
    timed samples get an entry. Returns None when the first sample has no
    timestamp or fewer than two entries result.
    """
    timestamps = route.timestamps
    if not timestamps or timestamps[0] is None:
        return None

    start = timestamps[0]
    distances = [0.0]
    times = [0.0]
    cumulative = 0.0
    for i in range(1, len(route.coordinates)):
        cumulative += haversine_distance(route.coordinates[i - 1], route.coordinates[i])
        ts = value_at(timestamps, i)
        if ts is not None:
            distances.append(cumulative)
            times.append((ts - start).total_seconds())

    if len(distances) < 2:
        return None
    return DistanceTimeMap(tuple(distances), tuple(times))


def get_time_at_distance(time_map: Optional[DistanceTimeMap], target_km: float) -> Optional[float]:
    """Elapsed seconds when the route reached ``target_km``, interpolated."""
    if time_map is None or len(time_map.distances) < 2:
        return None

    distances = time_map.distances
    times = time_map.times
    if target_km > distances[-1]:
        return None
    if target_km <= 0:
        return 0.0

    # first index strictly past the target
    high = bisect_right(distances, target_km)
    low = high - 1
    if distances[low] == target_km or high >= len(distances):
        return times[low]

    span = distances[high] - distances[low]
    if span <= 0:
        return times[low]
    ratio = (target_km - distances[low]) / span
    return times[low] + ratio * (times[high] - times[low])


def find_index_at_distance(distances: Sequence[float], target_km: float) -> int:
    """Last index whose cumulative distance is <= target, clamped to bounds."""
    if not distances:
        return 0
    index = bisect_right(distances, target_km) - 1
    return min(max(index, 0), len(distances) - 1)
