"""Per-point speed/pace derivation and whole-route aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from route_overlay.geo import calculate_distance, haversine_distance
from route_overlay.models import RouteStats, value_at


@dataclass(frozen=True)
class ElevationStats:
    gain: float = 0.0
    loss: float = 0.0
    min: float = 0.0
    max: float = 0.0


def compute_speeds_and_paces(coordinates, timestamps) -> Tuple[List[Optional[float]], List[Optional[float]]]:
    """
    Instantaneous speed (km/h) and pace (min/km) from consecutive samples.

    Index 0 never has a value. A zero-length or zero-duration step yields
    None for both.
    """
    speeds: List[Optional[float]] = []
    paces: List[Optional[float]] = []
    for i in range(len(coordinates)):
        prev_ts = value_at(timestamps, i - 1)
        cur_ts = value_at(timestamps, i)
        if i == 0 or prev_ts is None or cur_ts is None:
            speeds.append(None)
            paces.append(None)
            continue

        distance_km = haversine_distance(coordinates[i - 1], coordinates[i])
        hours = (cur_ts - prev_ts).total_seconds() / 3600
        if hours > 0 and distance_km > 0:
            speed = distance_km / hours
            speeds.append(speed)
            paces.append(60 / speed)
        else:
            speeds.append(None)
            paces.append(None)
    return speeds, paces


def paces_from_speeds(speeds: Sequence[Optional[float]]) -> List[Optional[float]]:
    return [60 / s if s is not None and s > 0 else None for s in speeds]


def calculate_elevation_stats(elevations) -> ElevationStats:
    """Gain/loss over the non-null elevations in recorded order."""
    valid = [e for e in (elevations or []) if e is not None and e == e]
    if not valid:
        return ElevationStats()

    gain = loss = 0.0
    for prev, cur in zip(valid, valid[1:]):
        diff = cur - prev
        if diff > 0:
            gain += diff
        else:
            loss += abs(diff)
    return ElevationStats(gain=gain, loss=loss, min=min(valid), max=max(valid))


def calculate_duration(timestamps) -> Optional[float]:
    """Seconds between the first and last known timestamps."""
    valid = [ts for ts in (timestamps or []) if ts is not None]
    if len(valid) < 2:
        return None
    return (valid[-1] - valid[0]).total_seconds()


def calculate_route_stats(coordinates, elevations, timestamps) -> RouteStats:
    elev = calculate_elevation_stats(elevations)
    return RouteStats(
        distance=calculate_distance(coordinates),
        elevation_gain=elev.gain,
        elevation_loss=elev.loss,
        min_elevation=elev.min,
        max_elevation=elev.max,
        duration=calculate_duration(timestamps),
    )
