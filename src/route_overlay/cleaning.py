"""
GPS point rejection.

Rejected samples become None in the speed/pace series; they are never
removed, so the per-point lists stay index-aligned with the coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from route_overlay.constants import CLEAN_MAX_SPEED_KMH, JUMP_MAX_SPEED_KMH, MAX_ACCELERATION_MS2
from route_overlay.geo import haversine_distance
from route_overlay.models import value_at


@dataclass(frozen=True)
class CleanedSeries:
    speeds: List[Optional[float]]
    paces: List[Optional[float]]
    valid_indices: List[int]


def _elapsed_seconds(timestamps, index: int) -> Optional[float]:
    prev_ts = value_at(timestamps, index - 1)
    cur_ts = value_at(timestamps, index)
    if prev_ts is None or cur_ts is None:
        return None
    return (cur_ts - prev_ts).total_seconds()


def filter_distance_jumps(coordinates, timestamps, max_speed_kmh: float = JUMP_MAX_SPEED_KMH) -> List[bool]:
    """
    Flag each transition i-1 -> i whose implied speed is plausible.

    flags[i] is False when moving from point i-1 to point i would need more
    than ``max_speed_kmh``. Transitions without two timestamps are assumed
    valid.
    """
    if not coordinates:
        return []

    flags = [True]
    for i in range(1, len(coordinates)):
        elapsed = _elapsed_seconds(timestamps, i)
        if elapsed is None or elapsed <= 0:
            flags.append(True)
            continue
        implied_speed = haversine_distance(coordinates[i - 1], coordinates[i]) / elapsed * 3600
        flags.append(implied_speed <= max_speed_kmh)
    return flags


def filter_acceleration_spikes(speeds, timestamps, max_acceleration: float = MAX_ACCELERATION_MS2):
    """
    Null out speeds reached with an impossible acceleration (m/s^2).

    Each step compares raw input speeds, so one bad sample can reject both
    itself and the sample after it. The later sample of a pair is the one
    rejected.
    """
    if speeds is None or len(speeds) < 2:
        return speeds

    filtered: List[Optional[float]] = [speeds[0]]
    for i in range(1, len(speeds)):
        prev_speed, speed = speeds[i - 1], speeds[i]
        elapsed = _elapsed_seconds(timestamps, i)
        if prev_speed is None or speed is None or elapsed is None:
            filtered.append(speed)
            continue

        if elapsed > 0:
            acceleration = abs(speed - prev_speed) * (1000 / 3600) / elapsed
            if acceleration > max_acceleration:
                filtered.append(None)
                continue
        filtered.append(speed)
    return filtered


def clean_gps_data(
    speeds: Sequence[Optional[float]],
    paces: Sequence[Optional[float]],
    coordinates,
    timestamps,
    max_speed: float = CLEAN_MAX_SPEED_KMH,
) -> CleanedSeries:
    """
    Combine jump, acceleration and range checks into one pass.

    A sample survives only if its incoming transition is plausible, its speed
    survives the acceleration filter, and its raw speed lies in
    [0, max_speed]. Speed and pace are nulled together.
    """
    cleaned_speeds = list(speeds)
    cleaned_paces = list(paces) + [None] * (len(speeds) - len(paces))
    valid_indices: List[int] = []

    jump_flags = filter_distance_jumps(coordinates, timestamps, max_speed)
    accel_filtered = filter_acceleration_spikes(list(speeds), timestamps)

    for i, speed in enumerate(speeds):
        jump_ok = jump_flags[i] if i < len(jump_flags) else True
        if not jump_ok or value_at(accel_filtered, i) is None:
            rejected = True
        else:
            rejected = not 0 <= speed <= max_speed

        if rejected:
            cleaned_speeds[i] = None
            cleaned_paces[i] = None
        else:
            valid_indices.append(i)

    return CleanedSeries(cleaned_speeds, cleaned_paces[:len(speeds)], valid_indices)
