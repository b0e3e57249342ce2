"""
Display-side smoothing and decimation.

Longer routes get wider smoothing windows and coarser decimation so that a
chart receives roughly the same number of points whatever the route length.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from route_overlay.constants import (
    ADAPTIVE_SMOOTHING_MAX,
    ADAPTIVE_SMOOTHING_STEPS,
    DEFAULT_DECIMATION_FACTOR,
    DEFAULT_SMOOTHING_WINDOW,
)
from route_overlay.geo import cumulative_distances


@dataclass(frozen=True)
class SmoothingParams:
    window_size: int
    decimation_factor: int


def get_adaptive_smoothing_params(total_distance_km: float) -> SmoothingParams:
    for upper_km, window_size, factor in ADAPTIVE_SMOOTHING_STEPS:
        if total_distance_km < upper_km:
            return SmoothingParams(window_size, factor)
    return SmoothingParams(*ADAPTIVE_SMOOTHING_MAX)


def smooth_data(data: Sequence[Optional[float]], window_size: int = DEFAULT_SMOOTHING_WINDOW):
    """Centered moving average that ignores None samples."""
    if len(data) < window_size:
        return data

    half = window_size // 2
    n = len(data)
    smoothed: List[Optional[float]] = []
    for i in range(n):
        window = [v for v in data[max(0, i - half):min(n, i + half + 1)] if v is not None]
        smoothed.append(sum(window) / len(window) if window else data[i])
    return smoothed


def decimate_data(data: Sequence, distances: Sequence[float], factor: int = DEFAULT_DECIMATION_FACTOR) -> Tuple[list, list]:
    """Keep the first point, every ``factor``-th point, and the last point."""
    if len(data) <= factor * 2:
        return list(data), list(distances)

    kept_data = [data[0]]
    kept_distances = [distances[0]]
    for i in range(factor, len(data) - 1, factor):
        kept_data.append(data[i])
        kept_distances.append(distances[i])
    kept_data.append(data[-1])
    kept_distances.append(distances[-1])
    return kept_data, kept_distances


def prepare_chart_series(route, metric: str, offset_km: float = 0.0) -> Tuple[List[float], list]:
    """
    Distance axis and smoothed, decimated values for one metric channel.

    Returns:
        (distances_km, values) of equal length, ready for plotting.
    """
    distances = cumulative_distances(route.coordinates)
    if not distances:
        return [], []

    values = list(route.channel(metric))
    values += [None] * (len(distances) - len(values))
    values = values[:len(distances)]

    params = get_adaptive_smoothing_params(distances[-1])
    smoothed = smooth_data(values, params.window_size)
    kept_values, kept_distances = decimate_data(smoothed, distances, params.decimation_factor)
    return [d + offset_km for d in kept_distances], kept_values
