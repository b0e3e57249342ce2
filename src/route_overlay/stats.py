"""Median, MAD and IQR helpers for noisy per-point series."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from route_overlay.constants import ROLLING_MEDIAN_WINDOW


@dataclass(frozen=True)
class MadResult:
    median: Optional[float]
    mad: Optional[float]


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def median(values: Optional[Sequence[float]]) -> Optional[float]:
    if values is None or len(values) == 0:
        return None
    return float(np.median(np.asarray(values, dtype=float)))


def calculate_mad(values: Optional[Sequence[float]]) -> MadResult:
    """Median and median absolute deviation of ``values``."""
    if values is None or len(values) == 0:
        return MadResult(None, None)
    med = median(values)
    deviations = np.abs(np.asarray(values, dtype=float) - med)
    return MadResult(med, median(deviations))


def filter_outliers_iqr(values, multiplier: float = 1.5):
    """Drop values outside the Tukey fences; order of the survivors is kept."""
    if values is None or len(values) < 4:
        return values

    ordered = np.sort(np.asarray(values, dtype=float))
    q1 = ordered[int(len(ordered) * 0.25)]
    q3 = ordered[int(len(ordered) * 0.75)]
    iqr = q3 - q1
    lower = q1 - multiplier * iqr
    upper = q3 + multiplier * iqr
    return [v for v in values if lower <= v <= upper]


def filter_outliers_mad(values, threshold: float = 3.0):
    """Drop values whose modified z-score exceeds ``threshold``."""
    if values is None or len(values) < 4:
        return values

    result = calculate_mad(values)
    if result.mad == 0:
        return values
    return [v for v in values if 0.6745 * abs(v - result.median) / result.mad <= threshold]


def rolling_median(values, window_size: int = ROLLING_MEDIAN_WINDOW):
    """
    Centered rolling median that skips missing samples.

    The window is clipped at both ends. A window holding no valid sample
    leaves the original value (possibly None) in place.
    """
    if values is None or len(values) < window_size:
        return values

    half = window_size // 2
    n = len(values)
    smoothed: List[Optional[float]] = []
    for i in range(n):
        window = [v for v in values[max(0, i - half):min(n, i + half + 1)] if not _is_missing(v)]
        smoothed.append(median(window) if window else values[i])
    return smoothed
