"""
Single-route insights: pacing strategy, consistency, cardiac drift,
cadence at speed, peak pace and a few whole-run totals.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import numpy as np

from route_overlay.constants import (
    DEFAULT_CADENCE_SPM,
    EVEN_SPLIT_PERCENT,
    LATE_TIME_OF_DAY_LABEL,
    MAX_REASONABLE_PACE,
    MAX_VALID_HR,
    MIN_INSIGHT_SAMPLES,
    MIN_VALID_HR,
    NET_ELEVATION_THRESHOLD_M,
    TIME_OF_DAY_LABELS,
)
from route_overlay.geo import cumulative_distances
from route_overlay.models import value_at


@dataclass(frozen=True)
class SplitAnalysis:
    first_half_pace: float
    second_half_pace: float
    difference_percent: float
    verdict: str  # 'even', 'negative' or 'positive'


@dataclass(frozen=True)
class PaceConsistency:
    mean_pace: float
    coefficient_of_variation: float
    verdict: str  # 'steady', 'moderate' or 'variable'


@dataclass(frozen=True)
class HeartRateDrift:
    drift: float
    average: float
    maximum: float


@dataclass(frozen=True)
class FastestPace:
    pace: float
    distance_km: float
    window: int


@dataclass(frozen=True)
class ElevationSummary:
    gain: float
    net: float
    direction: Optional[str]  # 'uphill', 'downhill' or None when roughly level


@dataclass(frozen=True)
class ActivityTotals:
    steps: Optional[int]
    heartbeats: Optional[int]


@dataclass(frozen=True)
class TimeOfDay:
    label: str
    start: datetime


def calculate_split_analysis(route) -> Optional[SplitAnalysis]:
    """Compare the average pace of the first and second half of the samples."""
    halfway = len(route.paces) // 2
    first = [p for p in route.paces[:halfway] if p is not None]
    second = [p for p in route.paces[halfway:] if p is not None]
    if not first or not second:
        return None

    first_avg = float(np.mean(first))
    second_avg = float(np.mean(second))
    diff = (second_avg - first_avg) / first_avg * 100
    if abs(diff) < EVEN_SPLIT_PERCENT:
        verdict = 'even'
    elif diff < 0:
        verdict = 'negative'
    else:
        verdict = 'positive'
    return SplitAnalysis(first_avg, second_avg, diff, verdict)


def calculate_pace_consistency(route) -> Optional[PaceConsistency]:
    paces = np.array([p for p in route.paces if p is not None and 0 < p < MAX_REASONABLE_PACE])
    if len(paces) < MIN_INSIGHT_SAMPLES:
        return None

    mean = float(paces.mean())
    cv = float(paces.std() / mean * 100)
    if cv < 10:
        verdict = 'steady'
    elif cv < 20:
        verdict = 'moderate'
    else:
        verdict = 'variable'
    return PaceConsistency(mean, cv, verdict)


def calculate_heart_rate_drift(route) -> Optional[HeartRateDrift]:
    """Last-quarter minus first-quarter average heart rate, in bpm."""
    hr = [h for h in route.heart_rates if h is not None and MIN_VALID_HR <= h <= MAX_VALID_HR]
    if len(hr) < MIN_INSIGHT_SAMPLES:
        return None

    quarter = len(hr) // 4
    drift = float(np.mean(hr[-quarter:]) - np.mean(hr[:quarter]))
    return HeartRateDrift(drift, float(np.mean(hr)), float(max(hr)))


def calculate_optimal_cadence(route) -> Optional[float]:
    """Average cadence over the fastest tenth of paired pace/cadence samples."""
    pairs = []
    for i, pace in enumerate(route.paces):
        cadence = value_at(route.cadences, i)
        if pace is not None and pace > 0 and cadence is not None and cadence >= 50:
            pairs.append((pace, cadence))
    if len(pairs) <= MIN_INSIGHT_SAMPLES:
        return None

    pairs.sort(key=lambda pair: pair[0])
    top = pairs[:max(1, len(pairs) // 10)]
    return float(np.mean([cadence for _, cadence in top]))


def calculate_fastest_pace(route) -> Optional[FastestPace]:
    """
    Fastest rolling mean pace over valid samples.

    The window is a tenth of the valid samples, capped at 10. The reported
    distance is the km mark at the middle of the winning window.
    """
    valid = [(i, p) for i, p in enumerate(route.paces) if p is not None and 2 < p < MAX_REASONABLE_PACE]
    if len(valid) < MIN_INSIGHT_SAMPLES:
        return None

    window = min(10, len(valid) // 10)
    paces = np.array([p for _, p in valid])
    rolling = np.convolve(paces, np.ones(window) / window, mode='valid')
    best = int(np.argmin(rolling))
    fastest = float(rolling[best])
    if not 2 <= fastest < MAX_REASONABLE_PACE:
        return None

    distances = cumulative_distances(route.coordinates)
    index = valid[best + window // 2][0]
    return FastestPace(fastest, distances[index], window)


def calculate_elevation_summary(route) -> Optional[ElevationSummary]:
    """Total climbing plus the start-to-finish elevation change."""
    elevations = [e for e in route.elevations if e is not None]
    if len(elevations) < MIN_INSIGHT_SAMPLES:
        return None

    net = elevations[-1] - elevations[0]
    direction = None
    if abs(net) > NET_ELEVATION_THRESHOLD_M:
        direction = 'downhill' if net < 0 else 'uphill'
    return ElevationSummary(route.stats.elevation_gain, net, direction)


def calculate_activity_totals(route) -> Optional[ActivityTotals]:
    """
    Approximate steps and heartbeats from average cadence and heart rate
    over the recorded duration. Steps assume 170 spm without cadence data.
    """
    duration = route.stats.duration
    if not duration:
        return None
    minutes = duration / 60

    steps = None
    if route.stats.distance:
        cadences = [c for c in route.cadences if c is not None]
        cadence = float(np.mean(cadences)) if cadences else DEFAULT_CADENCE_SPM
        steps = int(round(cadence * minutes))

    heart_rates = [h for h in route.heart_rates if h is not None]
    heartbeats = int(round(float(np.mean(heart_rates)) * minutes)) if heart_rates else None
    return ActivityTotals(steps, heartbeats)


def time_of_day_label(hour: int) -> str:
    for upper, label in TIME_OF_DAY_LABELS:
        if hour < upper:
            return label
    return LATE_TIME_OF_DAY_LABEL


def calculate_time_of_day(route) -> Optional[TimeOfDay]:
    """Label the local start hour of the first recorded timestamp."""
    if not route.timestamps or route.timestamps[0] is None:
        return None
    start = route.timestamps[0].astimezone()
    return TimeOfDay(time_of_day_label(start.hour), start)
