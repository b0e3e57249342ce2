"""
Distance-domain comparisons: time gaps, splits, segments, best efforts and
steep sections.

Every routine resolves distances to sample indices through the cumulative
haversine distance, so routes with different sampling rates can be compared
at the same km mark.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from route_overlay.alignment import build_time_distance_map, find_index_at_distance, get_time_at_distance
from route_overlay.constants import (
    BEST_EFFORT_DISTANCES_KM,
    DEFAULT_SPLIT_KM,
    DISTANCE_LABEL_TOLERANCE_KM,
    HALF_MARATHON_KM,
    MARATHON_KM,
    MAX_SPLIT_PACE_MIN_KM,
    PARTIAL_SPLIT_RATIO,
    STEEP_MIN_GRADE,
    STEEP_MIN_LENGTH_M,
    TIME_GAP_SAMPLE_INTERVAL_KM,
)
from route_overlay.geo import cumulative_distances
from route_overlay.models import value_at


# ---------------------------------------------------------------------------
# Result records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TimeGapEntry:
    route: object
    time: float
    gap: float


@dataclass(frozen=True)
class TimeGapPoint:
    distance: float
    reference_time: float
    comparisons: Tuple[TimeGapEntry, ...]


@dataclass(frozen=True)
class TimeGapResult:
    reference_route: object
    gaps: Tuple[TimeGapPoint, ...]
    max_distance: float


@dataclass(frozen=True)
class Split:
    number: int
    start_km: float
    end_km: float
    distance: float
    duration: Optional[float]
    pace: Optional[float]
    elev_gain: float
    avg_hr: Optional[float]
    is_partial: bool


@dataclass(frozen=True)
class SegmentMetrics:
    start_km: float
    end_km: float
    distance: float
    duration: Optional[float]
    pace: Optional[float]
    elev_gain: float
    elev_loss: float
    avg_hr: Optional[float]
    avg_cadence: Optional[float]
    avg_power: Optional[float]


@dataclass(frozen=True)
class BestEffort:
    distance: float
    distance_label: str
    duration: float
    pace: float
    start_km: float
    elev_gain: float


@dataclass(frozen=True)
class SteepSection:
    start_km: float
    end_km: float
    distance: float
    elev_change: float
    max_grade: float
    avg_grade: float


@dataclass(frozen=True)
class SteepSections:
    climbs: List[SteepSection] = field(default_factory=list)
    descents: List[SteepSection] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _elapsed_between(timestamps, start_index: int, end_index: int) -> Optional[float]:
    start = value_at(timestamps, start_index)
    end = value_at(timestamps, end_index)
    if start is None or end is None:
        return None
    return (end - start).total_seconds()


def _elevation_changes(elevations, start_index: int, end_index: int) -> Tuple[float, float]:
    """(gain, loss) over consecutive non-null pairs in [start_index, end_index]."""
    gain = loss = 0.0
    for i in range(start_index + 1, end_index + 1):
        prev = value_at(elevations, i - 1)
        cur = value_at(elevations, i)
        if prev is None or cur is None:
            continue
        diff = cur - prev
        if diff > 0:
            gain += diff
        else:
            loss -= diff
    return gain, loss


def _mean(values, start_index: int, end_index: int) -> Optional[float]:
    window = [v for v in (values or [])[start_index:end_index + 1] if v is not None]
    if not window:
        return None
    return sum(window) / len(window)


def _pace(elapsed: Optional[float], distance_km: float) -> Optional[float]:
    if elapsed is None or distance_km <= 0:
        return None
    pace = (elapsed / 60) / distance_km
    if not 0 < pace < MAX_SPLIT_PACE_MIN_KM:
        return None
    return pace


# ---------------------------------------------------------------------------
# Time gaps
# ---------------------------------------------------------------------------

def calculate_time_gaps(reference, comparisons: Sequence, sample_interval: float = TIME_GAP_SAMPLE_INTERVAL_KM) -> Optional[TimeGapResult]:
    """
    Sample the time difference between routes at fixed distance steps.

    A positive gap means the comparison route reached that distance later
    (it is behind). Comparison routes without a usable distance/time map are
    ignored; the result is None when the reference or every comparison has
    none.
    """
    ref_map = build_time_distance_map(reference)
    if ref_map is None:
        return None

    comp_maps = []
    for route in comparisons:
        time_map = build_time_distance_map(route)
        if time_map is not None:
            comp_maps.append((route, time_map))
    if not comp_maps:
        return None

    max_distance = min([ref_map.max_distance] + [m.max_distance for _, m in comp_maps])

    gaps: List[TimeGapPoint] = []
    k = 0
    while k * sample_interval <= max_distance:
        distance = k * sample_interval
        k += 1
        ref_time = get_time_at_distance(ref_map, distance)
        if ref_time is None:
            continue

        entries = []
        for route, time_map in comp_maps:
            comp_time = get_time_at_distance(time_map, distance)
            if comp_time is not None:
                entries.append(TimeGapEntry(route, comp_time, comp_time - ref_time))
        if entries:
            gaps.append(TimeGapPoint(distance, ref_time, tuple(entries)))

    return TimeGapResult(reference, tuple(gaps), max_distance)


# ---------------------------------------------------------------------------
# Splits and segments
# ---------------------------------------------------------------------------

def calculate_split_pace(route, start_index: int, end_index: int, distances: Optional[Sequence[float]] = None) -> Optional[float]:
    """Pace in min/km between two sample indices."""
    if distances is None:
        distances = cumulative_distances(route.coordinates)
    if not distances or end_index <= start_index:
        return None
    elapsed = _elapsed_between(route.timestamps, start_index, end_index)
    return _pace(elapsed, distances[end_index] - distances[start_index])


def calculate_splits(route, split_km: float = DEFAULT_SPLIT_KM) -> List[Split]:
    """
    Cut the route into fixed-distance windows.

    ``Split.distance`` is the window length; pace uses the distance between
    the samples the window boundaries resolve to. The trailing window is
    partial when it is shorter than 90% of ``split_km``.
    """
    distances = cumulative_distances(route.coordinates)
    if len(distances) < 2 or split_km <= 0:
        return []

    total = distances[-1]
    splits: List[Split] = []
    number = 1
    start_km = 0.0
    while start_km < total:
        end_km = min(number * split_km, total)
        start_index = find_index_at_distance(distances, start_km)
        end_index = find_index_at_distance(distances, end_km)
        window = end_km - start_km

        elapsed = _elapsed_between(route.timestamps, start_index, end_index)
        gain, _ = _elevation_changes(route.elevations, start_index, end_index)
        splits.append(Split(
            number=number,
            start_km=start_km,
            end_km=end_km,
            distance=window,
            duration=elapsed,
            pace=calculate_split_pace(route, start_index, end_index, distances),
            elev_gain=gain,
            avg_hr=_mean(route.heart_rates, start_index, end_index),
            is_partial=window < split_km * PARTIAL_SPLIT_RATIO,
        ))
        start_km = number * split_km
        number += 1
    return splits


def calculate_segment_metrics(route, start_km: float, end_km: float) -> Optional[SegmentMetrics]:
    distances = cumulative_distances(route.coordinates)
    if len(distances) < 2:
        return None

    total = distances[-1]
    if start_km < 0 or end_km <= start_km or start_km >= total:
        return None
    end_km = min(end_km, total)

    start_index = find_index_at_distance(distances, start_km)
    end_index = find_index_at_distance(distances, end_km)
    gain, loss = _elevation_changes(route.elevations, start_index, end_index)
    return SegmentMetrics(
        start_km=start_km,
        end_km=end_km,
        distance=end_km - start_km,
        duration=_elapsed_between(route.timestamps, start_index, end_index),
        pace=calculate_split_pace(route, start_index, end_index, distances),
        elev_gain=gain,
        elev_loss=loss,
        avg_hr=_mean(route.heart_rates, start_index, end_index),
        avg_cadence=_mean(route.cadences, start_index, end_index),
        avg_power=_mean(route.powers, start_index, end_index),
    )


# ---------------------------------------------------------------------------
# Best efforts
# ---------------------------------------------------------------------------

def get_distance_label(distance_km: float) -> str:
    if abs(distance_km - HALF_MARATHON_KM) <= DISTANCE_LABEL_TOLERANCE_KM:
        return 'Half Marathon'
    if abs(distance_km - MARATHON_KM) <= DISTANCE_LABEL_TOLERANCE_KM:
        return 'Marathon'
    if distance_km < 1:
        return f"{round(distance_km * 1000)}m"
    return f"{int(math.floor(distance_km + 0.5))}km"


def _fastest_window(samples, target_km: float):
    """
    Two-pointer search over (km, seconds, index) samples.

    Returns (duration, start_sample_pos, end_index) for the quickest stretch
    covering ``target_km``, with the finish time interpolated at the exact
    distance, or None.
    """
    best = None
    end = 0
    for start in range(len(samples)):
        start_km, start_s, _ = samples[start]
        goal = start_km + target_km
        if end <= start:
            end = start + 1
        while end < len(samples) and samples[end][0] < goal:
            end += 1
        if end >= len(samples):
            break

        prev_km, prev_s, _ = samples[end - 1]
        end_km, end_s, end_index = samples[end]
        if end_km > prev_km:
            finish = prev_s + (goal - prev_km) / (end_km - prev_km) * (end_s - prev_s)
        else:
            finish = end_s
        duration = finish - start_s
        if duration > 0 and (best is None or duration < best[0]):
            best = (duration, start, end_index)
    return best


def calculate_best_efforts(route, target_distances: Sequence[float] = BEST_EFFORT_DISTANCES_KM) -> List[BestEffort]:
    """Fastest continuous stretch for each target distance the route covers."""
    distances = cumulative_distances(route.coordinates)
    if len(distances) < 2 or not route.has_timestamps():
        return []

    first_ts = next(ts for ts in route.timestamps if ts is not None)
    samples = [
        (distances[i], (ts - first_ts).total_seconds(), i)
        for i, ts in enumerate(route.timestamps[:len(distances)])
        if ts is not None
    ]
    if len(samples) < 2:
        return []

    total = distances[-1]
    efforts: List[BestEffort] = []
    for target in target_distances:
        if target <= 0 or target > total:
            continue
        found = _fastest_window(samples, target)
        if found is None:
            continue

        duration, start_pos, end_index = found
        start_km, _, start_index = samples[start_pos]
        gain, _ = _elevation_changes(route.elevations, start_index, end_index)
        efforts.append(BestEffort(
            distance=target,
            distance_label=get_distance_label(target),
            duration=duration,
            pace=duration / 60 / target,
            start_km=start_km,
            elev_gain=gain,
        ))
    return efforts


# ---------------------------------------------------------------------------
# Steep sections
# ---------------------------------------------------------------------------

def _close_section(run, distances, min_length_meters: float) -> Optional[SteepSection]:
    start_index, end_index, length_m, elev_change, max_grade = run
    if length_m < min_length_meters:
        return None
    return SteepSection(
        start_km=distances[start_index],
        end_km=distances[end_index],
        distance=length_m / 1000,
        elev_change=abs(elev_change),
        max_grade=max_grade * 100,
        avg_grade=abs(elev_change) / length_m * 100,
    )


def detect_steep_sections(route, min_length_meters: float = STEEP_MIN_LENGTH_M, min_grade: float = STEEP_MIN_GRADE) -> SteepSections:
    """
    Group consecutive legs steeper than ``min_grade`` into climbs and descents.

    Grades are reported in percent and as positive magnitudes for descents.
    A missing elevation ends the current run; zero-length legs are ignored.
    """
    distances = cumulative_distances(route.coordinates)
    climbs: List[SteepSection] = []
    descents: List[SteepSection] = []
    run = None
    direction = 0

    def flush():
        if run is None:
            return
        section = _close_section(run, distances, min_length_meters)
        if section is not None:
            (climbs if direction > 0 else descents).append(section)

    for i in range(1, len(distances)):
        prev = value_at(route.elevations, i - 1)
        cur = value_at(route.elevations, i)
        if prev is None or cur is None:
            flush()
            run, direction = None, 0
            continue

        leg_m = (distances[i] - distances[i - 1]) * 1000
        if leg_m <= 0:
            continue

        grade = (cur - prev) / leg_m
        leg_direction = 1 if grade >= min_grade else -1 if grade <= -min_grade else 0
        if leg_direction == 0 or leg_direction != direction:
            flush()
            run, direction = None, leg_direction
            if leg_direction == 0:
                continue

        if run is None:
            run = (i - 1, i, leg_m, cur - prev, abs(grade))
        else:
            start_index, _, length_m, elev_change, max_grade = run
            run = (start_index, i, length_m + leg_m, elev_change + cur - prev, max(max_grade, abs(grade)))

    flush()
    return SteepSections(climbs, descents)
