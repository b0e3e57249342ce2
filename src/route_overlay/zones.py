"""Time-in-zone breakdown for heart rate, power, cadence or pace series."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from route_overlay.constants import DEFAULT_ZONE_METRIC, MIN_ZONE_SAMPLES, ZONE_COUNT, ZONE_NAMES
from route_overlay.models import value_at


@dataclass(frozen=True)
class Zone:
    name: str
    min: float
    max: float
    time: float
    percent: int


@dataclass(frozen=True)
class ZoneSummary:
    zones: List[Zone]
    dominant_zone: int
    metric: str
    min_val: float
    max_val: float


def _zone_index(value: float, min_val: float, width: float) -> int:
    if width <= 0:
        return 0
    return min(int((value - min_val) / width), ZONE_COUNT - 1)


def _integer_percents(times: Sequence[float]) -> List[int]:
    """Round to whole percents that add up to exactly 100."""
    total = sum(times)
    if total <= 0:
        return [0] * len(times)
    percents = [round(t / total * 100) for t in times]
    largest = max(range(len(times)), key=lambda i: times[i])
    percents[largest] += 100 - sum(percents)
    return percents


def calculate_zones(values, timestamps, metric: str = DEFAULT_ZONE_METRIC) -> Optional[ZoneSummary]:
    """
    Split the value range into five equal bins and weight each by time.

    The time between samples i-1 and i is credited to the zone of sample i.
    Without usable timestamps every valid sample counts as one second.
    Returns None with fewer than ten valid samples.
    """
    valid = [v for v in (values or []) if v is not None]
    if len(valid) < MIN_ZONE_SAMPLES:
        return None

    min_val = min(valid)
    max_val = max(valid)
    width = (max_val - min_val) / ZONE_COUNT
    times = [0.0] * ZONE_COUNT

    for i in range(1, len(values)):
        value = values[i]
        prev_ts = value_at(timestamps, i - 1)
        cur_ts = value_at(timestamps, i)
        if value is None or prev_ts is None or cur_ts is None:
            continue
        elapsed = (cur_ts - prev_ts).total_seconds()
        if elapsed > 0:
            times[_zone_index(value, min_val, width)] += elapsed

    if sum(times) <= 0:
        for value in valid:
            times[_zone_index(value, min_val, width)] += 1

    percents = _integer_percents(times)
    names = ZONE_NAMES.get(metric, ZONE_NAMES[DEFAULT_ZONE_METRIC])
    zones = [
        Zone(
            name=names[i],
            min=min_val + i * width,
            max=min_val + (i + 1) * width,
            time=times[i],
            percent=percents[i],
        )
        for i in range(ZONE_COUNT)
    ]
    dominant = max(range(ZONE_COUNT), key=lambda i: (percents[i], -i))
    return ZoneSummary(zones, dominant, metric, min_val, max_val)
