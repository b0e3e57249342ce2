"""Human-readable strings for paces, distances, durations and deltas."""

from __future__ import annotations

import math

from route_overlay.constants import MAX_REASONABLE_PACE

NOT_AVAILABLE = 'N/A'


def _round(value: float) -> int:
    """Round half up, so 1234.5 m reads as 1235 m."""
    return int(math.floor(value + 0.5))


def _is_number(value) -> bool:
    return value is not None and not isinstance(value, bool) and math.isfinite(value)


def _min_sec(minutes: float):
    mins = int(math.floor(minutes))
    secs = _round((minutes - mins) * 60)
    if secs == 60:
        mins, secs = mins + 1, 0
    return mins, secs


def format_pace(min_per_km) -> str:
    if not _is_number(min_per_km) or min_per_km <= 0 or min_per_km > MAX_REASONABLE_PACE:
        return NOT_AVAILABLE
    mins, secs = _min_sec(min_per_km)
    return f"{mins}:{secs:02d} /km"


def format_split_pace(min_per_km) -> str:
    if not _is_number(min_per_km) or min_per_km <= 0:
        return NOT_AVAILABLE
    mins, secs = _min_sec(min_per_km)
    return f"{mins}:{secs:02d}"


def format_distance(km: float) -> str:
    if km >= 1:
        return f"{km:.2f} km"
    return f"{_round(km * 1000)} m"


def format_elevation(meters: float) -> str:
    return f"{_round(meters)} m"


def _clock(seconds: float):
    """(hours, minutes, seconds) after rounding to the whole second."""
    total = _round(seconds)
    return total // 3600, total % 3600 // 60, total % 60


def format_duration(seconds) -> str:
    """'45s', '2m 5s' or '1h 2m'."""
    if not _is_number(seconds) or seconds == 0:
        return NOT_AVAILABLE
    hours, mins, secs = _clock(seconds)
    if hours > 0:
        return f"{hours}h {mins}m"
    if mins > 0:
        return f"{mins}m {secs}s"
    return f"{secs}s"


def format_effort_duration(seconds) -> str:
    """Clock style: '4:05' or '1:02:09'."""
    if not _is_number(seconds):
        return NOT_AVAILABLE
    hours, mins, secs = _clock(seconds)
    if hours > 0:
        return f"{hours}:{mins:02d}:{secs:02d}"
    return f"{mins}:{secs:02d}"


def format_heart_rate(bpm) -> str:
    if not _is_number(bpm) or bpm == 0:
        return NOT_AVAILABLE
    return f"{_round(bpm)} bpm"


def format_cadence(spm) -> str:
    if not _is_number(spm) or spm == 0:
        return NOT_AVAILABLE
    return f"{_round(spm)} spm"


def format_time_delta(seconds) -> str:
    """Signed gap: '+1:05', '-30s', '+0s'."""
    if not _is_number(seconds):
        return NOT_AVAILABLE
    sign = '+' if seconds >= 0 else '-'
    mins = int(abs(seconds) // 60)
    secs = int(abs(seconds) % 60)
    if mins > 0:
        return f"{sign}{mins}:{secs:02d}"
    return f"{sign}{secs}s"


def format_split_gap(seconds) -> str:
    if seconds is None:
        return '-'
    return format_time_delta(seconds)


def format_split_time(seconds) -> str:
    """Minutes never roll into hours: 3605 s reads '60:05'."""
    if not _is_number(seconds):
        return NOT_AVAILABLE
    hours, mins, secs = _clock(seconds)
    return f"{hours * 60 + mins}:{secs:02d}"
