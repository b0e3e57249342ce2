"""
Bounds and chronology checks for freshly parsed route records.

Only an unusable coordinate drops a whole point. A bad elevation or
timestamp degrades to None in place, so the remaining channels stay aligned.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional

import pandas as pd

from route_overlay.constants import MAX_ELEVATION_M, MIN_ELEVATION_M
from route_overlay.models import Coordinate, RawRoute, value_at


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    value: Any = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class ValidatedData:
    coordinates: List[Coordinate]
    elevations: List[Optional[float]]
    timestamps: List[Optional[datetime]]
    heart_rates: List[Optional[float]]
    cadences: List[Optional[float]]
    powers: List[Optional[float]]
    speeds: List[Optional[float]]
    skipped: int = 0
    warnings: List[str] = field(default_factory=list)


def _as_finite_number(value) -> Optional[float]:
    """Return ``value`` as a finite float, or None when it is not one."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def validate_coordinate(lat, lng) -> ValidationResult:
    if lat is None or lng is None:
        return ValidationResult(False, reason='missing')

    lat_value = _as_finite_number(lat)
    lng_value = _as_finite_number(lng)
    if lat_value is None or lng_value is None:
        return ValidationResult(False, reason='invalid_number')
    if not -90 <= lat_value <= 90:
        return ValidationResult(False, reason='lat_out_of_range')
    if not -180 <= lng_value <= 180:
        return ValidationResult(False, reason='lng_out_of_range')
    return ValidationResult(True, Coordinate(lat_value, lng_value))


def validate_elevation(elevation) -> ValidationResult:
    """Elevation is optional: None is valid and stays None."""
    if elevation is None:
        return ValidationResult(True, None)

    value = _as_finite_number(elevation)
    if value is None:
        return ValidationResult(False, None, 'invalid_number')
    if not MIN_ELEVATION_M <= value <= MAX_ELEVATION_M:
        return ValidationResult(False, None, 'out_of_range')
    return ValidationResult(True, value)


def _coerce_timestamp(value) -> Optional[datetime]:
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            return None
    if not isinstance(value, datetime) or pd.isna(value):
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def validate_timestamp(timestamp, prev_valid_timestamp: Optional[datetime] = None) -> ValidationResult:
    """
    Accept None, reject unparseable values and anything earlier than the
    last accepted timestamp. Equal timestamps are allowed.
    """
    if timestamp is None:
        return ValidationResult(True, None)

    value = _coerce_timestamp(timestamp)
    if value is None:
        return ValidationResult(False, None, 'invalid_date')
    if prev_valid_timestamp is not None and value < prev_valid_timestamp:
        return ValidationResult(False, None, 'not_chronological')
    return ValidationResult(True, value)


def validate_parsed_data(raw: RawRoute) -> ValidatedData:
    """
    Validate every point of a parsed route.

    Returns index-aligned lists of length ``len(raw.coordinates) - skipped``
    along with the number of dropped points and one warning per problem.
    """
    coordinates: List[Coordinate] = []
    elevations: List[Optional[float]] = []
    timestamps: List[Optional[datetime]] = []
    heart_rates: List[Optional[float]] = []
    cadences: List[Optional[float]] = []
    powers: List[Optional[float]] = []
    speeds: List[Optional[float]] = []
    warnings: List[str] = []
    skipped = 0
    last_valid_timestamp = None

    for i, point in enumerate(raw.coordinates):
        lat = getattr(point, 'lat', None) if point is not None else None
        lng = getattr(point, 'lng', None) if point is not None else None
        coord_check = validate_coordinate(lat, lng)
        if not coord_check.valid:
            skipped += 1
            warnings.append(f"Point {i}: skipped ({coord_check.reason})")
            continue

        elev_check = validate_elevation(value_at(raw.elevations, i))
        if not elev_check.valid:
            warnings.append(f"Point {i}: elevation dropped ({elev_check.reason})")

        ts_check = validate_timestamp(value_at(raw.timestamps, i), last_valid_timestamp)
        if not ts_check.valid:
            warnings.append(f"Point {i}: timestamp dropped ({ts_check.reason})")
        elif ts_check.value is not None:
            last_valid_timestamp = ts_check.value

        coordinates.append(coord_check.value)
        elevations.append(elev_check.value)
        timestamps.append(ts_check.value)
        heart_rates.append(_as_finite_number(value_at(raw.heart_rates, i)))
        cadences.append(_as_finite_number(value_at(raw.cadences, i)))
        powers.append(_as_finite_number(value_at(raw.powers, i)))
        speeds.append(_as_finite_number(value_at(raw.speeds, i)))

    if warnings:
        logger.warning(
            "Validation of %s: %d point(s) skipped, %d warning(s)",
            raw.filename or '<route>', skipped, len(warnings),
        )

    return ValidatedData(
        coordinates=coordinates,
        elevations=elevations,
        timestamps=timestamps,
        heart_rates=heart_rates,
        cadences=cadences,
        powers=powers,
        speeds=speeds,
        skipped=skipped,
        warnings=warnings,
    )
