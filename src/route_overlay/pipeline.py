"""Turn parsed records into analysis-ready ``Route`` objects."""

from __future__ import annotations

import logging

from route_overlay.cleaning import clean_gps_data
from route_overlay.constants import CLEAN_MAX_SPEED_KMH
from route_overlay.loader import RouteParseError, load_raw_route
from route_overlay.metrics import calculate_route_stats, compute_speeds_and_paces, paces_from_speeds
from route_overlay.models import RawRoute, Route
from route_overlay.stats import rolling_median
from route_overlay.validation import validate_parsed_data


logger = logging.getLogger(__name__)


def build_route(raw: RawRoute, max_speed_kmh: float = CLEAN_MAX_SPEED_KMH) -> Route:
    """
    Validate, derive speed/pace, clean and summarize one parsed recording.

    Device speeds (FIT) are used when the recording carries any; otherwise
    speed comes from consecutive positions. Samples rejected by cleaning stay
    None after the rolling median, so speed and pace share their gaps.
    Pace is derived as 60/speed from the smoothed speeds rather than
    smoothed on its own.

    Raises:
        RouteParseError: when no point survives validation.
    """
    data = validate_parsed_data(raw)
    if not data.coordinates:
        raise RouteParseError(f"No valid track points in {raw.filename or 'route'}")

    if any(s is not None for s in data.speeds):
        speeds = list(data.speeds)
        paces = paces_from_speeds(speeds)
    else:
        speeds, paces = compute_speeds_and_paces(data.coordinates, data.timestamps)

    cleaned = clean_gps_data(speeds, paces, data.coordinates, data.timestamps, max_speed_kmh)
    rejected = len(speeds) - len(cleaned.valid_indices)
    if rejected:
        logger.debug("%s: cleaning rejected %d of %d speed samples", raw.filename, rejected, len(speeds))

    smoothed = rolling_median(cleaned.speeds)
    speeds = [s if cleaned.speeds[i] is not None else None for i, s in enumerate(smoothed)]

    return Route(
        coordinates=data.coordinates,
        elevations=data.elevations,
        timestamps=data.timestamps,
        heart_rates=data.heart_rates,
        cadences=data.cadences,
        powers=data.powers,
        speeds=speeds,
        paces=paces_from_speeds(speeds),
        filename=raw.filename,
        stats=calculate_route_stats(data.coordinates, data.elevations, data.timestamps),
        skipped=data.skipped,
        warnings=list(data.warnings),
    )


def load_route(path: str, max_speed_kmh: float = CLEAN_MAX_SPEED_KMH) -> Route:
    """Parse a .gpx/.fit file and build its Route."""
    return build_route(load_raw_route(path), max_speed_kmh)
